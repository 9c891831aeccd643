import pytest
from django.urls import reverse
from rest_framework.test import APIClient


def test_login_me_logout(admin_pin):
    client = APIClient()
    assert client.get(reverse('admin_me')).data == {'ok': True, 'isAdmin': False}

    r = client.post(reverse('admin_login'), {'pin': admin_pin}, format='json')
    assert r.status_code == 200
    assert r.data == {'ok': True}
    assert 'kiosco_admin' in r.cookies
    assert client.get(reverse('admin_me')).data['isAdmin'] is True

    r = client.post(reverse('admin_logout'))
    assert r.status_code == 200
    assert client.get(reverse('admin_me')).data['isAdmin'] is False


def test_wrong_pin(admin_pin):
    client = APIClient()
    r = client.post(reverse('admin_login'), {'pin': '0000'}, format='json')
    assert r.status_code == 401
    assert r.data['ok'] is False
    assert client.get(reverse('admin_me')).data['isAdmin'] is False


def test_missing_pin(admin_pin):
    r = APIClient().post(reverse('admin_login'), {}, format='json')
    assert r.status_code == 400
    assert r.data['error']['code'] == 'validation_error'


def test_unset_pin_never_matches(settings):
    settings.ADMIN_PIN = ''
    r = APIClient().post(reverse('admin_login'), {'pin': 'x'}, format='json')
    assert r.status_code == 401


def test_tampered_cookie_is_not_admin(admin_pin):
    client = APIClient()
    client.post(reverse('admin_login'), {'pin': admin_pin}, format='json')
    client.cookies['kiosco_admin'] = client.cookies['kiosco_admin'].value + 'x'
    assert client.get(reverse('admin_me')).data['isAdmin'] is False


@pytest.mark.django_db
def test_healthz():
    r = APIClient().get('/healthz')
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True, 'room_state_count': 0}


def test_session_cookie_is_same_site_lax(admin_pin):
    r = APIClient().post(reverse('admin_login'), {'pin': admin_pin}, format='json')
    morsel = r.cookies['kiosco_admin']
    assert morsel['samesite'] == 'Lax'
    assert morsel['httponly']
