import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

ADMIN_PIN = '4321'


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    # DRF throttles keep their counters in the default cache.
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def admin_pin(settings):
    settings.ADMIN_PIN = ADMIN_PIN
    return ADMIN_PIN


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def admin_client(admin_pin):
    client = APIClient()
    r = client.post('/api/admin/login', {'pin': admin_pin}, format='json')
    assert r.status_code == 200
    return client
