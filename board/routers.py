"""
URL mappings for the kiosk board API.

Paths mirror the ones the admin panel and the kiosk displays call.
Room ids are captured as strings so that a malformed id is answered
with the regular validation envelope instead of a bare 404.  Trailing
slashes are deliberately omitted.
"""
from django.urls import path, include

from .views import admin_session, catalog, health, rooms


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Room snapshots
    path('api/rooms', rooms.room_list, name='room_list'),
    path('api/rooms/<str:room_id>/current', rooms.room_current, name='room_current'),
    path('api/rooms/<str:room_id>/update', rooms.room_update, name='room_update'),
    path('api/rooms/<str:room_id>/assign', rooms.room_assign, name='room_assign'),
    path('api/rooms/<str:room_id>/clear', rooms.room_clear, name='room_clear'),
    # Catalogs
    path('api/catalog/doctors', catalog.doctors, name='catalog_doctors'),
    path('api/catalog/assistants', catalog.assistants, name='catalog_assistants'),
    path('api/catalog/patients', catalog.patients, name='catalog_patients'),
    # Admin session
    path('api/admin/login', admin_session.admin_login, name='admin_login'),
    path('api/admin/me', admin_session.admin_me, name='admin_me'),
    path('api/admin/logout', admin_session.admin_logout, name='admin_logout'),
]
