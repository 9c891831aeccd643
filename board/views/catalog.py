"""
Catalog endpoints for doctors, assistants and patients.

Each endpoint answers ``GET`` (list sorted by name), ``POST`` (create,
or update when ``_id`` is given) and ``DELETE`` (id from the ``id``
query parameter or ``_id`` in the body).  Listing is public so the
admin panel selectors can load; mutations need the admin session.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from ..permissions import IsKioskAdminOrReadOnly
from ..services import catalog


def _handle(request, cat: catalog.Catalog):
    if request.method == 'GET':
        return Response({'ok': True, 'items': cat.list_items()})
    if request.method == 'POST':
        return Response({'ok': True, **cat.save(request.data)})
    # DELETE
    raw_id = request.query_params.get('id')
    if not raw_id and hasattr(request.data, 'get'):
        raw_id = request.data.get('_id') or request.data.get('id')
    return Response({'ok': True, 'deletedCount': cat.delete(raw_id)})


@api_view(['GET', 'POST', 'DELETE'])
@permission_classes([IsKioskAdminOrReadOnly])
def doctors(request):
    return _handle(request, catalog.doctors)


@api_view(['GET', 'POST', 'DELETE'])
@permission_classes([IsKioskAdminOrReadOnly])
def assistants(request):
    return _handle(request, catalog.assistants)


@api_view(['GET', 'POST', 'DELETE'])
@permission_classes([IsKioskAdminOrReadOnly])
def patients(request):
    return _handle(request, catalog.patients)
