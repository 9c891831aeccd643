"""
Room snapshot endpoints.

Kiosks poll ``GET /api/rooms/<id>/current`` without any session; every
write goes through the admin session gate.  Responses under
``/api/rooms`` are marked ``no-store`` by
:class:`board.middleware.RoomNoStoreMiddleware`.
"""
from __future__ import annotations

from django.conf import settings
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from ..permissions import IsKioskAdmin
from ..services.snapshots import get_snapshot_service


@api_view(['GET'])
@permission_classes([AllowAny])
def room_current(request, room_id: str):
    """Current snapshot of one room, ``payload: null`` when the room is free."""
    data = get_snapshot_service().read(room_id)
    return Response({'ok': True, **data})


@api_view(['GET'])
@permission_classes([AllowAny])
def room_list(request):
    """Snapshots of all configured rooms, in room order."""
    items = get_snapshot_service().read_all(list(settings.KIOSK_ROOM_IDS))
    return Response({'ok': True, 'items': items})


@api_view(['POST'])
@permission_classes([IsKioskAdmin])
def room_update(request, room_id: str):
    """Overwrite the room's snapshot with the posted assignment."""
    data = get_snapshot_service().update(room_id, request.data)
    return Response({'ok': True, **data})


@api_view(['POST'])
@permission_classes([IsKioskAdmin])
def room_assign(request, room_id: str):
    """Assign catalog entries (by id) to a room.

    Names and the doctor's color are copied from the catalogs now;
    ``recordNumber``/``tooth`` default to the patient's catalog values.
    """
    data = get_snapshot_service().assign_from_catalog(room_id, request.data)
    return Response({'ok': True, **data})


@api_view(['POST'])
@permission_classes([IsKioskAdmin])
def room_clear(request, room_id: str):
    data = get_snapshot_service().clear(room_id)
    return Response({'ok': True, **data})
