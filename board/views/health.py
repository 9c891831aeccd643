import logging

from django.db import DatabaseError
from django.http import JsonResponse

from ..services.store import RoomSnapshotStore

logger = logging.getLogger(__name__)


def healthz(request):
    try:
        count = RoomSnapshotStore().count()
        return JsonResponse({'ok': True, 'db': True, 'room_state_count': count})
    except DatabaseError as e:
        logger.error('health check failed: %s', e)
        return JsonResponse({'ok': False, 'db': False, 'error': str(e)}, status=500)
