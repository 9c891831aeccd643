"""
PIN based admin session.

A single shared PIN (``settings.ADMIN_PIN``) unlocks the admin panel.
On success the signed session cookie gets ``isAdmin = True``; there is
no per-user identity and no role beyond that flag.
"""
from __future__ import annotations

import logging
import secrets

from django.conf import settings
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from ..permissions import SESSION_FLAG, is_admin_session
from ..serializers.auth import PinLoginSerializer

logger = logging.getLogger(__name__)


class PinLoginThrottle(AnonRateThrottle):
    scope = 'login'


def _pin_matches(pin: str) -> bool:
    expected = settings.ADMIN_PIN or ''
    # An unset PIN never matches, not even an empty one.
    return bool(expected) and secrets.compare_digest(pin.encode(), expected.encode())


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([PinLoginThrottle])
def admin_login(request):
    s = PinLoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    if not _pin_matches(s.validated_data['pin']):
        logger.warning('admin login rejected from %s', request.META.get('REMOTE_ADDR'))
        return Response({'ok': False, 'error': {'code': 'invalid_pin', 'message': 'PIN incorrecto'}}, status=401)
    request.session.cycle_key()
    request.session[SESSION_FLAG] = True
    logger.info('admin login from %s', request.META.get('REMOTE_ADDR'))
    return Response({'ok': True})


@api_view(['GET'])
@permission_classes([AllowAny])
def admin_me(request):
    return Response({'ok': True, 'isAdmin': is_admin_session(request)})


@api_view(['POST'])
@permission_classes([AllowAny])
def admin_logout(request):
    request.session.flush()
    return Response({'ok': True})
