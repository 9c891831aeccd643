import logging

from rest_framework import exceptions
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def _error_code(exc) -> str:
    if isinstance(exc, exceptions.ValidationError):
        return 'validation_error'
    if isinstance(exc, exceptions.NotAuthenticated):
        return 'not_authenticated'
    if isinstance(exc, exceptions.PermissionDenied):
        return 'permission_denied'
    if isinstance(exc, exceptions.NotFound):
        return 'not_found'
    return 'api_error'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        # Database/connectivity failures and bugs; nothing is retried.
        logger.exception('unhandled error in %s', context.get('view'))
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    return Response({'ok': False, 'error': {'code': _error_code(exc), 'message': detail}}, status=resp.status_code)
