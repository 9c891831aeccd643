from django.utils.cache import add_never_cache_headers


class RoomNoStoreMiddleware:
    """Mark room snapshot responses as uncacheable.

    Kiosks must always see the live snapshot, so no proxy or browser
    cache may keep a copy of anything under ``/api/rooms``.
    """
    PREFIXES = ('/api/rooms',)

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        path = request.path or ''
        if any(path.startswith(p) for p in self.PREFIXES):
            add_never_cache_headers(response)
        return response
