from __future__ import annotations

import requests


class KioskFetchError(RuntimeError):
    """The current snapshot could not be fetched."""


# Kiosks must never render a cached snapshot.
NO_CACHE_HEADERS = {
    'Cache-Control': 'no-cache, no-store',
    'Pragma': 'no-cache',
}


class SnapshotClient:
    """HTTP access to ``GET /api/rooms/<id>/current``."""

    def __init__(self, base_url: str, *, timeout: float = 10, session: requests.Session | None = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def current(self, room_id: int) -> dict:
        url = f"{self.base_url}/api/rooms/{room_id}/current"
        try:
            r = self.session.get(url, headers=NO_CACHE_HEADERS, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as e:
            raise KioskFetchError(str(e)) from e
        if not isinstance(data, dict) or not data.get('ok'):
            error = data.get('error') if isinstance(data, dict) else None
            raise KioskFetchError(f"server error: {error!r}")
        return data

    def close(self) -> None:
        self.session.close()
