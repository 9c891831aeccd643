"""Key-addressed access to the ``room_state`` table.

The store is the only shared mutable resource of the board.  It offers
exactly two operations, find-by-room and upsert-by-room; concurrent
upserts to the same room are serialized by the database and the last
one to commit wins.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from django.db import transaction

from board.models import RoomState


@dataclass
class StoredSnapshot:
    room_id: int
    payload: Optional[dict[str, Any]]
    updated_at: datetime


class RoomSnapshotStore:
    """Thin wrapper over the ``RoomState`` manager.

    ``using`` selects the database alias, which lets callers point a
    store at a different connection without touching the services.
    """

    def __init__(self, using: str = 'default'):
        self.using = using

    def find(self, room_id: int) -> Optional[StoredSnapshot]:
        row = (
            RoomState.objects.using(self.using)
            .filter(room_id=room_id)
            .values('room_id', 'payload', 'updated_at')
            .first()
        )
        if row is None:
            return None
        return StoredSnapshot(row['room_id'], row['payload'], row['updated_at'])

    def find_many(self, room_ids: list[int]) -> dict[int, StoredSnapshot]:
        rows = RoomState.objects.using(self.using).filter(room_id__in=room_ids)
        return {r.room_id: StoredSnapshot(r.room_id, r.payload, r.updated_at) for r in rows}

    def upsert(self, room_id: int, payload: Optional[dict[str, Any]], updated_at: datetime) -> StoredSnapshot:
        with transaction.atomic(using=self.using):
            RoomState.objects.using(self.using).update_or_create(
                room_id=room_id,
                defaults={'payload': payload, 'updated_at': updated_at},
            )
        return StoredSnapshot(room_id, payload, updated_at)

    def count(self) -> int:
        return RoomState.objects.using(self.using).count()
