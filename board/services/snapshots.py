"""
Room snapshot update/read protocol.

A room snapshot is overwritten as a whole on every assignment (last
write wins) and nothing is kept of earlier assignments.  The payload is
a denormalized copy: names and the doctor's color are copied in at
write time and never re-read from the catalogs.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone as dt_timezone
from typing import Any, Callable, Optional

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from rest_framework.exceptions import NotFound, ValidationError

from board.models import Assistant, Doctor, Patient
from board.serializers.rooms import AssignFromCatalogSerializer, RoomPayloadSerializer
from board.services.store import RoomSnapshotStore, StoredSnapshot

logger = logging.getLogger(__name__)

HHMM_RE = re.compile(r'^\d{2}:\d{2}$')


def to_iso(moment: datetime) -> str:
    """Canonical timestamp: UTC, millisecond precision, ``Z`` suffix."""
    return moment.astimezone(dt_timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def parse_room_id(raw) -> int:
    text = str(raw if raw is not None else '').strip()
    if not (text.isascii() and text.isdigit()) or int(text) < 1:
        raise ValidationError({'roomId': ['roomId inválido']})
    return int(text)


def _parse_absolute(value: str) -> Optional[datetime]:
    try:
        parsed = parse_datetime(value)
    except ValueError:
        return None
    if parsed is None:
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, timezone.get_current_timezone())
    return parsed


def normalize_scheduled_at(value: Optional[str], *, now: Optional[datetime] = None,
                           lenient: Optional[bool] = None) -> str:
    """Turn the ``scheduledAt`` input into a canonical timestamp.

    ``HH:MM`` is read as a local time of day on the server's current
    date.  Anything else must be an ISO 8601 timestamp.  Missing or
    empty input means "now".  Malformed input raises a validation error
    unless ``lenient`` (default: ``KIOSK_LENIENT_SCHEDULED_AT``), in
    which case it also falls back to "now".
    """
    now = now or timezone.now()
    if lenient is None:
        lenient = settings.KIOSK_LENIENT_SCHEDULED_AT
    value = (value or '').strip()
    if not value:
        return to_iso(now)

    if HHMM_RE.match(value):
        hh, mm = int(value[:2]), int(value[3:])
        if hh < 24 and mm < 60:
            local = timezone.localtime(now)
            return to_iso(local.replace(hour=hh, minute=mm, second=0, microsecond=0))
    else:
        parsed = _parse_absolute(value)
        if parsed is not None:
            return to_iso(parsed)

    if lenient:
        logger.warning('unparsable scheduledAt %r, using current time', value)
        return to_iso(now)
    raise ValidationError({'scheduledAt': ['Hora inválida: use HH:MM o una fecha ISO 8601']})


def _as_response(room_id: int, stored: Optional[StoredSnapshot]) -> dict[str, Any]:
    if stored is None:
        return {'roomId': room_id, 'payload': None, 'updatedAt': None}
    return {
        'roomId': stored.room_id,
        'payload': stored.payload,
        'updatedAt': to_iso(stored.updated_at),
    }


class RoomSnapshotService:
    """Validates, normalizes and stores room assignments.

    The store and the clock are injected so that callers own their
    lifecycle; views build one service per request via
    :func:`get_snapshot_service`.
    """

    def __init__(self, store: RoomSnapshotStore, *, clock: Callable[[], datetime] = timezone.now):
        self.store = store
        self.clock = clock

    # -- reads ---------------------------------------------------------------

    def read(self, room_id) -> dict[str, Any]:
        rid = parse_room_id(room_id)
        return _as_response(rid, self.store.find(rid))

    def read_all(self, room_ids: list[int]) -> list[dict[str, Any]]:
        found = self.store.find_many(room_ids)
        return [_as_response(rid, found.get(rid)) for rid in room_ids]

    # -- writes --------------------------------------------------------------

    def update(self, room_id, data) -> dict[str, Any]:
        """Validate ``data`` and overwrite the room's snapshot with it."""
        rid = parse_room_id(room_id)
        s = RoomPayloadSerializer(data=data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        now = self.clock()
        payload = {
            'doctorName': vd['doctorName'],
            'doctorColor': vd['doctorColor'],
            'assistantName': vd['assistantName'],
            'patientName': vd['patientName'],
            'recordNumber': vd['recordNumber'],
            'type': vd.get('type'),
            'tooth': vd['tooth'],
            'scheduledAt': normalize_scheduled_at(vd.get('scheduledAt'), now=now),
        }
        self.store.upsert(rid, payload, now)
        logger.info('room %s assigned to %s', rid, payload['doctorName'])
        return {'roomId': rid, 'payload': payload}

    def assign_from_catalog(self, room_id, data) -> dict[str, Any]:
        """Build an assignment from catalog ids and store it.

        Catalog values are copied at this moment; the stored snapshot
        keeps no reference to the catalog rows.
        """
        rid = parse_room_id(room_id)
        s = AssignFromCatalogSerializer(data=data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data

        doctor = Doctor.objects.filter(pk=vd['doctorId']).first()
        if not doctor:
            raise NotFound('doctor no encontrado')
        assistant = None
        if vd.get('assistantId'):
            assistant = Assistant.objects.filter(pk=vd['assistantId']).first()
            if not assistant:
                raise NotFound('asistente no encontrado')
        patient = None
        if vd.get('patientId'):
            patient = Patient.objects.filter(pk=vd['patientId']).first()
            if not patient:
                raise NotFound('paciente no encontrado')

        record_number = vd.get('recordNumber')
        if record_number is None:
            record_number = patient.record_number if patient else ''
        tooth = vd.get('tooth')
        if tooth is None:
            tooth = patient.default_tooth if patient else ''

        body = {
            'doctorName': doctor.name,
            'doctorColor': doctor.color,
            'assistantName': assistant.name if assistant else '',
            'patientName': patient.name if patient else '',
            'recordNumber': record_number,
            'tooth': tooth,
            'scheduledAt': vd.get('scheduledAt'),
        }
        if vd.get('type'):
            body['type'] = vd['type']
        return self.update(rid, body)

    def clear(self, room_id) -> dict[str, Any]:
        """Mark the room as free."""
        rid = parse_room_id(room_id)
        self.store.upsert(rid, None, self.clock())
        logger.info('room %s cleared', rid)
        return {'roomId': rid, 'payload': None}


def get_snapshot_service() -> RoomSnapshotService:
    return RoomSnapshotService(RoomSnapshotStore())
