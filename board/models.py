"""
Database models for the kiosk board.

``RoomState`` holds the single current snapshot of each physical room;
it is overwritten on every assignment and never keeps history.  The
catalog models (doctors, assistants, patients) only feed the admin
panel: their values are copied into a snapshot at assignment time, so
editing a catalog entry never changes what a kiosk is showing.
"""
from __future__ import annotations

from django.db import models


class RoomState(models.Model):
    """Latest assignment for one room.

    ``payload`` is ``None`` while the room is free, otherwise the
    normalized assignment dict (``doctorName``, ``doctorColor``,
    ``assistantName``, ``patientName``, ``recordNumber``, ``type``,
    ``tooth``, ``scheduledAt``).
    """
    room_id = models.PositiveIntegerField(unique=True)
    payload = models.JSONField(null=True, blank=True)
    updated_at = models.DateTimeField()

    class Meta:
        db_table = 'room_state'
        ordering = ['room_id']

    def __str__(self) -> str:
        state = self.payload.get('doctorName') if self.payload else 'libre'
        return f"Cubículo {self.room_id}: {state}"


class Doctor(models.Model):
    name = models.CharField(max_length=120)
    # '#RGB' or '#RRGGBB', used as the kiosk background
    color = models.CharField(max_length=7)
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class Assistant(models.Model):
    name = models.CharField(max_length=120)
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class Patient(models.Model):
    """Patient catalog entry.

    Only the name is ever shown on a kiosk.  ``record_number`` and
    ``default_tooth`` pre-fill the assignment form and can be overridden
    per assignment.
    """
    name = models.CharField(max_length=120)
    record_number = models.CharField(max_length=64, blank=True)
    default_tooth = models.CharField(max_length=64, blank=True)
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ['name']

    def __str__(self) -> str:
        return f"{self.name} ({self.record_number or 's/n'})"
