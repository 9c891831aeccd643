"""
Doctor, assistant and patient catalogs.

All three share the same shape of operations: list sorted by name,
create-or-update depending on whether an id is supplied, and delete by
id.  Each catalog only differs in its model, its serializer and the
mapping between wire names (camelCase) and model fields.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from django.db import models, transaction
from rest_framework.exceptions import NotFound, ValidationError

from board.models import Assistant, Doctor, Patient
from board.serializers.catalog import AssistantSerializer, DoctorSerializer, PatientSerializer

logger = logging.getLogger(__name__)


def parse_catalog_id(raw) -> Optional[int]:
    if raw is None or raw == '':
        return None
    text = str(raw).strip()
    if not (text.isascii() and text.isdigit()) or int(text) < 1:
        raise ValidationError({'_id': ['id inválido']})
    return int(text)


class Catalog:
    #: wire name -> model field
    fields: dict[str, str] = {'name': 'name', 'active': 'active'}
    model: type[models.Model]
    serializer_class: type

    def __init__(self, label: str):
        self.label = label

    def to_item(self, obj) -> dict[str, Any]:
        item = {'_id': str(obj.pk)}
        for wire, attr in self.fields.items():
            item[wire] = getattr(obj, attr)
        return item

    def list_items(self) -> list[dict[str, Any]]:
        return [self.to_item(o) for o in self.model.objects.order_by('name', 'pk')]

    def save(self, data) -> dict[str, Any]:
        """Create an entry, or update it when ``_id``/``id`` is present."""
        if not isinstance(data, Mapping):
            raise ValidationError({'non_field_errors': ['Se esperaba un objeto']})
        pk = parse_catalog_id(data.get('_id') or data.get('id'))
        s = self.serializer_class(data=data)
        s.is_valid(raise_exception=True)
        values = {attr: s.validated_data[wire] for wire, attr in self.fields.items() if wire in s.validated_data}

        if pk is not None:
            with transaction.atomic():
                updated = self.model.objects.filter(pk=pk).update(**values)
            if not updated:
                raise NotFound(f'{self.label} no encontrado')
            logger.info('%s %s updated', self.label, pk)
            return {'action': 'updated', '_id': str(pk)}

        obj = self.model.objects.create(**values)
        logger.info('%s %s created', self.label, obj.pk)
        return {'action': 'created', '_id': str(obj.pk)}

    def delete(self, raw_id) -> int:
        pk = parse_catalog_id(raw_id)
        if pk is None:
            raise ValidationError({'_id': ['Falta id']})
        deleted, _ = self.model.objects.filter(pk=pk).delete()
        if deleted:
            logger.info('%s %s deleted', self.label, pk)
        return deleted


class DoctorCatalog(Catalog):
    model = Doctor
    serializer_class = DoctorSerializer
    fields = {'name': 'name', 'color': 'color', 'active': 'active'}


class AssistantCatalog(Catalog):
    model = Assistant
    serializer_class = AssistantSerializer


class PatientCatalog(Catalog):
    model = Patient
    serializer_class = PatientSerializer
    fields = {
        'name': 'name',
        'recordNumber': 'record_number',
        'defaultTooth': 'default_tooth',
        'active': 'active',
    }


doctors = DoctorCatalog('doctor')
assistants = AssistantCatalog('asistente')
patients = PatientCatalog('paciente')
