from rest_framework import serializers

from .common import CleanCharField, color_field

APPOINTMENT_TYPES = ['Primera Vez', 'Emergencia', 'En Tratamiento', 'Otro Diente']


class RoomPayloadSerializer(serializers.Serializer):
    """Body of ``POST /api/rooms/<id>/update``.

    ``scheduledAt`` is kept as the raw string here; normalization to an
    absolute timestamp happens in the snapshot service.
    """
    doctorName = CleanCharField(max_length=120)
    doctorColor = color_field()
    assistantName = CleanCharField(max_length=120, allow_blank=True, default='')
    patientName = CleanCharField(max_length=120, allow_blank=True, default='')
    recordNumber = CleanCharField(max_length=64, allow_blank=True, default='')
    type = serializers.ChoiceField(choices=APPOINTMENT_TYPES, required=False)
    tooth = CleanCharField(max_length=64, allow_blank=True, default='')
    scheduledAt = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)

    def validate_doctorName(self, v):
        if not v:
            raise serializers.ValidationError('doctorName es obligatorio')
        return v


class AssignFromCatalogSerializer(serializers.Serializer):
    """Body of ``POST /api/rooms/<id>/assign``: catalog ids plus overrides.

    ``recordNumber`` and ``tooth`` are left unset (``None``) when absent
    so the patient's catalog values can fill them in.
    """
    doctorId = serializers.IntegerField(min_value=1)
    assistantId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    patientId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    recordNumber = CleanCharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    tooth = CleanCharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    type = serializers.ChoiceField(choices=APPOINTMENT_TYPES, required=False)
    scheduledAt = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
