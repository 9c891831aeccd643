from rest_framework import serializers

from .common import CleanCharField, color_field


class _CatalogEntrySerializer(serializers.Serializer):
    name = CleanCharField(max_length=120)
    active = serializers.BooleanField(required=False, default=True)

    def validate_name(self, v):
        if not v:
            raise serializers.ValidationError('El nombre es obligatorio')
        return v


class DoctorSerializer(_CatalogEntrySerializer):
    color = color_field()


class AssistantSerializer(_CatalogEntrySerializer):
    pass


class PatientSerializer(_CatalogEntrySerializer):
    recordNumber = CleanCharField(max_length=64, required=False, allow_blank=True, default='')
    defaultTooth = CleanCharField(max_length=64, required=False, allow_blank=True, default='')
