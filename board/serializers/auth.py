from rest_framework import serializers


class PinLoginSerializer(serializers.Serializer):
    pin = serializers.CharField(max_length=64, error_messages={
        'required': 'PIN requerido',
        'blank': 'PIN requerido',
    })
