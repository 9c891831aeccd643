import html

import bleach
from rest_framework import serializers

HEX_COLOR_PATTERN = r'^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$'


def clean_text(v):
    """Strip whitespace and any markup from a display string.

    Values are plain text (the kiosk draws them on a terminal), so the
    entities bleach produces are turned back into characters.
    """
    return html.unescape(bleach.clean((v or '').strip(), tags=set(), strip=True)).strip()


class CleanCharField(serializers.CharField):
    """CharField whose value goes through :func:`clean_text`.

    Length validators run on the cleaned value.
    """

    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))


def color_field(**kwargs):
    return serializers.RegexField(
        HEX_COLOR_PATTERN,
        max_length=7,
        error_messages={'invalid': 'color inválido'},
        **kwargs,
    )
