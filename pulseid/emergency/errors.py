"""Error kinds raised by the emergency codec.

NotAvailable is not an exception: normalizer failures are reported as None.
"""

from __future__ import annotations


class InvalidUnit(ValueError):
    """Unrecognized height or weight unit."""

    def __init__(self, unit: object):
        self.unit = unit
        super().__init__(f"Unrecognized unit: {unit!r}")


class EmergencyCodecError(Exception):
    """Base class for failures that abort the viewer flow."""


class DecodeError(EmergencyCodecError):
    """Transport text is not a parseable compact payload."""


class MissingRequiredField(EmergencyCodecError):
    def __init__(self, fields: list[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required field(s): {', '.join(self.fields)}")


class PayloadTooLarge(EmergencyCodecError):
    def __init__(self, length: int, limit: int, level: str):
        self.length = length
        self.limit = limit
        self.level = level
        super().__init__(
            f"Viewer URL is {length} bytes; error-correction level {level} allows {limit}"
        )
