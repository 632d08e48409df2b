"""Transport codec: compact payload <-> URL-safe text.

The text form is compact JSON. It rides as the single `data` query
parameter of the viewer URL, percent-encoded, and that URL is what goes into
the optical code.
"""

from __future__ import annotations

import json
import logging
from urllib.parse import parse_qs, quote, unquote, urlsplit

from pydantic import ValidationError

from pulseid.config import settings
from pulseid.emergency.errors import DecodeError, PayloadTooLarge
from pulseid.emergency.models import CompactPayload
from pulseid.emergency.schema import SCHEMA_VERSION

logger = logging.getLogger(__name__)

DATA_PARAM = "data"
REPORT_PATH = "/report"

# Byte-mode capacity of the largest optical code (version 40) per error-correction level.
MAX_PAYLOAD_BYTES: dict[str, int] = {
    "L": 2953,
    "M": 2331,
    "Q": 1663,
    "H": 1273,
}


def serialize(payload: CompactPayload) -> str:
    """Compact JSON, sorted keys, absent fields omitted."""
    data = payload.model_dump(mode="json", exclude_none=True)
    return json.dumps(data, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def parse(text: str) -> CompactPayload:
    """Inverse of serialize. Anything but a valid payload object raises DecodeError."""
    if not isinstance(text, str) or not text.strip():
        logger.warning("decode failed: empty payload")
        raise DecodeError("Empty emergency payload")
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as exc:
        logger.warning("decode failed: invalid JSON (%d chars)", len(text))
        raise DecodeError("Emergency payload is not valid JSON") from exc
    if not isinstance(data, dict):
        logger.warning("decode failed: top-level %s", type(data).__name__)
        raise DecodeError(f"Emergency payload must be an object, got {type(data).__name__}")
    try:
        payload = CompactPayload.model_validate(data)
    except ValidationError as exc:
        logger.warning("decode failed: %d validation error(s)", exc.error_count())
        raise DecodeError(f"Emergency payload failed validation ({exc.error_count()} error(s))") from exc
    if payload.v is not None and payload.v != SCHEMA_VERSION:
        logger.warning("decode failed: schema version %s", payload.v)
        raise DecodeError(f"Unsupported payload schema version: {payload.v}")
    return payload


def parse_query_value(value: str) -> CompactPayload:
    """Parse a still percent-encoded `data` value."""
    return parse(unquote(value))


def build_viewer_url(payload: CompactPayload, base_url: str | None = None) -> str:
    base = (base_url or settings.viewer_base_url).rstrip("/")
    return f"{base}{REPORT_PATH}?{DATA_PARAM}={quote(serialize(payload), safe='')}"


def payload_from_url(url: str) -> CompactPayload:
    """Extract and parse the `data` parameter of a viewer URL."""
    values = parse_qs(urlsplit(url).query).get(DATA_PARAM)
    if not values:
        raise DecodeError(f"Viewer URL has no '{DATA_PARAM}' parameter")
    return parse(values[0])


# ---------------------------------------------------------------------------
# Optical-code capacity
# ---------------------------------------------------------------------------


def _level(level: str | None) -> str:
    name = (level or settings.qr_error_correction).upper()
    if name not in MAX_PAYLOAD_BYTES:
        raise ValueError(f"Unknown error-correction level: {level}")
    return name


def max_payload_length(level: str | None = None) -> int:
    return MAX_PAYLOAD_BYTES[_level(level)]


def fits_optical_code(url: str, level: str | None = None) -> bool:
    return len(url.encode("utf-8")) <= max_payload_length(level)


def ensure_fits(url: str, level: str | None = None) -> str:
    """Return `url` unchanged, or raise PayloadTooLarge."""
    name = _level(level)
    length = len(url.encode("utf-8"))
    limit = MAX_PAYLOAD_BYTES[name]
    if length > limit:
        logger.warning("viewer URL too large: %d bytes > %d at level %s", length, limit, name)
        raise PayloadTooLarge(length, limit, name)
    return url
