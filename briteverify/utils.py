"""Helpers for coercing loosely-typed BriteVerify wire values."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

LOGGER = logging.getLogger(__name__)

# Bulk list timestamps look like "08-10-2021 04:03 pm" and carry no zone; they are UTC.
LIST_TIMESTAMP_FORMAT = "%m-%d-%Y %I:%M %p"

_TIMESTAMP_FORMATS = (
    LIST_TIMESTAMP_FORMAT,
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
)


def unquote(value: Any) -> Optional[str]:
    """Strip surrounding quotes and whitespace; blank becomes None."""
    if value is None:
        return None
    text = str(value).strip().strip("\"'").strip()
    return text or None


def empty_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    return value


def normalise_token(value: Any) -> str:
    """Lowercase a remote enum value and fold '-' and ' ' into '_'."""
    text = unquote(value) or ""
    return text.lower().replace("-", "_").replace(" ", "_")


def parse_bool(value: Any) -> bool:
    """Accept real booleans as well as "true"/"false" strings."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = normalise_token(value)
    if text in ("true", "1", "yes"):
        return True
    if text in ("false", "0", "no", ""):
        return False
    raise ValueError(f"Cannot interpret {value!r} as a boolean")


def parse_int(value: Any, default: Optional[int] = 0) -> Optional[int]:
    """Accept ints and numeric strings (the export API sends both)."""
    if value is None or value == "":
        return default
    return int(value)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a BriteVerify timestamp into an aware UTC datetime.

    Unparsable values are logged and returned as None rather than failing
    the surrounding response.
    """
    text = empty_to_none(value)
    if text is None:
        return None
    if isinstance(text, datetime):
        return text

    for fmt in _TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    LOGGER.warning("Unparsable timestamp value: %r", text)
    return None


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a timestamp in UTC, as the inverse of ``parse_timestamp``.

    Minute-precision values use the bulk list format; anything finer is
    written as ISO 8601 so seconds are not lost.
    """
    if value is None:
        return None
    value = value.astimezone(timezone.utc)
    if value.second or value.microsecond:
        return value.isoformat()
    return value.strftime(LIST_TIMESTAMP_FORMAT).replace("AM", "am").replace("PM", "pm")


def external_id_to_str(value: Any) -> Optional[str]:
    """External ids arrive as strings or bare numbers."""
    if isinstance(value, (dict, list)):
        raise ValueError(f"External id must be a scalar value, got {value!r}")
    return unquote(value)
