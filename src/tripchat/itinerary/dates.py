"""Date normalization for assistant-provided timestamps.

The assistant is asked for ``YYYY-MM-DDTHH:MM`` but may send the sentinel
``DATETIME_UNSPECIFIED``, an offset-qualified ISO string, prose, or nothing.
Everything resolves to a canonical local timestamp; nothing raises.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import NamedTuple

from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)

DATETIME_UNSPECIFIED = "DATETIME_UNSPECIFIED"


class NormalizedDateTime(NamedTuple):
    canonical: str
    adjusted: bool


def format_local_datetime(value: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM`` in local time.

    Aware values are converted to the local zone first; naive values are
    taken as already local.
    """
    if value.tzinfo is not None:
        value = value.astimezone()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}T{value.hour:02d}:{value.minute:02d}"


def parse_datetime(raw: str) -> datetime | None:
    """Parse ISO 8601 strictly, then free-form text. None if neither works."""
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        pass
    try:
        return dateutil_parser.parse(raw)
    except Exception:
        # dateutil error types vary with the malformed input
        return None


def normalize_datetime(
    raw: str,
    now: Callable[[], datetime] = datetime.now,
) -> NormalizedDateTime:
    """Resolve a raw date/time string to canonical local form.

    Args:
        raw: Value from the command's dateTime field
        now: Clock used for the fallback

    Returns:
        The canonical string and whether it differs from what was sent
    """
    if raw == DATETIME_UNSPECIFIED or not raw.strip():
        return NormalizedDateTime(format_local_datetime(now()), True)

    parsed = parse_datetime(raw)
    if parsed is not None:
        try:
            canonical = format_local_datetime(parsed)
        except (ValueError, OverflowError):
            # local conversion can overflow at the edges of the calendar
            parsed = None
    if parsed is None:
        logger.debug("Unparsable dateTime %r, using current time", raw)
        return NormalizedDateTime(format_local_datetime(now()), True)

    return NormalizedDateTime(canonical, canonical != raw)
