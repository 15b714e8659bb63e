"""Lenient date parsing for match records."""

import logging
import re
from datetime import date, datetime, timezone
from typing import Optional

from lzv import RawDate

log = logging.getLogger(__name__)

# "+00" style offsets as written by PostgreSQL TIMESTAMPTZ
_SHORT_OFFSET_RE = re.compile(r'([+-]\d{2})$')


def _as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_string(text: str) -> Optional[datetime]:
    text = text.strip()
    if not text:
        return None
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    text = _SHORT_OFFSET_RE.sub(r'\1:00', text) if 'T' in text or ' ' in text else text

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    # "2025-01-15 22:00:00" without the ISO 'T'
    if ' ' in text:
        try:
            return datetime.fromisoformat(text.replace(' ', 'T', 1))
        except ValueError:
            pass

    log.debug("Datum nicht lesbar: %r", text)
    return None


def parse_date(value: RawDate) -> Optional[datetime]:
    """Parse a raw match date into a timezone-aware UTC datetime.

    Accepts ISO 8601 strings (also the PostgreSQL "YYYY-MM-DD HH:MM:SS+00"
    form), epoch milliseconds as scraped from the league site, and
    date/datetime objects. Naive values are taken as UTC.

    Args:
        value: Raw date value.

    Returns:
        Parsed datetime, or None if the value is blank or unparseable.

    Raises:
        TypeError: If the value has an unsupported type.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, bool):
        raise TypeError(f"Ungueltiger Datumstyp: {type(value).__name__}")
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            log.debug("Zeitstempel ausserhalb des Bereichs: %r", value)
            return None
    if isinstance(value, str):
        parsed = _parse_string(value)
        return _as_utc(parsed) if parsed else None
    raise TypeError(f"Ungueltiger Datumstyp: {type(value).__name__}")


def timestamp_or_zero(value: RawDate) -> float:
    """Return the POSIX timestamp of a raw date, 0.0 if it cannot be parsed."""
    parsed = parse_date(value)
    return parsed.timestamp() if parsed else 0.0


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """Return the evaluation time as an aware UTC datetime."""
    if now is None:
        return datetime.now(timezone.utc)
    return _as_utc(now)
