"""Due-date handling.

Two separate policies live here:

- ``format_due_suffix`` turns an Asana due date into the ``[M/D期限]`` suffix
  appended to the Google Task title.
- ``fixed_due_timestamp`` computes the single due time shared by every
  Google Task created in a run (today at 09:00 local time, in UTC). The
  Asana due date does not influence it.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_due(value: str) -> datetime:
    """Parse an Asana due value into an aware UTC datetime."""
    if len(value) == 10 and DATE_ONLY.match(value):
        # Date-only values are pinned to UTC midnight so the local zone can't shift the day
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)

    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_due_suffix(due_on: str | None, due_at: str | None) -> str:
    """Format an Asana due date as a title suffix.

    Args:
        due_on: Date-only due date ("YYYY-MM-DD").
        due_at: Due timestamp (ISO 8601). Takes precedence over ``due_on``.

    Returns:
        "[M/D期限]" using the UTC month and day, or "" when there is no due
        date or it cannot be parsed.
    """
    value = due_at or due_on
    if not value:
        return ""

    try:
        parsed = _parse_due(value)
    except (TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Could not format Asana due date {value!r}: {e}")
        return ""

    return f"[{parsed.month}/{parsed.day}期限]"


def fixed_due_timestamp(
    tz_name: str = "Asia/Tokyo",
    hour: int = 9,
    now: datetime | None = None,
) -> str:
    """Today's ``hour`` o'clock in ``tz_name``, as an RFC 3339 UTC string.

    Args:
        tz_name: IANA timezone that defines "today".
        hour: Local hour of the due time.
        now: Current instant. Naive values are taken as UTC.

    Returns:
        Timestamp like "2025-03-05T00:00:00.000Z".
    """
    zone = ZoneInfo(tz_name)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    local_today = now.astimezone(zone).date()
    due = datetime.combine(local_today, time(hour=hour), tzinfo=zone).astimezone(timezone.utc)
    return f"{due.strftime('%Y-%m-%dT%H:%M:%S')}.{due.microsecond // 1000:03d}Z"
