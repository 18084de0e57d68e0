"""Timezone-aware clock utilities.

All timestamps in mapty MUST be timezone-aware.  Workouts are stamped in
the host's local zone so their descriptions read the calendar day the
user saw.  This module is the single source of "now" so tests can
monkey-patch it trivially.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def local_now() -> datetime:
    """Return the current local time as a timezone-aware datetime."""
    return utc_now().astimezone()
