from __future__ import annotations

from datetime import datetime, timezone


def utcnow_iso() -> str:
    """Current UTC time as ISO-8601 string with microseconds and Z.

    Microseconds are kept so rows created within the same second still
    sort by creation time.
    """
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def current_year() -> int:
    return datetime.now(timezone.utc).year
