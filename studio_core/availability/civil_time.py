"""
Civil time to instant conversion.

A wall-clock time on a local date does not always name exactly one
instant. Policy:

- Nonexistent (DST gap, e.g. 02:30 when clocks jump 02:00 -> 03:00):
  interpret with the later, post-transition offset.
- Doubled (DST fold, e.g. 01:30 when clocks fall back 02:00 -> 01:00):
  interpret with the earlier, pre-transition offset.

A gap only occurs when the offset increases and a fold only when it
decreases, so both rules pick the larger UTC offset, which is the earlier
of the two candidate instants.
"""

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo


def get_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def to_instant(day: date, at: time, zone: ZoneInfo) -> datetime:
    """Convert a local date and wall-clock time in ``zone`` to a UTC instant."""
    local = datetime.combine(day, at.replace(tzinfo=None), tzinfo=zone)
    first = local.replace(fold=0).astimezone(timezone.utc)
    second = local.replace(fold=1).astimezone(timezone.utc)
    return min(first, second)


def is_nonexistent(day: date, at: time, zone: ZoneInfo) -> bool:
    """True if the wall-clock time falls in a DST gap."""
    local = datetime.combine(day, at.replace(tzinfo=None), tzinfo=zone)
    round_trip = local.astimezone(timezone.utc).astimezone(zone)
    return round_trip.replace(tzinfo=None) != local.replace(tzinfo=None)


def is_ambiguous(day: date, at: time, zone: ZoneInfo) -> bool:
    """True if the wall-clock time occurs twice (DST fold)."""
    local = datetime.combine(day, at.replace(tzinfo=None), tzinfo=zone)
    if is_nonexistent(day, at, zone):
        return False
    return local.replace(fold=0).utcoffset() != local.replace(fold=1).utcoffset()


def local_day_bounds(day: date, zone: ZoneInfo) -> tuple[datetime, datetime]:
    """UTC instants of local midnight at the start and end of ``day``."""
    start = to_instant(day, time(0, 0), zone)
    end = to_instant(date.fromordinal(day.toordinal() + 1), time(0, 0), zone)
    return start, end
