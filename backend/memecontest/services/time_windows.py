from __future__ import annotations
from datetime import date, datetime, timedelta, timezone as dt_tz


def utc_now() -> datetime:
    return datetime.now(dt_tz.utc)


def day_key(d: date | datetime) -> str:
    """
    Contest day identifier for a date or an aware datetime.

    Datetimes are converted to UTC first, so a submission made at
    23:30 in New York on Jan 10 belongs to the Jan 11 contest.

    Examples:
        >>> day_key(date(2026, 2, 5))
        '2026-02-05'
        >>> day_key(datetime(2026, 2, 5, 23, 30, tzinfo=dt_tz(timedelta(hours=-5))))
        '2026-02-06'
    """
    if isinstance(d, datetime):
        if d.tzinfo is None:
            d = d.replace(tzinfo=dt_tz.utc)
        d = d.astimezone(dt_tz.utc).date()
    return d.isoformat()


def utc_today(now: datetime | None = None) -> str:
    return day_key(now or utc_now())


def parse_day(day: str) -> date:
    """Parse a YYYY-MM-DD day key. Raises ValueError on anything else."""
    d = date.fromisoformat(day)
    if d.isoformat() != day:
        # 3.11+ also accepts "20260205" and week dates
        raise ValueError(f"not a YYYY-MM-DD day: {day!r}")
    return d


def previous_day(day: str) -> str:
    return (parse_day(day) - timedelta(days=1)).isoformat()


def gap_days(earlier: str, later: str) -> int:
    """
    Whole calendar days from `earlier` to `later`. Negative when `later`
    precedes `earlier`.

    Examples:
        >>> gap_days("2026-02-28", "2026-03-01")
        1
        >>> gap_days("2026-02-05", "2026-02-03")
        -2
    """
    return (parse_day(later) - parse_day(earlier)).days



def day_range(first: str, last: str) -> list[str]:
    """
    Every day key from `first` to `last`, inclusive. Empty when `last`
    precedes `first`.

    Examples:
        >>> day_range("2026-02-27", "2026-03-01")
        ['2026-02-27', '2026-02-28', '2026-03-01']
    """
    start = parse_day(first)
    return [(start + timedelta(days=i)).isoformat() for i in range(gap_days(first, last) + 1)]
