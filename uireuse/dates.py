# uireuse/dates.py
"""
@file dates.py
@brief Relative dates for test data: keywords or explicit date strings, formatted.

    resolve_date("today", "mm/dd/yyyy")      -> "01/17/2020"
    resolve_date("nextYear", "yyyymmdd")     -> "20210117"
    resolve_date("2020-02-29", "dd.mm.yyyy") -> "29.02.2020"

Month and year arithmetic keep the day of month and roll any overflow into
the following month: Jan 31 + 1 month is Mar 2 (Mar 3 in leap years), and
Feb 29 + 1 year is Mar 1.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional, Union

from .exceptions import PreconditionError

DateLike = Union[date, datetime]

FORMATS: Dict[str, Callable[[datetime], object]] = {
    "mm/dd/yyyy": lambda d: d.strftime("%m/%d/%Y"),
    "dd.mm.yyyy": lambda d: d.strftime("%d.%m.%Y"),
    "dd/mm/yyyy": lambda d: d.strftime("%d/%m/%Y"),
    "yyyymmdd": lambda d: d.strftime("%Y%m%d"),
    "yyyy/mm/dd": lambda d: d.strftime("%Y/%m/%d"),
    "dd.mm.yyyy.HH.MM": lambda d: d.strftime("%d.%m.%Y.%H.%M"),
    "datetime": lambda d: d.isoformat(timespec="seconds"),
    "object": lambda d: d,
}

# Explicit date strings that are not ISO 8601.
PARSE_FORMATS = (
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%d.%m.%Y",
    "%d.%m.%Y.%H.%M",
    "%Y%m%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def _as_datetime(value: Optional[DateLike]) -> datetime:
    if value is None:
        return datetime.now()
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def _shift_months(moment: datetime, months: int) -> datetime:
    years, month0 = divmod(moment.month - 1 + months, 12)
    first = moment.replace(year=moment.year + years, month=month0 + 1, day=1)
    return first + timedelta(days=moment.day - 1)


def format_date(moment: datetime, fmt: Optional[str] = "object") -> object:
    """
    Format a date with one of the names in FORMATS.

    @throws ValueError for an unknown format name
    """
    formatter = FORMATS.get(fmt or "object")
    if formatter is None:
        raise ValueError(f"Unknown date format: {fmt!r}. Use one of {sorted(FORMATS)}")
    return formatter(moment)


def parse_date(text: str) -> datetime:
    """
    Parse an explicit date string (ISO 8601 or one of PARSE_FORMATS).

    @throws ValueError if the text matches no known layout
    """
    candidate = text.strip()
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        pass
    for layout in PARSE_FORMATS:
        try:
            return datetime.strptime(candidate, layout)
        except ValueError:
            continue
    raise ValueError(f"Unrecognized date string: {text!r}")


def today(fmt: Optional[str] = "object", now: Optional[DateLike] = None) -> object:
    return format_date(_as_datetime(now), fmt)


def tomorrow(fmt: Optional[str] = "object", now: Optional[DateLike] = None) -> object:
    return format_date(_as_datetime(now) + timedelta(days=1), fmt)


def next_month(fmt: Optional[str] = "object", now: Optional[DateLike] = None) -> object:
    return format_date(_shift_months(_as_datetime(now), 1), fmt)


def previous_month(fmt: Optional[str] = "object", now: Optional[DateLike] = None) -> object:
    return format_date(_shift_months(_as_datetime(now), -1), fmt)


def next_year(fmt: Optional[str] = "object", now: Optional[DateLike] = None) -> object:
    return format_date(_shift_months(_as_datetime(now), 12), fmt)


def previous_year(fmt: Optional[str] = "object", now: Optional[DateLike] = None) -> object:
    return format_date(_shift_months(_as_datetime(now), -12), fmt)


def specific_date(text: Optional[str] = None, fmt: Optional[str] = "object") -> object:
    """
    Format an explicit date string.

    @throws PreconditionError if no date string is given
    """
    if not text:
        raise PreconditionError(
            "specific_date", ["date string"], hint="Example: '2020-01-17'."
        )
    return format_date(parse_date(text), fmt)


KEYWORDS: Dict[str, Callable[..., object]] = {
    "today": today,
    "tomorrow": tomorrow,
    "nextMonth": next_month,
    "previousMonth": previous_month,
    "nextYear": next_year,
    "previousYear": previous_year,
}


def resolve_date(
    date: Optional[str] = "today",
    fmt: Optional[str] = "object",
    now: Optional[DateLike] = None,
) -> object:
    """
    Resolve a keyword or an explicit date string to a formatted date.

    @param date One of KEYWORDS or an explicit date string (None means "today")
    @param fmt Output format name from FORMATS (None means "object")
    @param now Reference moment for keywords (the current time if None)
    @return A string, or a datetime for the "object" format
    """
    keyword = date if date is not None else "today"
    handler = KEYWORDS.get(keyword)
    if handler is not None:
        return handler(fmt, now)
    return specific_date(keyword, fmt)
