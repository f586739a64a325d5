"""
Interval overlap evaluation.

Bookings occupy half-open ranges [checkin, checkout): the checkout day itself is
free, so same-day turnover never conflicts. Administrative blocks are
calendar-day holds with inclusive bounds [date_from, date_to]. Both rules are
kept side by side here so the asymmetry is explicit in one place.
"""

from datetime import date, datetime, timedelta
from typing import Iterator, Union

from sqlalchemy import and_

from app.core.exceptions import InvalidInterval

DateLike = Union[date, datetime]


def as_date(value: DateLike) -> date:
    """Collapse timestamps to their calendar day; dates are the comparison key."""
    if isinstance(value, datetime):
        return value.date()
    return value


def overlaps(start_a: DateLike, end_a: DateLike, start_b: DateLike, end_b: DateLike) -> bool:
    """Half-open overlap: [start_a, end_a) intersects [start_b, end_b)."""
    return as_date(start_a) < as_date(end_b) and as_date(start_b) < as_date(end_a)


def overlaps_inclusive(start_a: DateLike, end_a: DateLike, start_b: DateLike, end_b: DateLike) -> bool:
    """Closed overlap: [start_a, end_a] intersects [start_b, end_b]."""
    return as_date(start_a) <= as_date(end_b) and as_date(start_b) <= as_date(end_a)


def validate_interval(checkin: DateLike, checkout: DateLike) -> tuple[date, date]:
    checkin, checkout = as_date(checkin), as_date(checkout)
    if checkout <= checkin:
        raise InvalidInterval(checkin, checkout)
    return checkin, checkout


def count_nights(checkin: DateLike, checkout: DateLike) -> int:
    checkin, checkout = validate_interval(checkin, checkout)
    return max((checkout - checkin).days, 1)


def iter_nights(checkin: DateLike, checkout: DateLike) -> Iterator[date]:
    """Every night a stay occupies: checkin up to, not including, checkout."""
    night, checkout = as_date(checkin), as_date(checkout)
    while night < checkout:
        yield night
        night += timedelta(days=1)


def overlap_clause(start_col, end_col, start: date, end: date):
    """SQL form of `overlaps` for a stored half-open range."""
    return and_(start_col < end, end_col > start)


def inclusive_overlap_clause(start_col, end_col, start: date, end: date):
    """SQL form of `overlaps_inclusive` for a stored closed range."""
    return and_(start_col <= end, end_col >= start)
