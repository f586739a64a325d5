"""
Tests for the interval overlap rules.
"""

from datetime import date, datetime

import pytest

from app.core.exceptions import InvalidInterval
from app.services.intervals import (
    count_nights,
    iter_nights,
    overlaps,
    overlaps_inclusive,
    validate_interval,
)


def d(day: int, month: int = 3) -> date:
    return date(2026, month, day)


def test_overlapping_stays():
    assert overlaps(d(1), d(5), d(3), d(7))


def test_overlap_is_symmetric():
    pairs = [
        (d(1), d(5), d(3), d(7)),
        (d(1), d(5), d(5), d(8)),
        (d(2), d(4), d(1), d(9)),
        (d(10), d(12), d(1), d(3)),
    ]
    for a_start, a_end, b_start, b_end in pairs:
        assert overlaps(a_start, a_end, b_start, b_end) == overlaps(b_start, b_end, a_start, a_end)


def test_interval_overlaps_itself():
    assert overlaps(d(1), d(2), d(1), d(2))


def test_same_day_turnover_does_not_overlap():
    """Checkout on day D leaves D free for the next checkin."""
    assert not overlaps(d(1), d(5), d(5), d(8))
    assert not overlaps(d(5), d(8), d(1), d(5))


def test_contained_interval_overlaps():
    assert overlaps(d(1), d(10), d(4), d(5))


def test_times_are_ignored():
    """Comparison is by calendar day only."""
    assert not overlaps(
        datetime(2026, 3, 1, 14, 0),
        datetime(2026, 3, 5, 11, 0),
        datetime(2026, 3, 5, 9, 0),
        datetime(2026, 3, 8, 12, 0),
    )


def test_inclusive_overlap_touches_on_boundary_days():
    block = (d(10, 4), d(12, 4))
    assert overlaps_inclusive(*block, d(12, 4), d(15, 4))
    assert overlaps_inclusive(*block, d(8, 4), d(10, 4))
    assert not overlaps_inclusive(*block, d(13, 4), d(15, 4))
    assert not overlaps_inclusive(*block, d(5, 4), d(9, 4))


def test_validate_interval_rejects_empty_and_reversed():
    with pytest.raises(InvalidInterval):
        validate_interval(d(5), d(5))
    with pytest.raises(InvalidInterval):
        validate_interval(d(5), d(4))


def test_validate_interval_normalizes_timestamps():
    assert validate_interval(datetime(2026, 3, 1, 15), datetime(2026, 3, 2, 10)) == (d(1), d(2))


def test_count_nights():
    assert count_nights(d(1), d(2)) == 1
    assert count_nights(d(1), d(5)) == 4
    assert count_nights(d(28, 2), d(2, 3)) == 2


def test_iter_nights_excludes_checkout():
    assert list(iter_nights(d(1), d(4))) == [d(1), d(2), d(3)]
