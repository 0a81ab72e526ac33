# tests/test_conflicts.py

import logging
from types import SimpleNamespace

import pytest

from booking.scheduling import find_conflict, intervals_overlap, parse_12


def appt(id, start, end, status="pending"):
    return SimpleNamespace(id=id, start_time=start, end_time=end, status=status)


def window(start, end):
    return parse_12(start), parse_12(end)


def test_overlapping_window_conflicts():
    existing = [appt(1, "10:30 AM", "11:30 AM")]
    assert find_conflict(existing, *window("10:00 AM", "11:00 AM")).id == 1


def test_touching_window_does_not_conflict():
    existing = [appt(1, "11:00 AM", "12:00 PM")]
    assert find_conflict(existing, *window("10:00 AM", "11:00 AM")) is None


@pytest.mark.parametrize("start, end", [
    ("9:00 AM", "1:00 PM"),     # contains existing
    ("10:15 AM", "10:45 AM"),   # inside existing
    ("10:00 AM", "11:00 AM"),   # identical
])
def test_containment_conflicts(start, end):
    existing = [appt(7, "10:00 AM", "11:00 AM")]
    assert find_conflict(existing, *window(start, end)) is existing[0]


def test_cancelled_appointments_never_conflict():
    existing = [appt(1, "10:00 AM", "11:00 AM", status="cancelled")]
    assert find_conflict(existing, *window("10:00 AM", "11:00 AM")) is None


@pytest.mark.parametrize("status", ["pending", "approved", "rescheduled", "completed"])
def test_other_statuses_conflict(status):
    existing = [appt(1, "10:00 AM", "11:00 AM", status=status)]
    assert find_conflict(existing, *window("10:00 AM", "11:00 AM")) is not None


def test_excluded_appointment_does_not_conflict_with_itself():
    existing = [appt(3, "10:00 AM", "11:00 AM")]
    assert find_conflict(existing, *window("10:00 AM", "11:00 AM"), exclude_id=3) is None
    assert find_conflict(existing, *window("10:00 AM", "11:00 AM"), exclude_id=4) is existing[0]


def test_unparsable_rows_are_skipped(caplog):
    existing = [
        appt(1, "ten o'clock", "11:00 AM"),
        appt(2, "10:00 AM", "11:00 AM"),
    ]
    with caplog.at_level(logging.WARNING):
        conflict = find_conflict(existing, *window("10:00 AM", "11:00 AM"))
    assert conflict.id == 2
    assert "unparsable" in caplog.text


def test_only_corrupt_rows_means_no_conflict():
    existing = [appt(1, "", None)]
    assert find_conflict(existing, *window("10:00 AM", "11:00 AM")) is None


def test_empty_day_has_no_conflict():
    assert find_conflict([], 600, 660) is None


@pytest.mark.parametrize("a, b, expected", [
    ((600, 660), (630, 690), True),
    ((600, 660), (660, 720), False),
    ((600, 660), (540, 600), False),
    ((600, 660), (500, 700), True),
])
def test_intervals_overlap_is_symmetric(a, b, expected):
    assert intervals_overlap(*a, *b) is expected
    assert intervals_overlap(*b, *a) is expected
