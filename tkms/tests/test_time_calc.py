"""
Tests for attendance arithmetic
"""
from datetime import date

import pytest

from tkms.utils import time_calc
from tkms.utils.datetime_utils import combine_local

DAY = date(2026, 1, 5)  # Monday


def at(hhmm):
    return combine_local(DAY, hhmm)


@pytest.mark.parametrize("value,expected", [
    ("08:00", True),
    ("8:30", True),
    ("23:59", True),
    ("24:00", False),
    ("08:60", False),
    ("0800", False),
    ("", False),
    (None, False),
])
def test_is_valid_hhmm(value, expected):
    assert time_calc.is_valid_hhmm(value) is expected


def test_late_minutes_and_grace():
    assert time_calc.late_minutes(at("08:10"), "08:00") == 10
    assert time_calc.late_minutes(at("07:45"), "08:00") == 0
    assert time_calc.is_late(at("08:10"), "08:00") is True
    assert time_calc.is_late(at("08:10"), "08:00", grace_minutes=10) is False
    assert time_calc.is_late(at("08:11"), "08:00", grace_minutes=10) is True
    assert time_calc.is_late(at("08:00"), "08:00") is False


def test_early_out():
    assert time_calc.early_out_minutes(at("16:30"), "17:00") == 30
    assert time_calc.is_early_out(at("16:30"), "17:00") is True
    assert time_calc.early_out_minutes(at("17:20"), "17:00") == 0
    assert time_calc.is_early_out(at("17:00"), "17:00") is False


@pytest.mark.parametrize("minutes,expected", [
    (0, 0),
    (239, 0),
    (240, 30),
    (360, 30),
    (361, 60),
    (600, 60),
])
def test_statutory_break(minutes, expected):
    assert time_calc.statutory_break_minutes(minutes) == expected


def test_detailed_hours_clamped_to_schedule_with_lunch_window():
    hours = time_calc.calculate_detailed_hours(
        at("07:50"), at("17:30"), "12:00", "13:00", "08:00", "17:00"
    )
    assert hours.total_minutes == 540
    assert hours.lunch_break_minutes == 60
    assert hours.worked_minutes == 480
    assert hours.total_hours == 9.0
    assert hours.worked_hours == 8.0


def test_detailed_hours_lunch_is_overlap_only():
    """Leaving at 12:30 only overlaps half the lunch window"""
    hours = time_calc.calculate_detailed_hours(
        at("08:00"), at("12:30"), "12:00", "13:00", "08:00", "17:00"
    )
    assert hours.total_minutes == 270
    assert hours.lunch_break_minutes == 30
    assert hours.worked_minutes == 240


def test_detailed_hours_without_schedule_uses_statutory_break():
    hours = time_calc.calculate_detailed_hours(at("09:00"), at("18:00"))
    assert hours.total_minutes == 540
    assert hours.lunch_break_minutes == 60
    assert hours.worked_hours == 8.0

    short = time_calc.calculate_detailed_hours(at("09:00"), at("12:00"))
    assert short.lunch_break_minutes == 0
    assert short.worked_hours == 3.0


def test_detailed_hours_never_negative():
    hours = time_calc.calculate_detailed_hours(at("18:00"), at("19:00"), None, None, "08:00", "17:00")
    assert hours.total_minutes == 0
    assert hours.worked_minutes == 0


def test_overtime_minutes():
    assert time_calc.overtime_minutes(at("08:00"), at("19:00"), "08:00", "17:00") == 120
    assert time_calc.overtime_minutes(at("08:00"), at("16:00"), "08:00", "17:00") == 0


def test_round_hours():
    assert time_calc.round_hours(100) == 1.67
    assert time_calc.round_hours(0) == 0
