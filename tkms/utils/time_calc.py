"""
Attendance arithmetic over punch timestamps and HH:mm schedule strings.

Schedule times are anchored to the business-timezone calendar date of the
punch they are compared with. All functions accept timezone-aware datetimes
(naive values are treated as UTC).
"""
import math
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from tkms.utils.datetime_utils import combine_local, ensure_utc, local_date

HHMM_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


@dataclass(frozen=True)
class HoursBreakdown:
    total_minutes: int
    lunch_break_minutes: int
    worked_minutes: int
    total_hours: float
    worked_hours: float


def is_valid_hhmm(value: Optional[str]) -> bool:
    return bool(value) and HHMM_PATTERN.match(value) is not None


def hhmm_to_minutes(value: str) -> int:
    """'08:30' -> 510"""
    hours, minutes = (int(part) for part in value.split(":"))
    return hours * 60 + minutes


def _anchor(moment: datetime, hhmm: str) -> datetime:
    return combine_local(local_date(moment), hhmm)


def _whole_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated toward zero"""
    seconds = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    return int(math.trunc(seconds / 60))


def round_hours(minutes: int) -> float:
    return round(minutes / 60, 2)


def late_minutes(time_in: datetime, schedule_in: str) -> int:
    """Minutes after the scheduled start, floored at 0"""
    return max(0, _whole_minutes(_anchor(time_in, schedule_in), time_in))


def is_late(time_in: datetime, schedule_in: str, grace_minutes: int = 0) -> bool:
    """True when the punch is later than the scheduled start plus the grace period"""
    scheduled = _anchor(time_in, schedule_in)
    return ensure_utc(time_in) > scheduled + timedelta(minutes=grace_minutes)


def early_out_minutes(time_out: datetime, schedule_out: str) -> int:
    """Minutes before the scheduled end, floored at 0"""
    return max(0, _whole_minutes(time_out, _anchor(time_out, schedule_out)))


def is_early_out(time_out: datetime, schedule_out: str) -> bool:
    return ensure_utc(time_out) < _anchor(time_out, schedule_out)


def statutory_break_minutes(total_minutes: int) -> int:
    """
    Unpaid meal break when no lunch window is configured:
    60 minutes beyond 6 hours, 30 minutes from 4 hours, otherwise none.
    """
    hours = total_minutes / 60
    if hours > 6:
        return 60
    if hours >= 4:
        return 30
    return 0


def _overlap_minutes(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> int:
    start = max(ensure_utc(start_a), ensure_utc(start_b))
    end = min(ensure_utc(end_a), ensure_utc(end_b))
    if end <= start:
        return 0
    return _whole_minutes(start, end)


def calculate_detailed_hours(
    time_in: datetime,
    time_out: datetime,
    lunch_start: Optional[str] = None,
    lunch_end: Optional[str] = None,
    schedule_in: Optional[str] = None,
    schedule_out: Optional[str] = None,
) -> HoursBreakdown:
    """
    Total and worked hours for one day.

    The worked interval is clamped to the scheduled window when one is given.
    Lunch is the overlap with the configured lunch window, or the statutory
    break when no window is configured.

    Returns:
        HoursBreakdown with minutes and hours rounded to 2 decimals
    """
    effective_in = ensure_utc(time_in)
    effective_out = ensure_utc(time_out)

    if schedule_in:
        scheduled_start = _anchor(time_in, schedule_in)
        if effective_in < scheduled_start:
            effective_in = scheduled_start
    if schedule_out:
        scheduled_end = _anchor(time_out, schedule_out)
        if effective_out > scheduled_end:
            effective_out = scheduled_end

    total = max(0, _whole_minutes(effective_in, effective_out))

    if lunch_start and lunch_end:
        if total > 0:
            lunch = _overlap_minutes(
                effective_in,
                effective_out,
                _anchor(time_in, lunch_start),
                _anchor(time_in, lunch_end),
            )
        else:
            lunch = 0
    else:
        lunch = statutory_break_minutes(total)

    worked = max(0, total - lunch)
    return HoursBreakdown(
        total_minutes=total,
        lunch_break_minutes=lunch,
        worked_minutes=worked,
        total_hours=round_hours(total),
        worked_hours=round_hours(worked),
    )


def overtime_minutes(
    time_in: datetime,
    time_out: datetime,
    schedule_in: str,
    schedule_out: str,
) -> int:
    """Minutes between the punches beyond the scheduled span, floored at 0"""
    scheduled_span = hhmm_to_minutes(schedule_out) - hhmm_to_minutes(schedule_in)
    actual = _whole_minutes(time_in, time_out)
    return max(0, actual - max(0, scheduled_span))
