"""
Work-day bitmask arithmetic.

A job's working days are stored as a 7-bit mask, one bit per weekday,
starting from Saturday.
"""

import enum
from datetime import datetime, time, timedelta
from typing import List


class WorkDays(enum.IntFlag):
    NONE = 0
    SATURDAY = 1
    SUNDAY = 2
    MONDAY = 4
    TUESDAY = 8
    WEDNESDAY = 16
    THURSDAY = 32
    FRIDAY = 64


ALLOWED_WORK_DAYS_MASK = (
    WorkDays.SATURDAY
    | WorkDays.SUNDAY
    | WorkDays.MONDAY
    | WorkDays.TUESDAY
    | WorkDays.WEDNESDAY
    | WorkDays.THURSDAY
    | WorkDays.FRIDAY
)

_WEEK = [
    WorkDays.SATURDAY,
    WorkDays.SUNDAY,
    WorkDays.MONDAY,
    WorkDays.TUESDAY,
    WorkDays.WEDNESDAY,
    WorkDays.THURSDAY,
    WorkDays.FRIDAY,
]


def is_valid_mask(mask: int) -> bool:
    return mask != 0 and (mask & ~int(ALLOWED_WORK_DAYS_MASK)) == 0


def count_work_days(mask: int) -> int:
    return bin(mask & int(ALLOWED_WORK_DAYS_MASK)).count("1")


def work_day_names(mask: int) -> List[str]:
    """Selected days, in week order, e.g. ["Saturday", "Monday"]."""
    return [day.name.capitalize() for day in _WEEK if mask & day]


def shift_duration_hours(start: time, end: time) -> int:
    """
    Whole hours between shift start and end.

    A shift whose end is at or before its start runs past midnight.
    """
    start_dt = datetime.combine(datetime.min.date(), start)
    end_dt = datetime.combine(datetime.min.date(), end)
    if end_dt <= start_dt:
        end_dt += timedelta(days=1)
    return int((end_dt - start_dt).total_seconds() // 3600)
