"""
Calendar View
View models for the booking page: the month grid and the time picker of the calendar step
"""
import calendar
from datetime import date, datetime, time
from typing import Optional

from ..utils.dates import WEEK_DAY_SHORT_NAMES, describe_date, hour_label, month_title, week_day_name
from .availability import week_day_of


def select_time(selected_date: date, hour: int) -> datetime:
    """Selected day at `hour`, minutes and seconds zeroed"""
    return datetime.combine(selected_date, time(hour=hour))


def build_time_picker(selected_date: date, availability: Optional[dict]) -> dict:
    """
    Header and slots for a selected date.

    One slot per possible hour; a slot is disabled unless the hour is also
    available. No availability yet means no slots.
    """
    availability = availability or {"possibleTimes": [], "availableTimes": []}
    available = set(availability["availableTimes"])

    return {
        "week_day": week_day_name(selected_date),
        "described_date": describe_date(selected_date),
        "slots": [
            {
                "hour": hour,
                "label": hour_label(hour),
                "disabled": hour not in available,
                "datetime": select_time(selected_date, hour).isoformat(),
            }
            for hour in availability["possibleTimes"]
        ],
    }


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def build_month(
    year: int,
    month: int,
    blocked: Optional[dict],
    today: date,
    selected_date: Optional[date] = None,
) -> dict:
    """
    Month grid starting on Sunday, padded with the neighbouring months' days.

    Days are disabled when already past, on a week day without availability,
    or fully booked; padding days are always disabled.
    """
    blocked = blocked or {"blockedWeekDays": [], "blockedDates": []}
    blocked_week_days = set(blocked["blockedWeekDays"])
    blocked_dates = set(blocked["blockedDates"])

    weeks = []
    for week in calendar.Calendar(firstweekday=6).monthdatescalendar(year, month):
        days = []
        for day in week:
            in_month = day.month == month
            disabled = (
                not in_month
                or day < today
                or week_day_of(day) in blocked_week_days
                or day.day in blocked_dates
            )
            days.append(
                {
                    "date": day.isoformat(),
                    "day": day.day,
                    "disabled": disabled,
                    "selected": day == selected_date,
                }
            )
        weeks.append(days)

    previous_year, previous_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)
    return {
        "title": month_title(month),
        "year": year,
        "week_days": WEEK_DAY_SHORT_NAMES,
        "weeks": weeks,
        "previous": f"{previous_year:04d}-{previous_month:02d}",
        "next": f"{next_year:04d}-{next_month:02d}",
    }
