"""
Availability Service
Turns a user's weekly time intervals and existing schedulings into bookable hours
"""
import logging
from collections import Counter
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ..models import Scheduling, User, UserTimeInterval

logger = logging.getLogger(__name__)

WEEK_DAYS = range(7)

# The month grid pads into the neighbouring months, which must stay within datetime's years
FIRST_SUPPORTED_MONTH = (1, 2)
LAST_SUPPORTED_MONTH = (9999, 11)


def is_supported_month(year: int, month: int) -> bool:
    return 1 <= month <= 12 and FIRST_SUPPORTED_MONTH <= (year, month) <= LAST_SUPPORTED_MONTH


def week_day_of(day: date) -> int:
    """Week day with Sunday as 0, as stored in user_time_intervals"""
    return (day.weekday() + 1) % 7


def empty_availability() -> dict:
    return {"possibleTimes": [], "availableTimes": []}


def get_availability(db: Session, user: User, day: date, now: Optional[datetime] = None) -> dict:
    """
    Hours a visitor could book on `day`.

    possibleTimes covers every whole hour of the user's interval for that week
    day; availableTimes drops the hours already booked or already gone by.
    """
    now = now or datetime.now()

    end_of_day = datetime.combine(day, time.max)
    if end_of_day < now:
        return empty_availability()

    interval = (
        db.query(UserTimeInterval)
        .filter(
            UserTimeInterval.user_id == user.id,
            UserTimeInterval.week_day == week_day_of(day),
        )
        .first()
    )
    if not interval:
        return empty_availability()

    start_hour = interval.time_start_in_minutes // 60
    end_hour = interval.time_end_in_minutes // 60
    possible_times = list(range(start_hour, end_hour))

    blocked = (
        db.query(Scheduling)
        .filter(
            Scheduling.user_id == user.id,
            Scheduling.date >= datetime.combine(day, time(hour=start_hour)),
            Scheduling.date <= datetime.combine(day, time.min) + timedelta(hours=end_hour),
        )
        .all()
    )
    blocked_hours = {s.date.hour for s in blocked}

    available_times = [
        hour
        for hour in possible_times
        if hour not in blocked_hours and datetime.combine(day, time(hour=hour)) >= now
    ]

    logger.debug(
        f"📅 Availability for {user.username} on {day.isoformat()}: "
        f"{len(available_times)}/{len(possible_times)} hours free"
    )
    return {"possibleTimes": possible_times, "availableTimes": available_times}


def get_blocked_dates(db: Session, user: User, year: int, month: int) -> dict:
    """
    Week days with no interval at all, plus the days of the month whose
    schedulings already fill the whole interval.
    """
    intervals = db.query(UserTimeInterval).filter(UserTimeInterval.user_id == user.id).all()
    interval_hours = {
        i.week_day: (i.time_end_in_minutes - i.time_start_in_minutes) // 60 for i in intervals
    }
    blocked_week_days = [d for d in WEEK_DAYS if d not in interval_hours]

    month_start = datetime(year, month, 1)
    next_month = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)

    schedulings = (
        db.query(Scheduling)
        .filter(
            Scheduling.user_id == user.id,
            Scheduling.date >= month_start,
            Scheduling.date < next_month,
        )
        .all()
    )
    per_day = Counter(s.date.date() for s in schedulings)

    blocked_dates = sorted(
        day.day
        for day, amount in per_day.items()
        if week_day_of(day) in interval_hours and amount >= interval_hours[week_day_of(day)]
    )

    return {"blockedWeekDays": blocked_week_days, "blockedDates": blocked_dates}
