"""User service - Business logic for usernames, availability and bookings"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...cache import (
    get_availability_cached,
    invalidate_availability_cache,
    invalidate_user_availability_cache,
    set_availability_cached,
)
from ...models import Scheduling, User
from ...services import availability
from ...services.google_calendar_service import create_calendar_event
from .repository import UserRepository
from .schemas import ClaimUsernameRequest, CreateSchedulingRequest, TimeIntervalsRequest

logger = logging.getLogger(__name__)


def parse_date(value: Optional[str]) -> date:
    """Parse a YYYY-MM-DD query value"""
    if not value:
        raise HTTPException(status_code=400, detail="Date not provided.")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(
            status_code=400, detail="Invalid date format. Expected YYYY-MM-DD"
        ) from None


def truncate_to_hour(value: datetime) -> datetime:
    """Naive local start-of-hour; aware values are converted to local time first"""
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value.replace(minute=0, second=0, microsecond=0)


class UserService:
    """Service layer for user business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def claim_username(self, data: ClaimUsernameRequest) -> User:
        if self.repo.get_user_by_username(self.db, data.username):
            logger.info(f"⚠️ Username already taken: {data.username}")
            raise HTTPException(status_code=400, detail="Username already taken.")

        user = self.repo.create_user(self.db, name=data.name, username=data.username)
        logger.info(f"🆕 Pending user created for username: {user.username}")
        return user

    def get_user_by_username(self, username: str) -> User:
        user = self.repo.get_user_by_username(self.db, username)
        if not user:
            raise HTTPException(status_code=400, detail="User does not exist.")
        return user

    def update_profile(self, user: User, bio: str) -> User:
        return self.repo.update_user(self.db, user, bio=bio)

    def set_time_intervals(self, user: User, data: TimeIntervalsRequest) -> None:
        self.repo.replace_time_intervals(
            self.db,
            user.id,
            [
                {
                    "week_day": i.weekDay,
                    "time_start_in_minutes": i.startTimeInMinutes,
                    "time_end_in_minutes": i.endTimeInMinutes,
                }
                for i in data.intervals
            ],
        )
        invalidate_user_availability_cache(user.username)
        logger.info(f"🗓️ {len(data.intervals)} time intervals saved for {user.username}")

    def get_availability(self, username: str, date_value: Optional[str], now: Optional[datetime] = None) -> dict:
        """Cached per (username, date) unless a specific `now` is given"""
        user = self.get_user_by_username(username)
        day = parse_date(date_value)

        if now is not None:
            return availability.get_availability(self.db, user, day, now=now)

        cached = get_availability_cached(username, day.isoformat())
        if cached is not None:
            return cached

        result = availability.get_availability(self.db, user, day, now=now)
        set_availability_cached(username, day.isoformat(), result)
        return result

    def get_blocked_dates(self, username: str, year: Optional[int], month: Optional[int]) -> dict:
        user = self.get_user_by_username(username)
        if not year or not month:
            raise HTTPException(status_code=400, detail="Year or month not specified.")
        if not 1 <= month <= 12:
            raise HTTPException(status_code=400, detail="Invalid month.")
        if not availability.is_supported_month(year, month):
            raise HTTPException(status_code=400, detail="Invalid year.")
        return availability.get_blocked_dates(self.db, user, year, month)

    async def create_scheduling(
        self, username: str, data: CreateSchedulingRequest, now: Optional[datetime] = None
    ) -> Scheduling:
        user = self.get_user_by_username(username)
        scheduling_date = truncate_to_hour(data.date)

        if scheduling_date < (now or datetime.now()):
            raise HTTPException(status_code=400, detail="Date is in the past.")

        if self.repo.get_scheduling_at(self.db, user.id, scheduling_date):
            raise HTTPException(status_code=400, detail="There is another scheduling at the same time.")

        scheduling = self.repo.create_scheduling(
            self.db,
            user.id,
            name=data.name,
            email=data.email,
            observations=data.observations,
            date=scheduling_date,
        )
        logger.info(f"📌 Scheduling {scheduling.id} booked with {username} at {scheduling_date.isoformat()}")

        invalidate_availability_cache(username, scheduling_date.date().isoformat())
        await create_calendar_event(user, scheduling, self.db)
        return scheduling
