"""User router - FastAPI endpoints for usernames, time intervals and bookings"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...cookies import set_pending_user_cookie
from ...database import get_db
from ...models import User
from .schemas import (
    AvailabilityResponse,
    BlockedDatesResponse,
    ClaimUsernameRequest,
    CreateSchedulingRequest,
    SchedulingResponse,
    TimeIntervalsRequest,
    UpdateProfileRequest,
    UserResponse,
)
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


@router.post("", response_model=UserResponse, status_code=201)
async def claim_username(
    data: ClaimUsernameRequest,
    response: Response,
    service: UserService = Depends(get_user_service),
):
    """Create the pending user for a username and remember it in a cookie"""
    user = service.claim_username(data)
    set_pending_user_cookie(response, user.id)
    return user


@router.put("/profile", status_code=204)
async def update_profile(
    data: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    service.update_profile(current_user, data.bio)
    return Response(status_code=204)


@router.post("/time-intervals", status_code=201)
async def set_time_intervals(
    data: TimeIntervalsRequest,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    service.set_time_intervals(current_user, data)
    return Response(status_code=201)


@router.get("/{username}/availability", response_model=AvailabilityResponse)
async def get_availability(
    username: str,
    date: Optional[str] = Query(None),
    service: UserService = Depends(get_user_service),
):
    """Possible and still-available hours for a day"""
    return service.get_availability(username, date)


@router.get("/{username}/blocked-dates", response_model=BlockedDatesResponse)
async def get_blocked_dates(
    username: str,
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    service: UserService = Depends(get_user_service),
):
    return service.get_blocked_dates(username, year, month)


@router.post("/{username}/schedule", response_model=SchedulingResponse, status_code=201)
async def create_scheduling(
    username: str,
    data: CreateSchedulingRequest,
    service: UserService = Depends(get_user_service),
):
    """Public booking endpoint"""
    return await service.create_scheduling(username, data)
