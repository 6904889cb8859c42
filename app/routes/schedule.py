"""
Public booking pages
Calendar step (date + time picker) and confirm step of the schedule form
"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..database import get_db
from ..domain.users.schemas import CreateSchedulingRequest
from ..domain.users.service import UserService
from ..services import calendar_view
from ..services.availability import is_supported_month
from ..templating import templates
from ..utils.dates import describe_full_date, time_label
from .pages import first_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedule", tags=["Pages"], include_in_schema=False)


def get_profile(service: UserService, username: str):
    try:
        return service.get_user_by_username(username)
    except HTTPException:
        raise HTTPException(status_code=404, detail="User not found") from None


def parse_month(value: Optional[str], fallback: date) -> tuple[int, int]:
    """`YYYY-MM` from the query, else the fallback's month, else the current month"""
    if value:
        try:
            year, month = (int(part) for part in value.split("-"))
        except ValueError:
            year = month = None
        if year is not None and is_supported_month(year, month):
            return year, month
        logger.debug(f"Ignoring invalid month parameter: {value}")
    if is_supported_month(fallback.year, fallback.month):
        return fallback.year, fallback.month
    today = datetime.now().date()
    return today.year, today.month


@router.get("/{username}")
def calendar_step(
    request: Request,
    username: str,
    selected: Optional[str] = Query(None, alias="date"),
    month: Optional[str] = None,
    booked: bool = False,
    db: Session = Depends(get_db),
):
    """
    Month calendar and, once a date is picked, its time slots.
    Availability is only looked up for a selected date.
    """
    service = UserService(db)
    user = get_profile(service, username)
    today = datetime.now().date()

    selected_date = None
    time_picker = None
    if selected:
        try:
            selected_date = datetime.strptime(selected, "%Y-%m-%d").date()
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid date format. Expected YYYY-MM-DD") from None
        availability = service.get_availability(username, selected_date.isoformat())
        time_picker = calendar_view.build_time_picker(selected_date, availability)

    year, month_number = parse_month(month, selected_date or today)
    blocked = service.get_blocked_dates(username, year, month_number)
    month_view = calendar_view.build_month(year, month_number, blocked, today, selected_date)

    return templates.TemplateResponse(
        request,
        "schedule/calendar_step.html",
        {
            "user": user,
            "month": month_view,
            "selected_date": selected_date.isoformat() if selected_date else None,
            "time_picker": time_picker,
            "booked": booked,
        },
    )


def render_confirm_step(request: Request, user, scheduling_date: datetime, form: dict, error=None, status_code=200):
    return templates.TemplateResponse(
        request,
        "schedule/confirm_step.html",
        {
            "user": user,
            "datetime": scheduling_date.isoformat(),
            "described_date": describe_full_date(scheduling_date.date()),
            "described_time": time_label(scheduling_date),
            "form": form,
            "error": error,
        },
        status_code=status_code,
    )


def parse_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid datetime") from None


@router.get("/{username}/confirm")
def confirm_step(
    request: Request,
    username: str,
    selected: str = Query(..., alias="datetime"),
    db: Session = Depends(get_db),
):
    user = get_profile(UserService(db), username)
    return render_confirm_step(
        request, user, parse_datetime(selected), {"name": "", "email": "", "observations": ""}
    )


@router.post("/{username}/confirm")
async def submit_confirm_step(
    request: Request,
    username: str,
    selected: str = Form(..., alias="datetime"),
    name: str = Form(""),
    email: str = Form(""),
    observations: str = Form(""),
    db: Session = Depends(get_db),
):
    service = UserService(db)
    user = get_profile(service, username)
    scheduling_date = parse_datetime(selected)
    form = {"name": name, "email": email, "observations": observations}

    try:
        data = CreateSchedulingRequest(
            name=name, email=email, observations=observations or None, date=scheduling_date
        )
        await service.create_scheduling(username, data)
    except ValidationError as e:
        error = first_error(e)
    except HTTPException as e:
        error = e.detail
    else:
        return RedirectResponse(url=f"/schedule/{username}?booked=true", status_code=303)

    return render_confirm_step(request, user, scheduling_date, form, error=error, status_code=400)
