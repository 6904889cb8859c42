"""
Marketing and registration pages
Landing page with the claim-username form, registration and calendar connection
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..auth import get_optional_user
from ..cookies import set_pending_user_cookie
from ..database import get_db
from ..domain.users.schemas import ClaimUsernameRequest
from ..domain.users.service import UserService
from ..models import User
from ..templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"], include_in_schema=False)

HOME_SEO = {
    "title": "Descomplique sua agenda | Ignite Call",
    "description": (
        "Conecte seu calendário e permita que as pessoas marquem agendamentos no seu tempo livre."
    ),
}


def first_error(e: ValidationError) -> str:
    return e.errors()[0]["msg"].removeprefix("Value error, ")


@router.get("/")
def home(request: Request):
    return templates.TemplateResponse(request, "home.html", {"seo": HOME_SEO})


@router.get("/register")
def register(request: Request, username: str = ""):
    return templates.TemplateResponse(
        request, "register.html", {"username": username, "name": "", "error": None}
    )


@router.post("/register")
def submit_register(
    request: Request,
    username: str = Form(""),
    name: str = Form(""),
    db: Session = Depends(get_db),
):
    """Claim the username and move on to connecting the calendar"""
    try:
        data = ClaimUsernameRequest(username=username, name=name)
        user = UserService(db).claim_username(data)
    except ValidationError as e:
        error = first_error(e)
    except HTTPException as e:
        error = e.detail
    else:
        response = RedirectResponse(url="/register/connect-calendar", status_code=303)
        set_pending_user_cookie(response, user.id)
        return response

    return templates.TemplateResponse(
        request,
        "register.html",
        {"username": username, "name": name, "error": error},
        status_code=400,
    )


@router.get("/register/connect-calendar")
def connect_calendar(
    request: Request,
    error: Optional[str] = None,
    current_user: Optional[User] = Depends(get_optional_user),
):
    return templates.TemplateResponse(
        request,
        "connect_calendar.html",
        {"is_signed_in": current_user is not None, "user": current_user, "error": error},
    )
