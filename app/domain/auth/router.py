"""Auth router - OAuth sign-in, session and sign-out endpoints"""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ...config import COOKIE_SECURE, SESSION_COOKIE_NAME, SESSION_MAX_AGE_DAYS
from ...database import get_db
from . import google_oauth
from .adapter import DatabaseAdapter, PendingUserNotFound
from .service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

OAUTH_STATE_COOKIE = "ignitecall.oauth-state"


def set_session_cookie(response: Response, session: dict) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session["sessionToken"],
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        max_age=SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        path="/",
    )


@router.get("/signin/google")
async def sign_in_with_google():
    """Redirect to Google's consent screen"""
    state = secrets.token_urlsafe(16)
    response = RedirectResponse(url=google_oauth.build_authorization_url(state), status_code=302)
    response.set_cookie(
        key=OAUTH_STATE_COOKIE,
        value=state,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
        max_age=600,
        path="/",
    )
    return response


@router.get("/callback/google")
async def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Handle Google's redirect: link/sign-in the user and open a session"""
    if error:
        logger.warning(f"⚠️ Google OAuth returned error: {error}")
        return RedirectResponse(url="/register/connect-calendar?error=permissions", status_code=302)

    expected_state = request.cookies.get(OAUTH_STATE_COOKIE)
    if not code or not state or not expected_state or not secrets.compare_digest(state, expected_state):
        raise HTTPException(status_code=400, detail="Invalid OAuth state")

    response = RedirectResponse(url="/register/connect-calendar", status_code=302)
    service = AuthService(DatabaseAdapter(db, request.cookies, response))

    try:
        result = await service.sign_in_with_google(code)
    except PendingUserNotFound as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    response.headers["location"] = result.redirect_to
    response.delete_cookie(OAUTH_STATE_COOKIE, path="/")
    if result.session:
        set_session_cookie(response, result.session)
    return response


@router.get("/session")
def get_session(request: Request, db: Session = Depends(get_db)):
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None

    found = AuthService(DatabaseAdapter(db, request.cookies)).get_session(token)
    if not found:
        return None

    return {"user": found["user"], "expires": found["session"]["expires"].isoformat()}


@router.post("/signout")
def sign_out(request: Request, db: Session = Depends(get_db)):
    token = request.cookies.get(SESSION_COOKIE_NAME)
    response = Response(status_code=204)
    if token:
        AuthService(DatabaseAdapter(db, request.cookies, response)).sign_out(token)
        logger.info("👋 Session closed")
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return response
