import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .config import SESSION_COOKIE_NAME
from .database import get_db
from .domain.auth.adapter import DatabaseAdapter
from .domain.auth.service import AuthService
from .models import User

logger = logging.getLogger(__name__)


def get_optional_user(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """Resolve the session cookie to a user, or None when signed out"""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None

    found = AuthService(DatabaseAdapter(db, request.cookies)).get_session(token)
    if not found:
        logger.debug("Session cookie present but no live session")
        return None

    return db.query(User).filter(User.id == found["user"]["id"]).first()


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Get current user from the session cookie"""
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated.")
    return user
