"""Auth persistence adapter - maps the sign-in flow's user/account/session records onto our tables"""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from fastapi import Response
from sqlalchemy.orm import Session

from ...config import PENDING_USER_COOKIE
from ...cookies import delete_pending_user_cookie
from ...models import Account, User
from ...models import Session as UserSession

logger = logging.getLogger(__name__)


class PendingUserNotFound(Exception):
    """Raised when sign-up completes without the claim-username cookie"""

    def __init__(self, message: str = "User ID not found on cookies."):
        super().__init__(message)


def to_adapter_user(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "username": user.username,
        "email": user.email,
        "emailVerified": None,
        "avatar_url": user.avatar_url,
    }


def to_adapter_session(session: UserSession) -> dict[str, Any]:
    return {
        "sessionToken": session.session_token,
        "userId": session.user_id,
        "expires": session.expires,
    }


class DatabaseAdapter:
    """
    Persistence callbacks used by the OAuth sign-in flow.

    Bound to one request: `cookies` are the inbound request cookies and
    `response` is where cookie deletions are written.
    """

    def __init__(self, db: Session, cookies: Mapping[str, str], response: Optional[Response] = None):
        self.db = db
        self.cookies = cookies
        self.response = response

    # ------------------------------------------------------------------ users

    def create_user(self, user: dict[str, Any]) -> dict[str, Any]:
        """Attach OAuth profile fields to the user created by the claim-username step"""
        pending_user_id = self.cookies.get(PENDING_USER_COOKIE)
        if not pending_user_id:
            logger.error("❌ Sign-up attempted without a pending user cookie")
            raise PendingUserNotFound()

        db_user = self.db.query(User).filter(User.id == pending_user_id).one()
        db_user.name = user.get("name")
        db_user.email = user.get("email")
        db_user.avatar_url = user.get("avatar_url")
        self.db.commit()
        self.db.refresh(db_user)

        if self.response is not None:
            delete_pending_user_cookie(self.response)

        logger.info(f"✅ Pending user {db_user.id} completed sign-up")
        return to_adapter_user(db_user)

    def get_user(self, user_id: str) -> Optional[dict[str, Any]]:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            return None
        return to_adapter_user(user)

    def get_user_by_email(self, email: str) -> Optional[dict[str, Any]]:
        user = self.db.query(User).filter(User.email == email).first()
        if not user:
            return None
        return to_adapter_user(user)

    def get_user_by_account(self, provider: str, provider_account_id: str) -> Optional[dict[str, Any]]:
        account = (
            self.db.query(Account)
            .filter(
                Account.provider == provider,
                Account.provider_account_id == provider_account_id,
            )
            .first()
        )
        if not account:
            return None
        return to_adapter_user(account.user)

    def update_user(self, user: dict[str, Any]) -> dict[str, Any]:
        db_user = self.db.query(User).filter(User.id == user["id"]).one()
        db_user.name = user.get("name")
        db_user.email = user.get("email")
        db_user.avatar_url = user.get("avatar_url")
        self.db.commit()
        self.db.refresh(db_user)
        return to_adapter_user(db_user)

    # --------------------------------------------------------------- accounts

    def link_account(self, account: dict[str, Any]) -> None:
        self.db.add(
            Account(
                user_id=account["userId"],
                type=account["type"],
                provider=account["provider"],
                provider_account_id=account["providerAccountId"],
                refresh_token=account.get("refresh_token"),
                access_token=account.get("access_token"),
                expires_at=account.get("expires_at"),
                token_type=account.get("token_type"),
                scope=account.get("scope"),
                id_token=account.get("id_token"),
                session_state=account.get("session_state"),
            )
        )
        self.db.commit()
        logger.info(f"🔗 Linked {account['provider']} account to user {account['userId']}")

    # --------------------------------------------------------------- sessions

    def create_session(self, session_token: str, user_id: str, expires: datetime) -> dict[str, Any]:
        self.db.add(UserSession(session_token=session_token, user_id=user_id, expires=expires))
        self.db.commit()
        return {"sessionToken": session_token, "userId": user_id, "expires": expires}

    def get_session_and_user(self, session_token: str) -> Optional[dict[str, Any]]:
        session = (
            self.db.query(UserSession).filter(UserSession.session_token == session_token).first()
        )
        if not session:
            return None
        return {"session": to_adapter_session(session), "user": to_adapter_user(session.user)}

    def update_session(
        self,
        session_token: str,
        user_id: Optional[str] = None,
        expires: Optional[datetime] = None,
    ) -> dict[str, Any]:
        session = (
            self.db.query(UserSession).filter(UserSession.session_token == session_token).one()
        )
        if expires is not None:
            session.expires = expires
        if user_id is not None:
            session.user_id = user_id
        self.db.commit()
        self.db.refresh(session)
        return to_adapter_session(session)

    def delete_session(self, session_token: str) -> None:
        session = (
            self.db.query(UserSession).filter(UserSession.session_token == session_token).one()
        )
        self.db.delete(session)
        self.db.commit()
