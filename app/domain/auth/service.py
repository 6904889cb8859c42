"""Auth service - OAuth sign-in and session lifecycle on top of the persistence adapter"""

import logging
import secrets
import time
from datetime import datetime, timedelta
from typing import Any, Optional

from ...config import SESSION_MAX_AGE_DAYS, SESSION_UPDATE_AGE_HOURS
from . import google_oauth
from .adapter import DatabaseAdapter

logger = logging.getLogger(__name__)

CONNECT_CALENDAR_PATH = "/register/connect-calendar"


class SignInResult:
    """Outcome of an OAuth callback: where to go next and the session, if one was opened"""

    def __init__(self, redirect_to: str, session: Optional[dict[str, Any]] = None):
        self.redirect_to = redirect_to
        self.session = session


class AuthService:
    def __init__(self, adapter: DatabaseAdapter):
        self.adapter = adapter

    async def sign_in_with_google(self, code: str) -> SignInResult:
        tokens = await google_oauth.exchange_code(code)
        profile = await google_oauth.fetch_profile(tokens["access_token"])
        return self.complete_sign_in(google_oauth.PROVIDER_ID, profile, tokens)

    def complete_sign_in(self, provider: str, profile: dict[str, Any], tokens: dict[str, Any]) -> SignInResult:
        """
        Resolve the local user for an OAuth profile and open a session.

        Calendar access is mandatory: a consent without the calendar scope is
        sent back to the connect-calendar step instead of signing in.
        """
        granted_scope = tokens.get("scope") or ""
        if google_oauth.CALENDAR_SCOPE not in granted_scope.split():
            logger.warning(f"⚠️ Calendar permission not granted for {profile.get('email')}")
            return SignInResult(f"{CONNECT_CALENDAR_PATH}?error=permissions")

        user = self.adapter.get_user_by_account(provider, profile["id"])

        if not user:
            if profile.get("email") and self.adapter.get_user_by_email(profile["email"]):
                logger.warning(f"⚠️ {profile['email']} already belongs to an account without {provider} linked")
                return SignInResult(f"{CONNECT_CALENDAR_PATH}?error=OAuthAccountNotLinked")

            user = self.adapter.create_user(profile)
            expires_in = tokens.get("expires_in")
            self.adapter.link_account(
                {
                    "userId": user["id"],
                    "type": "oauth",
                    "provider": provider,
                    "providerAccountId": profile["id"],
                    "refresh_token": tokens.get("refresh_token"),
                    "access_token": tokens.get("access_token"),
                    "expires_at": int(time.time()) + int(expires_in) if expires_in else None,
                    "token_type": tokens.get("token_type"),
                    "scope": tokens.get("scope"),
                    "id_token": tokens.get("id_token"),
                    "session_state": tokens.get("session_state"),
                }
            )

        session = self.adapter.create_session(
            session_token=secrets.token_urlsafe(32),
            user_id=user["id"],
            expires=datetime.utcnow() + timedelta(days=SESSION_MAX_AGE_DAYS),
        )
        logger.info(f"✅ Signed in user {user['id']} via {provider}")
        return SignInResult(CONNECT_CALENDAR_PATH, session)

    def get_session(self, session_token: str, now: Optional[datetime] = None) -> Optional[dict[str, Any]]:
        """Return the live session and user, sliding the expiry once it is older than the update age"""
        now = now or datetime.utcnow()
        found = self.adapter.get_session_and_user(session_token)
        if not found:
            return None

        session = found["session"]
        if session["expires"] < now:
            logger.info(f"ℹ️ Session for user {session['userId']} expired")
            self.adapter.delete_session(session_token)
            return None

        max_age = timedelta(days=SESSION_MAX_AGE_DAYS)
        update_age = timedelta(hours=SESSION_UPDATE_AGE_HOURS)
        if session["expires"] - max_age + update_age <= now:
            session = self.adapter.update_session(session_token, expires=now + max_age)

        return {"session": session, "user": found["user"]}

    def sign_out(self, session_token: str) -> None:
        if self.adapter.get_session_and_user(session_token):
            self.adapter.delete_session(session_token)
