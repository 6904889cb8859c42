"""
Tests for the auth persistence adapter.
"""

from datetime import datetime, timedelta

import pytest
from fastapi import Response
from sqlalchemy.exc import NoResultFound

from app.config import PENDING_USER_COOKIE
from app.domain.auth.adapter import DatabaseAdapter, PendingUserNotFound
from app.models import Account

PROFILE = {
    "id": "google-123",
    "name": "Diego Fernandes",
    "username": "",
    "email": "diego@example.com",
    "avatar_url": "https://example.com/diego.png",
}


def _link(adapter: DatabaseAdapter, user_id: str, provider_account_id: str = "google-123") -> None:
    adapter.link_account(
        {
            "userId": user_id,
            "type": "oauth",
            "provider": "google",
            "providerAccountId": provider_account_id,
            "access_token": "access",
            "refresh_token": "refresh",
            "expires_at": 1_900_000_000,
            "token_type": "Bearer",
            "scope": "openid https://www.googleapis.com/auth/calendar",
        }
    )


class TestCreateUser:
    def test_attaches_profile_to_pending_user(self, db, pending_user):
        response = Response()
        adapter = DatabaseAdapter(db, {PENDING_USER_COOKIE: pending_user.id}, response)

        created = adapter.create_user(PROFILE)

        assert created["id"] == pending_user.id
        assert created["username"] == "diego"
        assert created["email"] == "diego@example.com"
        assert created["avatar_url"] == "https://example.com/diego.png"
        assert created["emailVerified"] is None

    def test_clears_pending_user_cookie(self, db, pending_user):
        response = Response()
        adapter = DatabaseAdapter(db, {PENDING_USER_COOKIE: pending_user.id}, response)

        adapter.create_user(PROFILE)

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f'{PENDING_USER_COOKIE}=""')
        assert "Max-Age=0" in set_cookie
        assert "Path=/" in set_cookie

    def test_fails_without_pending_user_cookie(self, db, pending_user):
        adapter = DatabaseAdapter(db, {}, Response())

        with pytest.raises(PendingUserNotFound, match="User ID not found on cookies."):
            adapter.create_user(PROFILE)

    def test_get_user_returns_created_fields(self, db, pending_user):
        adapter = DatabaseAdapter(db, {PENDING_USER_COOKIE: pending_user.id}, Response())

        created = adapter.create_user(PROFILE)

        assert adapter.get_user(created["id"]) == created


class TestUserLookups:
    def test_get_user_missing_returns_none(self, db):
        assert DatabaseAdapter(db, {}).get_user("missing") is None

    def test_get_user_by_email(self, db, pending_user):
        adapter = DatabaseAdapter(db, {PENDING_USER_COOKIE: pending_user.id}, Response())
        adapter.create_user(PROFILE)

        assert adapter.get_user_by_email("diego@example.com")["id"] == pending_user.id
        assert adapter.get_user_by_email("nobody@example.com") is None

    def test_get_user_by_account_matches_get_user(self, db, pending_user):
        adapter = DatabaseAdapter(db, {}, Response())
        _link(adapter, pending_user.id)

        assert adapter.get_user_by_account("google", "google-123") == adapter.get_user(pending_user.id)

    def test_get_user_by_account_missing_returns_none(self, db, pending_user):
        adapter = DatabaseAdapter(db, {})
        _link(adapter, pending_user.id)

        assert adapter.get_user_by_account("google", "other") is None
        assert adapter.get_user_by_account("github", "google-123") is None

    def test_update_user(self, db, pending_user):
        adapter = DatabaseAdapter(db, {})

        updated = adapter.update_user(
            {"id": pending_user.id, "name": "Diego", "email": "d@example.com", "avatar_url": None}
        )

        assert updated["name"] == "Diego"
        assert updated["email"] == "d@example.com"
        assert updated["username"] == "diego"

    def test_update_missing_user_propagates(self, db):
        with pytest.raises(NoResultFound):
            DatabaseAdapter(db, {}).update_user({"id": "missing", "name": "x"})


class TestLinkAccount:
    def test_renames_fields(self, db, pending_user):
        _link(DatabaseAdapter(db, {}), pending_user.id)

        account = db.query(Account).one()
        assert account.user_id == pending_user.id
        assert account.provider_account_id == "google-123"
        assert account.refresh_token == "refresh"
        assert account.expires_at == 1_900_000_000


class TestSessions:
    def test_create_and_get_session_and_user(self, db, pending_user):
        adapter = DatabaseAdapter(db, {})
        expires = datetime(2030, 1, 1, 12, 0)

        created = adapter.create_session("token-1", pending_user.id, expires)
        found = adapter.get_session_and_user("token-1")

        assert created == {"sessionToken": "token-1", "userId": pending_user.id, "expires": expires}
        assert found["session"] == created
        assert found["user"]["id"] == pending_user.id

    def test_update_session(self, db, pending_user):
        adapter = DatabaseAdapter(db, {})
        adapter.create_session("token-1", pending_user.id, datetime(2030, 1, 1))
        new_expires = datetime(2030, 2, 1)

        updated = adapter.update_session("token-1", expires=new_expires)

        assert updated["expires"] == new_expires
        assert updated["userId"] == pending_user.id

    def test_deleted_session_is_gone(self, db, pending_user):
        adapter = DatabaseAdapter(db, {})
        adapter.create_session("token-1", pending_user.id, datetime.utcnow() + timedelta(days=1))

        adapter.delete_session("token-1")

        assert adapter.get_session_and_user("token-1") is None

    def test_missing_session_returns_none(self, db):
        assert DatabaseAdapter(db, {}).get_session_and_user("nope") is None
