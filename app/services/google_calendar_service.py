"""
Google Calendar Service
Creates booking events on the calendar linked through Google sign-in
"""
import logging
import time
import uuid
from datetime import timedelta
from typing import Optional

import httpx
from sqlalchemy.orm import Session

from ..config import GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET
from ..models import Account, Scheduling, User

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"  # noqa: S105 - OAuth endpoint URL
GOOGLE_CALENDAR_API = "https://www.googleapis.com/calendar/v3"

# Refresh tokens that expire within this window
TOKEN_REFRESH_MARGIN_SECONDS = 5 * 60


def get_google_account(user: User, db: Session) -> Optional[Account]:
    return (
        db.query(Account)
        .filter(Account.user_id == user.id, Account.provider == "google")
        .first()
    )


async def get_valid_access_token(account: Account, db: Session) -> Optional[str]:
    """
    Get a valid access token, refreshing if necessary
    Returns None if refresh fails
    """
    try:
        if account.expires_at and account.expires_at > time.time() + TOKEN_REFRESH_MARGIN_SECONDS:
            return account.access_token

        if not account.refresh_token:
            logger.error("❌ Google token expired and no refresh token stored")
            return None

        logger.info("🔄 Google Calendar token expired, refreshing...")
        async with httpx.AsyncClient() as client:
            response = await client.post(
                GOOGLE_TOKEN_URL,
                data={
                    "client_id": GOOGLE_CLIENT_ID,
                    "client_secret": GOOGLE_CLIENT_SECRET,
                    "refresh_token": account.refresh_token,
                    "grant_type": "refresh_token",
                },
            )

        if response.status_code != 200:
            logger.error(f"❌ Token refresh failed: {response.text}")
            return None

        tokens = response.json()
        new_access_token = tokens.get("access_token")
        if not new_access_token:
            logger.error("❌ No access token in refresh response")
            return None

        account.access_token = new_access_token
        account.expires_at = int(time.time()) + int(tokens.get("expires_in", 3600))
        if tokens.get("refresh_token"):
            account.refresh_token = tokens["refresh_token"]
        if tokens.get("id_token"):
            account.id_token = tokens["id_token"]
        db.commit()

        logger.info("✅ Google Calendar token refreshed successfully")
        return new_access_token

    except Exception as e:
        logger.error(f"❌ Error getting valid access token: {str(e)}")
        return None


def build_event(scheduling: Scheduling) -> dict:
    """
    Event body for a one-hour booking with a Google Meet link.
    Bookings are naive local time, sent with the server's UTC offset.
    """
    start = scheduling.date
    end = start + timedelta(hours=1)
    return {
        "summary": f"Ignite Call: {scheduling.name}",
        "description": scheduling.observations or "",
        "start": {"dateTime": start.astimezone().isoformat()},
        "end": {"dateTime": end.astimezone().isoformat()},
        "attendees": [{"email": scheduling.email, "displayName": scheduling.name}],
        "conferenceData": {
            "createRequest": {
                "requestId": scheduling.id or str(uuid.uuid4()),
                "conferenceSolutionKey": {"type": "hangoutsMeet"},
            }
        },
    }


async def create_calendar_event(user: User, scheduling: Scheduling, db: Session) -> Optional[str]:
    """
    Create a Google Calendar event for a scheduling
    Returns the Google Calendar event ID if successful, None otherwise
    """
    try:
        account = get_google_account(user, db)
        if not account:
            logger.info(f"ℹ️ Google Calendar not connected for {user.username}")
            return None

        access_token = await get_valid_access_token(account, db)
        if not access_token:
            logger.error("❌ Failed to get valid access token")
            return None

        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{GOOGLE_CALENDAR_API}/calendars/primary/events",
                params={"conferenceDataVersion": 1},
                headers={"Authorization": f"Bearer {access_token}"},
                json=build_event(scheduling),
            )

        if response.status_code not in [200, 201]:
            logger.error(f"❌ Failed to create calendar event: {response.text}")
            return None

        event_id = response.json().get("id")
        logger.info(f"✅ Google Calendar event created: {event_id}")
        return event_id

    except Exception as e:
        logger.error(f"❌ Error creating calendar event: {str(e)}")
        return None
