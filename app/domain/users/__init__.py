"""Users domain - Usernames, time intervals, availability and bookings"""

from .router import router

__all__ = ["router"]
