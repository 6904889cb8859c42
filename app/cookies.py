"""
Pending-user cookie helpers

The cookie name carries '@', which http.cookies refuses as a key, so the
Set-Cookie header is written by hand instead of through Response.set_cookie.
"""

from fastapi import Response

from .config import COOKIE_SECURE, PENDING_USER_COOKIE, PENDING_USER_COOKIE_MAX_AGE


def build_cookie_header(name: str, value: str, max_age: int, path: str = "/") -> str:
    parts = [f"{name}={value}", f"Max-Age={max_age}", f"Path={path}", "SameSite=lax"]
    if COOKIE_SECURE:
        parts.append("Secure")
    return "; ".join(parts)


def set_pending_user_cookie(response: Response, user_id: str) -> None:
    response.headers.append(
        "set-cookie", build_cookie_header(PENDING_USER_COOKIE, user_id, PENDING_USER_COOKIE_MAX_AGE)
    )


def delete_pending_user_cookie(response: Response) -> None:
    response.headers.append(
        "set-cookie",
        build_cookie_header(PENDING_USER_COOKIE, '""', 0)
        + "; expires=Thu, 01 Jan 1970 00:00:00 GMT",
    )
