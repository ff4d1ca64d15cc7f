"""
Cookies Module - Black Box Interface

Purpose: Turn a persisted session reference into a response cookie
Interface: new_cookie(), apply_cookie()
Hidden: Expires calculation, Starlette header rendering

Cookie values are written as given; signing and encryption are left to the store.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Optional

from starlette.responses import Response

from multisession.modules.session import Options

# Expires value used to delete a cookie right away.
EXPIRED = datetime.fromtimestamp(1, UTC)


@dataclass
class SessionCookie:
    """A cookie queued for the response."""

    name: str
    value: str
    path: str = "/"
    domain: Optional[str] = None
    max_age: int = 0
    expires: Optional[datetime] = None
    secure: bool = False
    http_only: bool = False


def new_cookie(name: str, value: str, options: Optional[Options]) -> SessionCookie:
    """
    Build a cookie with the given options.

    Expires is derived from max_age as well, for clients that ignore Max-Age.

    Args:
        name: Cookie name
        value: Cookie value
        options: Session options (required)

    Returns:
        SessionCookie ready to be applied to a response

    Raises:
        ValueError: If options is None
    """
    if options is None:
        raise ValueError("new_cookie got None options")

    cookie = SessionCookie(
        name=name,
        value=value,
        path=options.path,
        domain=options.domain,
        max_age=options.max_age,
        secure=options.secure,
        http_only=options.http_only,
    )

    if options.max_age > 0:
        cookie.expires = datetime.now(UTC) + timedelta(seconds=options.max_age)
    elif options.max_age < 0:
        # Set it to the past to expire now.
        cookie.expires = EXPIRED
    return cookie


def apply_cookie(response: Response, cookie: SessionCookie) -> None:
    """Write a queued cookie onto a Starlette response."""
    if cookie.max_age > 0:
        max_age = cookie.max_age
    elif cookie.max_age < 0:
        max_age = 0
    else:
        max_age = None

    response.set_cookie(
        key=cookie.name,
        value=cookie.value,
        max_age=max_age,
        expires=cookie.expires,
        path=cookie.path,
        domain=cookie.domain,
        secure=cookie.secure,
        httponly=cookie.http_only,
    )


__all__ = ["SessionCookie", "new_cookie", "apply_cookie", "EXPIRED"]
