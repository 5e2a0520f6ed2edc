"""Shared-password auth gate and session marker helpers.

The session marker is a plain cookie whose presence is the only thing ever
checked. It is not signed and carries no server-side state.
"""
import logging
from typing import Optional

from fastapi import Request, Response

from ..config import SessionSettings

logger = logging.getLogger(__name__)

SESSION_COOKIE_VALUE = "true"


class AuthGate:
    """Compares a submitted password with the configured admin password."""

    def __init__(self, admin_password: Optional[str]):
        self._admin_password = admin_password or None
        if self._admin_password is None:
            logger.warning("No admin password configured; every login will be rejected")

    def verify(self, credential: Optional[str]) -> bool:
        if self._admin_password is None or credential is None:
            return False
        return credential == self._admin_password


def set_session_marker(response: Response, session: SessionSettings) -> None:
    """Attach the session cookie: site-wide, http-only, host-only, fixed lifetime."""
    response.set_cookie(
        key=session.cookie_name,
        value=SESSION_COOKIE_VALUE,
        max_age=session.max_age_seconds,
        path="/",
        httponly=True,
        secure=session.cookie_secure,
    )


def clear_session_marker(response: Response, session: SessionSettings) -> None:
    response.delete_cookie(
        key=session.cookie_name,
        path="/",
        httponly=True,
        secure=session.cookie_secure,
    )


def has_session_marker(request: Request, session: SessionSettings) -> bool:
    return session.cookie_name in request.cookies
