"""Page-level route guard.

Redirects unauthenticated requests for the protected page to the login page.
API endpoints are not covered here; each one checks the session marker
itself.
"""
import logging

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..config import SessionSettings
from .service import has_session_marker

logger = logging.getLogger(__name__)


class RouteGuardMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, session: SessionSettings):
        super().__init__(app)
        self._session = session

    async def dispatch(self, request: Request, call_next):
        if (
            request.url.path == self._session.protected_path
            and not has_session_marker(request, self._session)
        ):
            logger.debug("[guard] No session for %s, redirecting to login", request.url.path)
            return RedirectResponse(url=self._session.login_path, status_code=307)
        return await call_next(request)
