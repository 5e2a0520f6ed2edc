"""Auth router for the shared-password login.

Endpoints:
    POST /api/auth    - Check the password and set the session cookie
    POST /api/logout  - Clear the session cookie
"""
import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import get_config
from .service import AuthGate, clear_session_marker, set_session_marker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


class LoginRequest(BaseModel):
    """Request body for the login endpoint."""
    password: Optional[str] = None


@router.post("/auth")
async def login(body: LoginRequest) -> JSONResponse:
    """Check the submitted password.

    Returns ``{"success": true}`` and sets the session cookie on a match,
    otherwise 401 ``{"error": "Invalid password"}`` with no cookie.
    """
    config = get_config()
    gate = AuthGate(config.secrets.admin_password)

    if not gate.verify(body.password):
        logger.warning("[auth] Login rejected: invalid password")
        return JSONResponse({"error": "Invalid password"}, status_code=401)

    response = JSONResponse({"success": True})
    set_session_marker(response, config.session)
    logger.info("[auth] Login accepted")
    return response


@router.post("/logout")
async def logout() -> JSONResponse:
    """Clear the session cookie."""
    response = JSONResponse({"success": True})
    clear_session_marker(response, get_config().session)
    return response
