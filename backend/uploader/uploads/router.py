"""FastAPI router for upload endpoints.

Endpoints:
    POST /api/upload  - Store a file under tenant/directory and return its URL
    GET  /api/slug    - Normalize free text into a path segment
"""
import logging

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from ..auth.service import has_session_marker
from ..config import get_config
from ..errors import StorageError, UploadConflictError
from .schemas import ErrorResponse, SlugResponse, UploadResponse
from .service import get_upload_service
from .slug import slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["uploads"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def upload_file(request: Request):
    """Upload a file for a tenant/directory pair.

    Multipart fields: ``file`` (binary), ``tenant`` and ``directory`` (slugs).

    Returns:
        ``{"url": ...}`` with the public URL of the stored object.

    Errors:
        401: No session cookie (checked before the body is read).
        400: Missing form fields.
        409: No-clobber policy and the key is already taken.
        500: Object store failure.
        503: Storage not configured.
    """
    if not has_session_marker(request, get_config().session):
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    service = get_upload_service()
    if service is None:
        logger.warning("[uploads] Upload service not configured - returning 503")
        return JSONResponse({"error": "Storage not configured"}, status_code=503)

    # Leaving the block closes the spooled multipart files.
    async with request.form() as form:
        file = form.get("file")
        tenant = form.get("tenant")
        directory = form.get("directory")
        if not isinstance(file, UploadFile) or not isinstance(tenant, str) or not isinstance(directory, str):
            return JSONResponse(
                {"error": "Fields 'file', 'tenant' and 'directory' are required"},
                status_code=400,
            )
        content = await file.read()
        filename = file.filename or "unnamed"
        content_type = file.content_type

    try:
        result = await run_in_threadpool(
            service.upload,
            tenant,
            directory,
            filename,
            content,
            content_type,
        )
    except UploadConflictError as exc:
        return JSONResponse(
            {"error": "File already exists", "key": exc.key},
            status_code=409,
        )
    except StorageError as exc:
        logger.exception("[uploads] Upload failed: %s", exc)
        return JSONResponse({"error": "Upload failed"}, status_code=500)

    return UploadResponse(url=result.url)


@router.get("/slug", response_model=SlugResponse)
async def slug(text: str = "") -> SlugResponse:
    """Return the path segment the upload page previews and sends for ``text``."""
    return SlugResponse(slug=slugify(text))
