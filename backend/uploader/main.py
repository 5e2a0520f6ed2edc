"""Uploader Backend Application.

This is the main entry point for the uploader service: a password-gated
front end for an S3 bucket. A login page sets a session cookie, the upload
page posts a file plus tenant and directory slugs, and the API stores the
file and returns its public URL.

Modules:
    - auth: shared-password login and the upload page route guard
    - uploads: upload API, key policies and slug normalization
    - storage: object store interface and the S3 implementation
    - pages: login and upload HTML pages
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .auth.guard import RouteGuardMiddleware
from .auth.router import router as auth_router
from .config import AppConfig, get_config
from .pages.router import build_router as build_pages_router
from .storage.s3 import S3ObjectStore
from .uploads.router import router as uploads_router
from .uploads.service import UploadService, get_upload_service, set_upload_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Silence verbose third-party loggers.
# botocore.auth logs the full SigV4 canonical request, credentials included.
for _noisy in (
    "botocore",
    "boto3",
    "urllib3",
    "urllib3.connectionpool",
):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def build_upload_service(config: AppConfig) -> Optional[UploadService]:
    """Create the upload service from config, or None if no bucket is set."""
    storage = config.storage
    if not storage.bucket:
        logger.warning("No storage bucket configured (AWS_S3_BUCKET); uploads disabled")
        return None

    store = S3ObjectStore(
        bucket=storage.bucket,
        region=storage.region,
        aws_access_key_id=config.secrets.aws.access_key_id,
        aws_secret_access_key=config.secrets.aws.secret_access_key,
    )
    logger.info(
        "Upload service ready: bucket=%s region=%s policy=%s",
        storage.bucket,
        storage.region,
        config.upload.policy.value,
    )
    return UploadService(
        store=store,
        policy=config.upload.policy,
        cdn_url=storage.cdn_url,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    config = get_config()

    # Apply configured log level to root logger so that
    # `logging.level: "debug"` in uploader.settings.yaml activates DEBUG output.
    configured_level = getattr(logging, config.logging.level.upper(), None)
    if configured_level is not None:
        logging.getLogger().setLevel(configured_level)
        logger.info("Root logger level set to %s", config.logging.level.upper())

    # An already-installed service (e.g. a test fake) is left alone.
    if get_upload_service() is None:
        set_upload_service(build_upload_service(config))

    yield  # Application runs here

    # Shutdown
    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """Build the FastAPI application: routers plus the page route guard."""
    config = get_config()
    application = FastAPI(
        title="Uploader API",
        description="Password-gated file uploads to S3",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.add_middleware(RouteGuardMiddleware, session=config.session)

    application.include_router(auth_router)
    application.include_router(uploads_router)
    application.include_router(build_pages_router(config.session))

    @application.get("/health")
    async def health() -> dict:
        """Health check endpoint.

        Returns:
            dict: Status object; ``storage`` is false when uploads are disabled.
        """
        return {"status": "ok", "storage": get_upload_service() is not None}

    return application


app = create_app()
