"""Upload service: key building, collision policy and public URLs.

Objects are stored at ``{tenant}/{directory}/{name}`` (no-clobber policy) or
``{tenant}/{directory}/{epoch-millis}-{name}`` (timestamped policy). Tenant
and directory are expected to be slugs already; the service does not
re-normalize them.
"""
import logging
import time
from typing import Callable, Optional

from ..config import UploadPolicy
from ..errors import StorageError, UploadConflictError
from ..storage.base import ExistenceStatus, ObjectStore
from .schemas import UploadResult

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_service: Optional["UploadService"] = None


def get_upload_service() -> Optional["UploadService"]:
    """Return the global UploadService, or None if storage is not configured."""
    return _service


def set_upload_service(service: Optional["UploadService"]) -> None:
    """Set (or clear) the global UploadService."""
    global _service
    _service = service


# ---------------------------------------------------------------------------
# Key building
# ---------------------------------------------------------------------------


def build_key(
    tenant: str,
    directory: str,
    filename: str,
    policy: UploadPolicy,
    now_ms: Optional[int] = None,
) -> str:
    """Build the object key for an upload.

    Args:
        tenant: Tenant slug.
        directory: Directory slug.
        filename: Original file name, used verbatim.
        policy: Naming policy.
        now_ms: Epoch milliseconds for the timestamped policy.  Required
                when ``policy`` is TIMESTAMPED.
    """
    if policy is UploadPolicy.TIMESTAMPED:
        if now_ms is None:
            raise ValueError("now_ms is required for the timestamped policy")
        return f"{tenant}/{directory}/{now_ms}-{filename}"
    return f"{tenant}/{directory}/{filename}"


def public_url(base: str, key: str) -> str:
    return f"{base.rstrip('/')}/{key}"


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class UploadService:
    """Stores uploads in an ObjectStore according to one naming policy.

    Args:
        store: Object store to write to.
        policy: TIMESTAMPED (always write) or NO_CLOBBER (reject collisions).
        cdn_url: Optional content-delivery base; falls back to the store's
                 default public endpoint.
        clock: Returns the current time in seconds (``time.time``).
    """

    def __init__(
        self,
        store: ObjectStore,
        policy: UploadPolicy = UploadPolicy.TIMESTAMPED,
        cdn_url: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._policy = policy
        self._cdn_url = cdn_url or None
        self._clock = clock

    @property
    def policy(self) -> UploadPolicy:
        return self._policy

    @property
    def public_base(self) -> str:
        return self._cdn_url or self._store.default_public_base()

    def upload(
        self,
        tenant: str,
        directory: str,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> UploadResult:
        """Store one file and return its key and public URL.

        Raises:
            UploadConflictError: NO_CLOBBER policy and the key is taken.
            StorageError: The store could not be queried or written.
        """
        content_type = content_type or DEFAULT_CONTENT_TYPE
        key = build_key(
            tenant,
            directory,
            filename,
            self._policy,
            now_ms=int(self._clock() * 1000),
        )

        if self._policy is UploadPolicy.NO_CLOBBER:
            # Check and write are separate calls; concurrent uploads of the
            # same key can both get past this point.
            check = self._store.exists(key)
            if check.status is ExistenceStatus.FOUND:
                logger.warning("[uploads] Refusing to overwrite existing object %s", key)
                raise UploadConflictError(key)
            if check.status is ExistenceStatus.ERROR:
                raise StorageError(
                    f"Existence check failed for {key}: {check.error}", cause=check.error
                )

        self._store.put(key, content, content_type)

        url = public_url(self.public_base, key)
        logger.info("[uploads] Stored %s (%d bytes, %s)", key, len(content), content_type)
        return UploadResult(
            key=key,
            url=url,
            size_bytes=len(content),
            content_type=content_type,
        )
