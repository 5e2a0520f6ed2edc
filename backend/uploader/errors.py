"""Exceptions raised by the upload service and storage layer."""
from typing import Optional


class UploaderError(Exception):
    """Base class for uploader failures."""


class UploadConflictError(UploaderError):
    """An object already exists at the key a no-clobber upload targets."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Object already exists: {key}")
        self.key = key


class StorageError(UploaderError):
    """The object store could not be queried or written.

    No distinction is made between transient and permanent failures;
    callers never retry.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause
