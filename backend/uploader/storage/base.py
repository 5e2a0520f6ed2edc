"""Abstract ObjectStore interface.

The upload service talks to object storage only through this interface, so a
store can be swapped for an in-memory fake in tests.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ExistenceStatus(str, Enum):
    FOUND     = "found"
    NOT_FOUND = "not_found"
    ERROR     = "error"


@dataclass(frozen=True)
class ExistenceCheck:
    """Outcome of asking the store whether a key is occupied.

    ``error`` is set only when ``status`` is ``ERROR``.
    """
    status: ExistenceStatus
    error: Optional[BaseException] = None

    @classmethod
    def found(cls) -> "ExistenceCheck":
        return cls(ExistenceStatus.FOUND)

    @classmethod
    def not_found(cls) -> "ExistenceCheck":
        return cls(ExistenceStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: BaseException) -> "ExistenceCheck":
        return cls(ExistenceStatus.ERROR, error)


class ObjectStore(ABC):
    """Abstract base class for object stores.

    Implementations must be thread-safe: the upload service calls them from
    FastAPI's thread-pool executor.
    """

    @abstractmethod
    def exists(self, key: str) -> ExistenceCheck:
        """Report whether an object is stored at exactly ``key``.

        Never raises for store failures; those come back as
        ``ExistenceStatus.ERROR`` with the exception attached.
        """

    @abstractmethod
    def put(self, key: str, body: bytes, content_type: str) -> None:
        """Store ``body`` under ``key``, replacing any existing object.

        Raises:
            StorageError: On any transport or permission failure.
        """

    @abstractmethod
    def default_public_base(self) -> str:
        """Public URL prefix used when no content-delivery base is configured."""
