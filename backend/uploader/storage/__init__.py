"""Object storage back-ends.

The upload service depends only on :class:`ObjectStore`; :class:`S3ObjectStore`
is the production implementation.
"""
from .base import ExistenceCheck, ExistenceStatus, ObjectStore
from .s3 import S3ObjectStore

__all__ = [
    "ExistenceCheck",
    "ExistenceStatus",
    "ObjectStore",
    "S3ObjectStore",
]
