"""Amazon S3 object store.

Wraps a boto3 ``s3`` client. Objects land in a single bucket; the public URL
base defaults to the virtual-hosted endpoint
``https://<bucket>.s3.<region>.amazonaws.com``.
"""
import logging
import threading
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import StorageError
from .base import ExistenceCheck, ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"

# Error codes head_object reports for a missing key. HEAD responses carry no
# body, so botocore usually surfaces the bare status code.
_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class S3ObjectStore(ObjectStore):
    """Object store backed by a single S3 bucket.

    Args:
        bucket:                Target bucket name.
        region:                AWS region.  Defaults to ``us-east-1``.
        aws_access_key_id:     AWS access key.  ``None`` → default credential chain.
        aws_secret_access_key: AWS secret access key.
        client:                Pre-built boto3 client (tests pass a mock here).
    """

    def __init__(
        self,
        bucket: str,
        region: Optional[str] = None,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        client: Optional[object] = None,
    ) -> None:
        if not bucket:
            raise ValueError("S3ObjectStore requires a bucket name")
        self._bucket     = bucket
        self._region     = region or DEFAULT_REGION
        self._access_key = aws_access_key_id
        self._secret_key = aws_secret_access_key
        self._client     = client
        self._client_lock = threading.Lock()

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def region(self) -> str:
        return self._region

    def _get_client(self):
        """Return a cached boto3 s3 client.

        Built once under a lock: requests arrive on FastAPI's thread pool and
        client creation on the default boto3 session is not thread-safe.
        """
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    kwargs: dict = {"region_name": self._region}
                    if self._access_key and self._secret_key:
                        kwargs["aws_access_key_id"]     = self._access_key
                        kwargs["aws_secret_access_key"] = self._secret_key
                    self._client = boto3.client("s3", **kwargs)
        return self._client

    def exists(self, key: str) -> ExistenceCheck:
        try:
            self._get_client().head_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _NOT_FOUND_CODES:
                return ExistenceCheck.not_found()
            logger.warning("[storage/s3] head_object failed for %s: %s", key, code)
            return ExistenceCheck.failed(exc)
        except BotoCoreError as exc:
            logger.warning("[storage/s3] head_object failed for %s: %s", key, exc)
            return ExistenceCheck.failed(exc)
        return ExistenceCheck.found()

    def put(self, key: str, body: bytes, content_type: str) -> None:
        logger.debug(
            "[storage/s3] put_object bucket=%s key=%s bytes=%d",
            self._bucket, key, len(body),
        )
        try:
            self._get_client().put_object(
                Bucket=self._bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Failed to write {key}: {exc}", cause=exc) from exc

    def default_public_base(self) -> str:
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com"
