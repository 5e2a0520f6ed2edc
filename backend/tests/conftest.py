"""Shared test fixtures and configuration for backend tests."""
import time

import pytest
from fastapi.testclient import TestClient

from uploader.config import (
    AppConfig,
    Secrets,
    StorageSettings,
    UploadPolicy,
    reset_config,
    set_config,
)
from uploader.errors import StorageError
from uploader.main import create_app
from uploader.storage.base import ExistenceCheck, ObjectStore
from uploader.uploads.service import UploadService, set_upload_service

ADMIN_PASSWORD = "correct horse battery staple"
BUCKET = "test-bucket"
REGION = "eu-west-1"


class FakeObjectStore(ObjectStore):
    """In-memory ObjectStore that records every call."""

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.exists_calls: list[str] = []
        self.put_calls: list[str] = []
        self.exists_error: Exception | None = None
        self.put_error: Exception | None = None

    def exists(self, key: str) -> ExistenceCheck:
        self.exists_calls.append(key)
        if self.exists_error is not None:
            return ExistenceCheck.failed(self.exists_error)
        if key in self.objects:
            return ExistenceCheck.found()
        return ExistenceCheck.not_found()

    def put(self, key: str, body: bytes, content_type: str) -> None:
        self.put_calls.append(key)
        if self.put_error is not None:
            raise StorageError(f"Failed to write {key}", cause=self.put_error)
        self.objects[key] = (body, content_type)

    def default_public_base(self) -> str:
        return f"https://{BUCKET}.s3.{REGION}.amazonaws.com"


class FakeClock:
    """Returns the queued timestamps (seconds) one per call."""

    def __init__(self, *times: float):
        self._times = list(times)

    def __call__(self) -> float:
        return self._times.pop(0)


@pytest.fixture
def config():
    """Install a known config for the duration of a test."""
    cfg = AppConfig(
        secrets=Secrets(admin_password=ADMIN_PASSWORD),
        storage=StorageSettings(bucket=BUCKET, region=REGION),
    )
    set_config(cfg)
    yield cfg
    reset_config()


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def make_client(config, store):
    """Factory for a TestClient wired to the fake store.

    Pass ``authenticated=False`` for a client without the session cookie.
    """

    def _make(
        policy: UploadPolicy = UploadPolicy.TIMESTAMPED,
        cdn_url: str | None = None,
        clock=time.time,
        authenticated: bool = True,
    ) -> TestClient:
        set_upload_service(UploadService(store, policy=policy, cdn_url=cdn_url, clock=clock))
        client = TestClient(create_app())
        if authenticated:
            client.cookies.set("auth", "true")
        return client

    yield _make
    set_upload_service(None)


@pytest.fixture
def api_client(make_client):
    """Unauthenticated TestClient for the app."""
    return make_client(authenticated=False)
