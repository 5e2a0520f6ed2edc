"""Tests for config loading: YAML files, environment overrides, app wiring."""
import pytest
from pydantic import ValidationError

from uploader.config import AppConfig, StorageSettings, UploadPolicy, load_config
from uploader.main import build_upload_service
from uploader.storage.s3 import S3ObjectStore

_ENV_NAMES = (
    "ADMIN_PASSWORD",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_REGION",
    "AWS_S3_BUCKET",
    "CDN_URL",
    "UPLOAD_POLICY",
    "UPLOADER_SETTINGS_PATH",
    "UPLOADER_SECRETS_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_files(tmp_path):
    settings_file = tmp_path / "uploader.settings.yaml"
    secrets_file = tmp_path / "uploader.secrets.yaml"
    settings_file.write_text(
        "server:\n"
        "  port: 9000\n"
        "storage:\n"
        "  region: eu-central-1\n"
        "  bucket: media\n"
        "upload:\n"
        "  policy: no_clobber\n",
        encoding="utf-8",
    )
    secrets_file.write_text(
        "admin_password: from-file\n"
        "aws:\n"
        "  access_key_id: AKIAFILE\n"
        "  secret_access_key: file-secret\n",
        encoding="utf-8",
    )
    return settings_file, secrets_file


def test_defaults_when_files_missing(tmp_path):
    cfg = load_config(tmp_path / "missing.yaml", tmp_path / "missing-secrets.yaml")

    assert cfg.server.port == 8000
    assert cfg.storage.region == "us-east-1"
    assert cfg.storage.bucket is None
    assert cfg.upload.policy is UploadPolicy.TIMESTAMPED
    assert cfg.session.cookie_name == "auth"
    assert cfg.session.max_age_seconds == 86400
    assert cfg.session.protected_path == "/upload"
    assert cfg.session.login_path == "/login"
    assert cfg.secrets.admin_password is None


def test_values_from_files(config_files):
    cfg = load_config(*config_files)

    assert cfg.server.port == 9000
    assert cfg.storage.bucket == "media"
    assert cfg.storage.region == "eu-central-1"
    assert cfg.upload.policy is UploadPolicy.NO_CLOBBER
    assert cfg.secrets.admin_password == "from-file"
    assert cfg.secrets.aws.access_key_id == "AKIAFILE"


def test_environment_overrides_files(config_files, monkeypatch):
    monkeypatch.setenv("ADMIN_PASSWORD", "from-env")
    monkeypatch.setenv("AWS_S3_BUCKET", "env-bucket")
    monkeypatch.setenv("AWS_REGION", "us-west-2")
    monkeypatch.setenv("CDN_URL", "https://cdn.example.com")
    monkeypatch.setenv("UPLOAD_POLICY", "timestamped")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "env-secret")

    cfg = load_config(*config_files)

    assert cfg.secrets.admin_password == "from-env"
    assert cfg.storage.bucket == "env-bucket"
    assert cfg.storage.region == "us-west-2"
    assert cfg.storage.cdn_url == "https://cdn.example.com"
    assert cfg.upload.policy is UploadPolicy.TIMESTAMPED
    assert cfg.secrets.aws.secret_access_key == "env-secret"
    # untouched values still come from the files
    assert cfg.secrets.aws.access_key_id == "AKIAFILE"


def test_environment_fills_sections_absent_from_files(tmp_path, monkeypatch):
    (tmp_path / "settings.yaml").write_text("storage:\n", encoding="utf-8")
    monkeypatch.setenv("AWS_S3_BUCKET", "env-bucket")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIAENV")

    cfg = load_config(tmp_path / "settings.yaml", tmp_path / "none.yaml")

    assert cfg.storage.bucket == "env-bucket"
    assert cfg.secrets.aws.access_key_id == "AKIAENV"


def test_file_paths_from_environment(config_files, monkeypatch):
    settings_file, secrets_file = config_files
    monkeypatch.setenv("UPLOADER_SETTINGS_PATH", str(settings_file))
    monkeypatch.setenv("UPLOADER_SECRETS_PATH", str(secrets_file))

    cfg = load_config()
    assert cfg.storage.bucket == "media"
    assert cfg.secrets.admin_password == "from-file"


def test_empty_cdn_url_means_unset(tmp_path, monkeypatch):
    monkeypatch.setenv("CDN_URL", "")
    cfg = load_config(tmp_path / "a.yaml", tmp_path / "b.yaml")
    assert cfg.storage.cdn_url is None


def test_unknown_policy_is_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("UPLOAD_POLICY", "overwrite-maybe")
    with pytest.raises(ValidationError):
        load_config(tmp_path / "a.yaml", tmp_path / "b.yaml")


class TestBuildUploadService:
    def test_no_bucket_disables_uploads(self):
        assert build_upload_service(AppConfig()) is None

    def test_bucket_builds_s3_backed_service(self):
        cfg = AppConfig(storage=StorageSettings(bucket="media", region="eu-west-1"))
        service = build_upload_service(cfg)

        assert service is not None
        assert service.policy is UploadPolicy.TIMESTAMPED
        assert service.public_base == "https://media.s3.eu-west-1.amazonaws.com"

    def test_cdn_url_becomes_public_base(self):
        cfg = AppConfig(storage=StorageSettings(bucket="media", cdn_url="https://cdn.example.com"))
        assert build_upload_service(cfg).public_base == "https://cdn.example.com"


def test_health_reports_storage(make_client):
    response = make_client().get("/health")
    assert response.json() == {"status": "ok", "storage": True}


def test_root_redirects_to_upload_page(make_client):
    response = make_client().get("/", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "/upload"


def test_s3_store_is_importable_from_package():
    from uploader.storage import S3ObjectStore as exported

    assert exported is S3ObjectStore
