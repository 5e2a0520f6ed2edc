"""Uploader application configuration.

Loads settings from two YAML files:
  * uploader.settings.yaml  - non-secret configuration
  * uploader.secrets.yaml   - secrets (never committed)

Environment variables (ADMIN_PASSWORD, AWS_REGION, AWS_S3_BUCKET, CDN_URL, ...)
override both files.
"""
from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

SETTINGS_FILE = Path("uploader.settings.yaml")
SECRETS_FILE  = Path("uploader.secrets.yaml")


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning("Config file not found: %s", path)
        return {}
    with path.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def _drop_empty_sections(data: Dict[str, Any]) -> Dict[str, Any]:
    # A bare "storage:" line parses as None; treat it as "use defaults".
    return {key: value for key, value in data.items() if value is not None}


# ---------------------------------------------------------------------------
# Secrets models
# ---------------------------------------------------------------------------


class AwsSecrets(BaseModel):
    access_key_id:     Optional[str] = None
    secret_access_key: Optional[str] = None


class Secrets(BaseModel):
    admin_password: Optional[str] = None
    aws:            AwsSecrets = Field(default_factory=AwsSecrets)


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class UploadPolicy(str, Enum):
    """How the upload endpoint names objects.

    - TIMESTAMPED: ``tenant/directory/<epoch-millis>-<name>``, always writes.
    - NO_CLOBBER:  ``tenant/directory/<name>``, rejects when the key exists.
    """
    TIMESTAMPED = "timestamped"
    NO_CLOBBER  = "no_clobber"


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class LoggingSettings(BaseModel):
    level: str = "info"


class StorageSettings(BaseModel):
    region:  str           = "us-east-1"
    bucket:  Optional[str] = None
    cdn_url: Optional[str] = None

    @field_validator("bucket", "cdn_url")
    @classmethod
    def _empty_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class UploadSettings(BaseModel):
    policy: UploadPolicy = UploadPolicy.TIMESTAMPED


class SessionSettings(BaseModel):
    cookie_name:     str  = "auth"
    max_age_seconds: int  = 60 * 60 * 24
    cookie_secure:   bool = False
    protected_path:  str  = "/upload"
    login_path:      str  = "/login"


class AppConfig(BaseModel):
    server:   ServerSettings  = Field(default_factory=ServerSettings)
    logging:  LoggingSettings = Field(default_factory=LoggingSettings)
    storage:  StorageSettings = Field(default_factory=StorageSettings)
    upload:   UploadSettings  = Field(default_factory=UploadSettings)
    session:  SessionSettings = Field(default_factory=SessionSettings)
    secrets:  Secrets         = Field(default_factory=Secrets)


# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------

# env var -> (section path inside the merged dict)
_ENV_OVERRIDES = {
    "ADMIN_PASSWORD":        ("secrets", "admin_password"),
    "AWS_ACCESS_KEY_ID":     ("secrets", "aws", "access_key_id"),
    "AWS_SECRET_ACCESS_KEY": ("secrets", "aws", "secret_access_key"),
    "AWS_REGION":            ("storage", "region"),
    "AWS_S3_BUCKET":         ("storage", "bucket"),
    "CDN_URL":               ("storage", "cdn_url"),
    "UPLOAD_POLICY":         ("upload", "policy"),
}


def _apply_env_overrides(data: Dict[str, Any]) -> None:
    for env_name, path in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is None:
            continue
        node = data
        for part in path[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[path[-1]] = value
        logger.debug("Config value %s overridden from environment", ".".join(path))


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(
    settings_path: Optional[Path] = None,
    secrets_path: Optional[Path] = None,
) -> AppConfig:
    """Load and merge settings, secrets and environment into an *AppConfig*."""
    settings_path = Path(
        settings_path or os.environ.get("UPLOADER_SETTINGS_PATH") or SETTINGS_FILE
    )
    secrets_path = Path(
        secrets_path or os.environ.get("UPLOADER_SECRETS_PATH") or SECRETS_FILE
    )

    settings_data = _drop_empty_sections(_load_yaml(settings_path))
    # Secrets live under the "secrets" key in AppConfig
    settings_data["secrets"] = _drop_empty_sections(_load_yaml(secrets_path))
    _apply_env_overrides(settings_data)

    config = AppConfig(**settings_data)
    logger.info(
        "Config loaded (bucket=%s, region=%s, policy=%s, cdn=%s)",
        config.storage.bucket,
        config.storage.region,
        config.upload.policy.value,
        bool(config.storage.cdn_url),
    )
    return config


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Return the process-wide config, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Optional[AppConfig]) -> None:
    """Replace the process-wide config."""
    global _config
    _config = config


def reset_config() -> None:
    """Forget the cached config (for testing)."""
    global _config
    _config = None
