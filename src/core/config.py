"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- Lets adapters (HTTP client) and the CLI read the same values consistently.
- Read once at startup: flags override it, nothing reads the environment mid-run.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import ApiTarget

DEFAULT_SERVER_URL = "http://localhost:8080"
DEFAULT_SUPERADMIN_USER = "admin"
PLACEHOLDER_SECRET = "changeme"
DEFAULT_QUOTA_BYTES = 10 * 1024**3


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "rmail-onboard"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "rmail-onboard"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "rmail-onboard"
    return Path.home() / ".config" / "rmail-onboard"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Application-wide configuration.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without leaking into the Core.
    - One configuration contract shared by the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="RMAIL_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    server_url: str = Field(
        default=DEFAULT_SERVER_URL,
        min_length=1,
        description="Base URL of the mail server management API.",
    )
    superadmin_user: str = Field(
        default=DEFAULT_SUPERADMIN_USER,
        min_length=1,
        description="Super-admin username used for Basic auth.",
    )
    # Deployments already export ADMIN_SECRET for the mail server container.
    superadmin_secret: SecretStr = Field(
        default=SecretStr(PLACEHOLDER_SECRET),
        validation_alias="ADMIN_SECRET",
        description="Super-admin password used for Basic auth.",
    )
    default_quota_bytes: int = Field(
        default=DEFAULT_QUOTA_BYTES,
        ge=0,
        description="Tenant disk quota (bytes) when --quota is not given.",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    user_agent: str = Field(
        default="rmail-onboard/0.1",
        min_length=1,
        description="User-Agent for management API requests.",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    )

    @field_validator("superadmin_secret", mode="before")
    @classmethod
    def _empty_secret_is_unset(cls, value: object) -> object:
        # An exported but empty ADMIN_SECRET counts as unset.
        if value is None or value == "":
            return PLACEHOLDER_SECRET
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value


def resolve_target(
    settings: AppSettings,
    *,
    server: str | None = None,
    superadmin: str | None = None,
    secret: str | None = None,
) -> ApiTarget:
    """Resolve where and as whom to call the management API.

    Precedence: explicit flag > environment (already in `settings`) > default.
    """

    base_url = server or settings.server_url
    return ApiTarget(
        base_url=base_url.rstrip("/"),
        username=superadmin or settings.superadmin_user,
        secret=SecretStr(secret) if secret else settings.superadmin_secret,
    )
