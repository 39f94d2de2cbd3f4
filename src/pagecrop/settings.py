"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
import ssl
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import httpx
from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagecrop.exceptions import SettingsError

logger = logging.getLogger(__name__)

_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "host.docker.internal"})


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "pagecrop"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    http_proxy: str | None = Field(default=None, validation_alias="HTTP_PROXY", description="HTTP proxy URL.")
    https_proxy: str | None = Field(
        default=None,
        validation_alias="HTTPS_PROXY",
        description="HTTPS proxy URL.",
    )
    cert_path: str | None = Field(
        default=None,
        validation_alias="CERT_PATH",
        description="Path to SSL certificate.",
    )
    timeout: float = Field(
        default=30.0,
        validation_alias="TIMEOUT",
        description="Request timeout in seconds.",
    )
    max_connections: int = Field(
        default=20,
        validation_alias="MAX_CONNECTIONS",
        description="Maximum number of concurrent connections.",
    )

    backend_url: str | None = Field(
        default=None,
        validation_alias="BACKEND_URL",
        description="Base URL of the backend hosting serverless functions.",
    )
    backend_api_key: str | None = Field(
        default=None,
        validation_alias="BACKEND_API_KEY",
        description="Bearer token sent to serverless functions.",
    )
    diagram_function: str = Field(
        default="upload",
        validation_alias="DIAGRAM_FUNCTION",
        description="Name of the serverless function receiving diagram uploads.",
    )

    default_scale: float = Field(default=1.5, gt=0, validation_alias="DEFAULT_SCALE")
    min_scale: float = Field(default=0.5, gt=0, validation_alias="MIN_SCALE")
    max_scale: float = Field(default=2.0, gt=0, validation_alias="MAX_SCALE")
    scale_step: float = Field(default=0.1, gt=0, validation_alias="SCALE_STEP")
    device_pixel_ratio: float = Field(
        default=2.0,
        gt=0,
        validation_alias="DEVICE_PIXEL_RATIO",
        description="Native bitmap pixels per displayed CSS pixel.",
    )

    output_dir: str = Field(
        default="results/crops",
        validation_alias="OUTPUT_DIR",
        description="Directory to store cropped images.",
    )

    @field_validator("backend_url")
    @classmethod
    def _require_https_backend(cls, value: str | None) -> str | None:
        if not value:
            return None
        parsed = urlparse(value)
        if parsed.scheme == "https":
            return value.rstrip("/")
        if parsed.scheme == "http" and (parsed.hostname or "").lower() in _LOCAL_HOSTS:
            return value.rstrip("/")
        raise ValueError("BACKEND_URL must use https outside local development")

    @model_validator(mode="after")
    def _check_scale_bounds(self) -> Settings:
        if self.min_scale > self.max_scale:
            raise ValueError("MIN_SCALE must not exceed MAX_SCALE")
        if not self.min_scale <= self.default_scale <= self.max_scale:
            raise ValueError("DEFAULT_SCALE must lie between MIN_SCALE and MAX_SCALE")
        return self

    @property
    def diagram_endpoint(self) -> str | None:
        """Return the full URL of the diagram upload function."""
        if not self.backend_url:
            return None
        return f"{self.backend_url}/functions/v1/{self.diagram_function}"

    def build_async_client(self) -> httpx.AsyncClient:
        """Create an async HTTPX client configured from settings."""
        return httpx.AsyncClient(
            **build_httpx_client_kwargs(self),
            limits=httpx.Limits(max_connections=self.max_connections),
        )


def build_ssl_context(settings: Settings) -> ssl.SSLContext:
    """Build a strict SSL context from settings.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        ssl.SSLContext: Configured TLS context.
    """
    ssl_context = ssl.create_default_context(cafile=settings.cert_path)
    ssl_context.verify_mode = ssl.CERT_REQUIRED
    ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2
    return ssl_context


def build_httpx_client_kwargs(settings: Settings) -> dict[str, Any]:
    """Build kwargs used for `httpx.AsyncClient`.

    Args:
        settings (Settings): Runtime settings.

    Returns:
        dict[str, Any]: Arguments for the client constructor.
    """
    kwargs: dict[str, Any] = {
        "verify": build_ssl_context(settings),
        "timeout": settings.timeout,
    }
    proxy_url = settings.https_proxy or settings.http_proxy
    if proxy_url:
        kwargs["proxy"] = proxy_url
    return kwargs


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            try:
                ensure_env_file_exists()
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values."""
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
