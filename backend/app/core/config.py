"""
Application configuration with environment-based settings.

This module uses Pydantic Settings for automatic environment variable loading
and validation.
"""

import os
import tomllib
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_csv(v: Any) -> list[str]:
    """Parse a comma-separated string (or list) into a list of values"""
    if isinstance(v, str):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list):
        return v
    raise ValueError(v)


def _load_app_version_from_pyproject() -> str:
    """Load application version from pyproject.toml"""
    try:
        pyproject_path = Path(__file__).parents[3] / "pyproject.toml"

        if not pyproject_path.exists():
            # Fallback for installed copies without the project tree
            return "0.0.0"

        with open(pyproject_path, "rb") as f:
            config = tomllib.load(f)
            version = config.get("project", {}).get("version")

            if not version:
                return "0.0.0"

            return version

    except (OSError, tomllib.TOMLDecodeError):
        return "0.0.0"


class Settings(BaseSettings):
    """
    Application settings with validation.

    All settings have sensible defaults for local development,
    allowing zero-config startup.
    """

    model_config = SettingsConfigDict(
        # Disable .env loading when TESTING=1 (set by conftest.py)
        env_file=None if os.getenv("TESTING") else ".env",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=True,
    )

    # API Configuration
    PROJECT_NAME: str = "OAuth Callback Relay"
    APP_VERSION: str = _load_app_version_from_pyproject()
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: Literal["local", "development", "staging", "production"] = "local"

    # Flow relay
    # Reported outcomes are kept this long before a sweep removes them.
    FLOW_RETENTION_MINUTES: int = 10
    # Sweep expired outcomes before every report/query request.
    FLOW_SWEEP_ON_REQUEST: bool = True
    # Background sweep interval; 0 disables the background task.
    FLOW_CLEANUP_INTERVAL_SECONDS: int = 60

    # CORS headers added to every response.
    CORS_ALLOW_ORIGIN: str = "*"
    CORS_ALLOW_METHODS: Annotated[
        list[str] | str, BeforeValidator(parse_csv)
    ] = ["GET", "POST", "OPTIONS"]
    CORS_ALLOW_HEADERS: Annotated[
        list[str] | str, BeforeValidator(parse_csv)
    ] = ["Content-Type"]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_headers(self) -> dict[str, str]:
        """Headers attached to every relay response"""
        return {
            "Access-Control-Allow-Origin": self.CORS_ALLOW_ORIGIN,
            "Access-Control-Allow-Methods": ", ".join(self.CORS_ALLOW_METHODS),
            "Access-Control-Allow-Headers": ", ".join(self.CORS_ALLOW_HEADERS),
        }


# Create settings instance
settings = Settings()
