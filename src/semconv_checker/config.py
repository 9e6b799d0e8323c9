"""
Centralized runtime settings for the checker.

Uses Pydantic BaseSettings for environment variable integration and
validation.  Rule configuration (which groups apply to which metrics)
lives in the YAML rules file; these settings say where that file is
and how the process runs.

Configuration sources (in order of precedence):
1. Explicit constructor arguments (CLI flags)
2. Environment variables (SEMCONV_CHECKER_*)
3. .env file
4. Default values

Example:
    from semconv_checker.config import get_config

    config = get_config()
    print(config.address)  # From SEMCONV_CHECKER_ADDRESS or default
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from semconv_checker.constants import (
    DEFAULT_ADDRESS,
    DEFAULT_CONFIG_PATH,
    DEFAULT_MAX_WORKERS,
    DEFAULT_SHUTDOWN_GRACE_S,
)


class CheckerSettings(BaseSettings):
    """
    Process settings for the checker.

    All settings can be overridden via environment variables
    prefixed with SEMCONV_CHECKER_.

    Example:
        export SEMCONV_CHECKER_ADDRESS=127.0.0.1:4317
        export SEMCONV_CHECKER_LOG_LEVEL=debug
    """

    model_config = SettingsConfigDict(
        env_prefix="SEMCONV_CHECKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Rule and catalog sources
    config_path: str = Field(
        default=DEFAULT_CONFIG_PATH,
        description="Path to the rules YAML (resource/metrics/reportUnmatched/oneShot)",
    )
    catalog_path: Optional[str] = Field(
        default=None,
        description="Path to a semantic convention catalog YAML (bundled catalog if unset)",
    )

    # gRPC listener
    address: str = Field(
        default=DEFAULT_ADDRESS,
        description="host:port the OTLP gRPC metrics service binds to",
    )
    max_workers: int = Field(
        default=DEFAULT_MAX_WORKERS,
        ge=1,
        description="Thread pool size for concurrent Export calls",
    )
    shutdown_grace_s: float = Field(
        default=DEFAULT_SHUTDOWN_GRACE_S,
        ge=0.0,
        description="Grace period for in-flight calls when the server stops",
    )

    # Logging
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format (json for log pipelines, text for console)",
    )

    @field_validator("config_path", "catalog_path")
    @classmethod
    def expand_path(cls, v: Optional[str]) -> Optional[str]:
        """Expand ~ and environment variables in paths."""
        if v is None:
            return v
        return os.path.expanduser(os.path.expandvars(v))

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Strip a URL scheme; gRPC binds plain host:port."""
        for prefix in ("http://", "https://", "grpc://"):
            if v.startswith(prefix):
                v = v[len(prefix):]
        if ":" not in v:
            raise ValueError(f"address must be host:port, got {v!r}")
        return v

    def get_config_file(self) -> Path:
        return Path(self.config_path)

    def get_catalog_file(self) -> Optional[Path]:
        return Path(self.catalog_path) if self.catalog_path else None


# Global singleton
_config: Optional[CheckerSettings] = None


def get_config(**overrides) -> CheckerSettings:
    """
    Get the global settings instance.

    Creates a singleton on first call.  Subsequent calls return the same
    instance unless overrides are provided.
    """
    global _config

    if overrides or _config is None:
        _config = CheckerSettings(**overrides)

    return _config


def reset_config() -> None:
    """Reset the global settings (for testing)."""
    global _config
    _config = None
