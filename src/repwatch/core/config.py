# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Application configuration via environment variables and .env files."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from repwatch.core.constants import DEFAULT_ADAPTER_TIMEOUT, SOURCE_ALIASES, Source


def _split_csv(value: object) -> list[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(value) if isinstance(value, (list, tuple)) else []


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REPWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    # Storage
    db_backend: Literal["sqlite", "memory"] = "sqlite"
    db_path: Path = Path("repwatch.db")
    auto_migrate: bool = True

    # HTTP service
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    api_workers: int = 1
    api_keys: Annotated[list[str], NoDecode] = []
    # The extension calls from a chrome-extension:// origin
    cors_origins: Annotated[list[str], NoDecode] = ["*"]
    rate_limit_per_key: int = 600  # provider-backed lookups per minute, per API key
    rate_limit_per_ip: int = 60  # same, for callers without a key

    # Reputation sources
    ipqs_key: str = ""
    vt_key: str = ""
    google_key: str = ""
    ssllabs_email: str = ""
    ipqs_strictness: int = Field(default=0, ge=0, le=2)
    adapter_timeout: float = Field(default=DEFAULT_ADAPTER_TIMEOUT, gt=0)
    enabled_sources: Annotated[list[str], NoDecode] = [s.value for s in Source]

    # Scoring
    score_policy: str = "last_writer"

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("api_keys", "cors_origins", mode="before")
    @classmethod
    def _parse_csv(cls, v: object) -> list[str]:
        return _split_csv(v)

    @field_validator("enabled_sources", mode="before")
    @classmethod
    def _parse_sources(cls, v: object) -> list[str]:
        """Accept short names (``vt``, ``ssl``) alongside canonical ones."""
        return [SOURCE_ALIASES.get(name.lower(), name) for name in _split_csv(v)]


def get_settings() -> Settings:
    return Settings()
