from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic import ConfigDict, field_validator

ENV_BOOL_TRUE = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ENV_BOOL_TRUE


class Settings(BaseModel):
    feature_calculation_records: bool = Field(
        default_factory=lambda: _env_bool("FEATURE_CALCULATION_RECORDS", True)
    )
    log_dir: str | None = Field(default_factory=lambda: os.getenv("TAXWISE_LOG_DIR", "logs"))
    public_url: str = Field(
        default_factory=lambda: os.getenv("TAXWISE_PUBLIC_URL", "http://localhost:8000/ui/")
    )
    build_version: str = Field(default_factory=lambda: os.getenv("BUILD_VERSION", "dev"))
    build_sha: str = Field(default_factory=lambda: os.getenv("BUILD_SHA", "local"))

    model_config = ConfigDict(frozen=True, validate_default=True)

    @field_validator("log_dir")
    @classmethod
    def _blank_log_dir(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("public_url")
    @classmethod
    def _validate_public_url(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned.startswith(("http://", "https://")):
            raise ValueError(f"TAXWISE_PUBLIC_URL must be an http(s) URL, got {cleaned!r}")
        return cleaned


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
