from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from core.storage.retry import RetryPolicy

# Load .env file from project root
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


class StorageSettings(BaseModel):
    backend: Literal["local", "s3"] = "local"
    bucket: str = "excalidraw-drawings"
    prefix: str = ""
    region: str | None = None
    endpoint_url: str | None = None
    public_base_url: str | None = None
    local_root: Path = Path("data/storage")
    local_base_url: str = "/files"
    access_key_env: str = "STORAGE_ACCESS_KEY_ID"
    secret_key_env: str = "STORAGE_SECRET_ACCESS_KEY"

    @field_validator("bucket")
    @classmethod
    def _bucket_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("bucket must not be empty")
        return value.strip()

    @property
    def access_key(self) -> str:
        return os.getenv(self.access_key_env, "")

    @property
    def secret_key(self) -> str:
        return os.getenv(self.secret_key_env, "")

    def missing_requirements(self) -> list[str]:
        """Environment variables the selected backend needs but cannot find."""
        if self.backend != "s3":
            return []
        missing: list[str] = []
        if not self.access_key:
            missing.append(self.access_key_env)
        if not self.secret_key:
            missing.append(self.secret_key_env)
        return missing


class RetrySettings(BaseModel):
    max_attempts: int = Field(3, ge=1, le=10)
    base_delay_seconds: float = Field(1.0, ge=0.0)

    def policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.max_attempts, base_delay=self.base_delay_seconds)


class QueueSettings(BaseModel):
    broker_url_env: str = "CELERY_BROKER_URL"
    result_backend_env: str | None = "CELERY_RESULT_BACKEND"

    @property
    def broker_url(self) -> str:
        value = os.getenv(self.broker_url_env)
        if not value:
            raise RuntimeError("Celery broker URL is not configured")
        return value

    @property
    def result_backend(self) -> str | None:
        if not self.result_backend_env:
            return None
        return os.getenv(self.result_backend_env)


class Settings(BaseModel):
    storage: StorageSettings = Field(default_factory=StorageSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from YAML configuration file.

        Args:
            path: Optional path to configuration file. If not provided, uses
                SKETCHVAULT_CONFIG environment variable or defaults to config/default.yaml.

        Returns:
            Settings instance with loaded configuration.

        Raises:
            FileNotFoundError: If configuration file does not exist.
            ValueError: If configuration is invalid.
        """
        config_path = path or Path(os.getenv("SKETCHVAULT_CONFIG", "config/default.yaml"))
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        with config_path.open("r", encoding="utf-8") as fp:
            payload = yaml.safe_load(fp) or {}
        try:
            return cls(**payload)
        except Exception as exc:
            raise ValueError(f"Invalid configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings(path: str | None = None) -> Settings:
    return Settings.load(Path(path) if path else None)


__all__ = [
    "Settings",
    "StorageSettings",
    "RetrySettings",
    "QueueSettings",
    "get_settings",
]
