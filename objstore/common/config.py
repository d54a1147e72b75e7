from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")

SUPPORTED_ADDRESSING_STYLES: tuple[str, ...] = ("auto", "path", "virtual")


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


@dataclass
class Settings:
    S3_ENDPOINT_URL: str | None = None
    S3_REGION: str = "us-east-1"
    S3_ACCESS_KEY_ID: str | None = None
    S3_SECRET_ACCESS_KEY: str | None = None
    S3_USE_SSL: bool = True
    S3_ADDRESSING_STYLE: str = "path"
    S3_CONTENT_TYPE: str = "application/octet-stream"
    S3_LIST_MAX_KEYS: int = 1000
    ENABLE_METRICS: bool = True

    def __post_init__(self) -> None:
        style = (self.S3_ADDRESSING_STYLE or "").strip().lower()
        if style not in SUPPORTED_ADDRESSING_STYLES:
            raise ValueError(
                "S3_ADDRESSING_STYLE must be one of "
                f"{', '.join(SUPPORTED_ADDRESSING_STYLES)}."
            )
        self.S3_ADDRESSING_STYLE = style
        # S3 caps a single list response at 1000 keys
        if not 1 <= int(self.S3_LIST_MAX_KEYS) <= 1000:
            raise ValueError("S3_LIST_MAX_KEYS must be between 1 and 1000.")

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            S3_ENDPOINT_URL=os.environ.get("S3_ENDPOINT_URL") or None,
            S3_REGION=os.environ.get("S3_REGION", cls.S3_REGION),
            S3_ACCESS_KEY_ID=os.environ.get("S3_ACCESS_KEY_ID"),
            S3_SECRET_ACCESS_KEY=os.environ.get("S3_SECRET_ACCESS_KEY"),
            S3_USE_SSL=_as_bool(os.environ.get("S3_USE_SSL"), cls.S3_USE_SSL),
            S3_ADDRESSING_STYLE=os.environ.get(
                "S3_ADDRESSING_STYLE", cls.S3_ADDRESSING_STYLE
            ),
            S3_CONTENT_TYPE=os.environ.get("S3_CONTENT_TYPE", cls.S3_CONTENT_TYPE),
            S3_LIST_MAX_KEYS=int(
                os.environ.get("S3_LIST_MAX_KEYS", cls.S3_LIST_MAX_KEYS)
            ),
            ENABLE_METRICS=_as_bool(
                os.environ.get("ENABLE_METRICS"), cls.ENABLE_METRICS
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
