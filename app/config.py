"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_optional_float_env(name: str) -> float | None:
    """
    Read an optional float; blank or invalid values count as unset.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None or not raw_value.strip():
        return None
    try:
        return float(raw_value)
    except ValueError:
        return None


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class AppSettings:
    """
    Top-level application settings.
    """

    title: str = "Listing Import API"
    log_level: str = "INFO"


@dataclass(frozen=True)
class ListingImportSettings:
    """
    Runtime settings for CSV / JSON listing imports.
    """

    log_row_outcomes: bool = True
    deadline_seconds: float | None = None
    max_upload_bytes: int = 5 * 1024 * 1024


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Return cached application settings.
    """

    return AppSettings(
        title=_get_str_env("APP_TITLE", "Listing Import API"),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_listing_import_settings() -> ListingImportSettings:
    """
    Return cached listing import settings from environment variables.
    """

    deadline = _get_optional_float_env("LISTING_IMPORT_DEADLINE_SECONDS")
    return ListingImportSettings(
        log_row_outcomes=_get_bool_env("LISTING_IMPORT_LOG_ROW_OUTCOMES", True),
        deadline_seconds=deadline if deadline and deadline > 0 else None,
        max_upload_bytes=max(1024, _get_int_env("LISTING_IMPORT_MAX_UPLOAD_BYTES", 5 * 1024 * 1024)),
    )
