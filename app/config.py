"""
app/config.py

Application-level configuration for the district insight relay.

Settings are read from the process environment (plus optional `.env` files),
validated once, and handed to the components that need them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

DEFAULT_GEMINI_MODELS = (
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
    "gemini-2.0-flash",
    "gemini-2.0-flash-lite",
)

_ALLOWED_LLM_ADAPTERS = {"gemini", "mock"}


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_csv_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """
    Read a comma-separated list, dropping blank items.
    """

    raw_value = _get_optional_str_env(name)
    if raw_value is None:
        return default
    items = tuple(item.strip() for item in raw_value.split(",") if item.strip())
    return items or default


@dataclass(frozen=True)
class DataGovSettings:
    """
    data.gov.in statistics API settings.
    """

    api_key: str
    resource_id: str
    base_url: str = "https://api.data.gov.in"
    page_limit: int = 1000
    timeout_seconds: float = 15.0
    max_retries: int = 3
    backoff_seconds: float = 1.0


@dataclass(frozen=True)
class GeminiSettings:
    """
    Gemini text-generation API settings.
    """

    api_key: str | None
    adapter: str = "gemini"
    base_url: str = "https://generativelanguage.googleapis.com/v1"
    models: tuple[str, ...] = DEFAULT_GEMINI_MODELS
    timeout_seconds: float = 30.0
    retry_delay_seconds: float = 0.7


@dataclass(frozen=True)
class CacheSettings:
    """
    District cache freshness settings.
    """

    ttl_hours: float = 24.0


@dataclass(frozen=True)
class RelaySettings:
    """
    Complete process configuration, constructed once at start-up.
    """

    data_gov: DataGovSettings
    gemini: GeminiSettings
    cache: CacheSettings
    port: int = 5000
    cors_origins: tuple[str, ...] = ("*",)


def validate_env() -> None:
    """
    Validate all required environment variables.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.
    """

    _load_env_once()
    errors: list[str] = []

    if not _get_optional_str_env("DATA_GOV_API_KEY"):
        errors.append("DATA_GOV_API_KEY is not set.")
    if not _get_optional_str_env("DATA_GOV_RESOURCE_ID"):
        errors.append("DATA_GOV_RESOURCE_ID is not set.")

    database_urls = (
        _get_optional_str_env("DATABASE_URL"),
        _get_optional_str_env("CLOUD_DATABASE_URL"),
        _get_optional_str_env("LOCAL_DATABASE_URL"),
    )
    if not any(database_urls):
        errors.append(
            "No database URL configured. Set DATABASE_URL, CLOUD_DATABASE_URL or LOCAL_DATABASE_URL."
        )

    adapter = _get_str_env("LLM_ADAPTER", "gemini").lower()
    if adapter not in _ALLOWED_LLM_ADAPTERS:
        errors.append(
            f"LLM_ADAPTER='{adapter}' is not valid. Allowed values: {sorted(_ALLOWED_LLM_ADAPTERS)}."
        )
    elif adapter != "mock" and not _get_optional_str_env("GEMINI_API_KEY"):
        errors.append("GEMINI_API_KEY is not set. Set it or use LLM_ADAPTER=mock.")

    if errors:
        raise RuntimeError(
            "Startup validation failed - missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


@lru_cache(maxsize=1)
def get_relay_settings() -> RelaySettings:
    """
    Return validated, cached process settings.

    Raises RuntimeError if any required variable is missing.
    """

    validate_env()

    data_gov = DataGovSettings(
        api_key=_get_str_env("DATA_GOV_API_KEY", ""),
        resource_id=_get_str_env("DATA_GOV_RESOURCE_ID", ""),
        base_url=_get_str_env("DATA_GOV_BASE_URL", "https://api.data.gov.in"),
        page_limit=max(1, _get_int_env("DATA_GOV_PAGE_LIMIT", 1000)),
        timeout_seconds=max(1.0, _get_float_env("DATA_GOV_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(1, _get_int_env("DATA_GOV_MAX_RETRIES", 3)),
        backoff_seconds=max(0.0, _get_float_env("DATA_GOV_BACKOFF_SECONDS", 1.0)),
    )
    gemini = GeminiSettings(
        api_key=_get_optional_str_env("GEMINI_API_KEY"),
        adapter=_get_str_env("LLM_ADAPTER", "gemini").lower(),
        base_url=_get_str_env("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1"),
        models=_get_csv_env("GEMINI_MODELS", DEFAULT_GEMINI_MODELS),
        timeout_seconds=max(1.0, _get_float_env("GEMINI_TIMEOUT_SECONDS", 30.0)),
        retry_delay_seconds=max(0.0, _get_float_env("GEMINI_RETRY_DELAY_SECONDS", 0.7)),
    )
    cache = CacheSettings(
        ttl_hours=max(0.0, _get_float_env("CACHE_TTL_HOURS", 24.0)),
    )
    return RelaySettings(
        data_gov=data_gov,
        gemini=gemini,
        cache=cache,
        port=_get_int_env("PORT", 5000),
        cors_origins=_get_csv_env("CORS_ORIGINS", ("*",)),
    )
