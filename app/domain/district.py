"""
app/domain/district.py

Domain models for district lookup, caching and retrieval.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

RawRecord = dict[str, Any]

SOURCE_CACHE = "Cache"
SOURCE_API = "API"


class DistrictValidationError(ValueError):
    """
    Raised when a district name is missing or blank.
    """


class DistrictNotFoundError(LookupError):
    """
    Raised when a district cannot be located in the provider data or cache.
    """


def normalize_district_name(name: str | None) -> str:
    """
    Trim and lower-case a district name. Idempotent.
    """

    return (name or "").strip().lower()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class PageFetchResult:
    """
    One page of provider records.

    ``failed`` separates "no more data" from "could not get data after retries";
    both carry an empty ``records`` list.
    """

    offset: int
    records: list[RawRecord]
    failed: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.records


@dataclass(frozen=True)
class DistrictSnapshot:
    """
    Cached provider records for one normalized district name.
    """

    district_name: str
    data: list[RawRecord]
    last_updated: datetime
    state_name: str | None = None
    month: str | None = None
    fin_year: str | None = None

    def is_fresh(self, *, ttl: timedelta, now: datetime | None = None) -> bool:
        """
        True when ``data`` is non-empty and strictly younger than ``ttl``.
        """

        if not self.data:
            return False
        current = _as_utc(now) if now is not None else datetime.now(timezone.utc)
        return current - _as_utc(self.last_updated) < ttl


@dataclass(frozen=True)
class DistrictLookupResult:
    """
    Outcome of a get or refresh request.
    """

    district_name: str
    source: str
    summary: dict[str, Any]
    ai_insight: str
    data: list[RawRecord] = field(default_factory=list)
    last_updated: datetime | None = None


@dataclass(frozen=True)
class DistrictInsightResult:
    """
    Outcome of a cache-only AI summary request.
    """

    district_name: str
    summary: dict[str, Any]
    ai_insight: str
