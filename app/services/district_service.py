"""
app/services/district_service.py

Cache-or-fetch retrieval workflow for district employment statistics.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_relay_settings
from app.connectors.data_gov_connector import DataGovConnector
from app.domain.district import (
    SOURCE_API,
    SOURCE_CACHE,
    DistrictInsightResult,
    DistrictLookupResult,
    DistrictNotFoundError,
    DistrictSnapshot,
    DistrictValidationError,
    RawRecord,
    normalize_district_name,
)
from app.repositories.district_cache_repository import DistrictCacheRepository, DistrictCacheStore
from app.services.inflight import InFlightRegistry
from app.services.narrative_service import NarrativeGenerator, build_narrative_generator
from app.services.summary_service import project_summary

logger = logging.getLogger(__name__)

NOT_FOUND_IN_API_MESSAGE = "District not found in API data"
NOT_CACHED_MESSAGE = "No cached data to summarize."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0


class DistrictInsightService:
    """
    Coordinates the district cache, the provider connector and narrative generation.
    """

    def __init__(
        self,
        *,
        connector: DataGovConnector,
        narrative_generator: NarrativeGenerator,
        cache_ttl: timedelta = timedelta(hours=24),
        repository_factory: Callable[[Session], DistrictCacheStore] = DistrictCacheRepository,
        inflight: InFlightRegistry[list[RawRecord] | None] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._connector = connector
        self._narrative_generator = narrative_generator
        self._cache_ttl = cache_ttl
        self._repository_factory = repository_factory
        self._inflight = inflight or InFlightRegistry()
        self._clock = clock

    def get_district(self, *, db: Session, district_name: str | None) -> DistrictLookupResult:
        """
        Serve fresh cached data, otherwise scan the provider and refresh the cache.
        """

        normalized = self._require_name(district_name)
        store = self._repository_factory(db)

        cached = self._read_cached(db=db, store=store, normalized=normalized)
        if cached is not None and cached.is_fresh(ttl=self._cache_ttl, now=self._clock()):
            logger.info("District cache hit district=%s records=%s", normalized, len(cached.data))
            summary = project_summary(cached.data)
            return DistrictLookupResult(
                district_name=normalized,
                source=SOURCE_CACHE,
                summary=summary,
                ai_insight=self._narrative_generator.generate(summary),
                data=cached.data,
                last_updated=cached.last_updated,
            )

        logger.info(
            "District cache miss district=%s reason=%s",
            normalized,
            "absent" if cached is None else "stale_or_empty",
        )
        return self._fetch_and_store(db=db, store=store, normalized=normalized)

    def refresh_district(self, *, db: Session, district_name: str | None) -> DistrictLookupResult:
        """
        Drop any cached entry and fetch from the provider regardless of freshness.
        """

        normalized = self._require_name(district_name)
        store = self._repository_factory(db)

        try:
            removed = store.delete(normalized)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        logger.info("District cache cleared district=%s existed=%s", normalized, removed)

        return self._fetch_and_store(db=db, store=store, normalized=normalized)

    def get_ai_summary(self, *, db: Session, district_name: str | None) -> DistrictInsightResult:
        """
        Summarize cached data only; never calls the provider.
        """

        normalized = self._require_name(district_name)
        store = self._repository_factory(db)

        cached = self._read_cached(db=db, store=store, normalized=normalized)
        if cached is None:
            raise DistrictNotFoundError(NOT_CACHED_MESSAGE)

        summary = project_summary(cached.data)
        return DistrictInsightResult(
            district_name=normalized,
            summary=summary,
            ai_insight=self._narrative_generator.generate(summary),
        )

    def locate_district(self, normalized: str) -> list[RawRecord] | None:
        """
        Scan provider pages until one contains the district or a page is empty.

        Returns the matching records of the first such page, or None when the
        dataset ran out first. The scan has no page cap.
        """

        limit = self._connector.page_limit
        offset = 0
        while True:
            page = self._connector.fetch_page(offset, limit)
            if page.is_empty:
                if page.failed:
                    logger.warning(
                        "Provider page unavailable after retries; treating as end of data "
                        "district=%s offset=%s",
                        normalized,
                        offset,
                    )
                return None

            matches = [
                record
                for record in page.records
                if normalize_district_name(_as_text(record.get("district_name"))) == normalized
            ]
            if matches:
                logger.info(
                    "District located district=%s offset=%s matches=%s",
                    normalized,
                    offset,
                    len(matches),
                )
                return matches

            offset += limit

    def _fetch_and_store(
        self,
        *,
        db: Session,
        store: DistrictCacheStore,
        normalized: str,
    ) -> DistrictLookupResult:
        request_started = time.perf_counter()
        fetch_started = time.perf_counter()
        records = self._inflight.run(normalized, lambda: self.locate_district(normalized))
        logger.info(
            "Provider fetch finished district=%s found=%s elapsed_ms=%.1f",
            normalized,
            records is not None,
            _elapsed_ms(fetch_started),
        )

        if not records:
            raise DistrictNotFoundError(NOT_FOUND_IN_API_MESSAGE)

        summary = project_summary(records)
        ai_insight = self._narrative_generator.generate(summary)

        try:
            snapshot = store.upsert(normalized, records)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        logger.info(
            "District request finished district=%s source=%s elapsed_ms=%.1f",
            normalized,
            SOURCE_API,
            _elapsed_ms(request_started),
        )
        return DistrictLookupResult(
            district_name=normalized,
            source=SOURCE_API,
            summary=summary,
            ai_insight=ai_insight,
            data=list(records),
            last_updated=snapshot.last_updated,
        )

    @staticmethod
    def _read_cached(*, db: Session, store: DistrictCacheStore, normalized: str) -> DistrictSnapshot | None:
        """
        Read the cached entry and end the read transaction.

        Provider scans and narrative calls must not run while a pooled
        connection is held open in a transaction.
        """

        try:
            return store.get(normalized)
        finally:
            db.rollback()

    @staticmethod
    def _require_name(district_name: str | None) -> str:
        normalized = normalize_district_name(district_name)
        if not normalized:
            raise DistrictValidationError("District name is required")
        return normalized


def _as_text(value: object) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


@lru_cache(maxsize=1)
def get_district_service() -> DistrictInsightService:
    """
    Build and cache the district service from validated settings.
    """

    settings = get_relay_settings()
    return DistrictInsightService(
        connector=DataGovConnector(settings=settings.data_gov),
        narrative_generator=build_narrative_generator(settings.gemini),
        cache_ttl=timedelta(hours=settings.cache.ttl_hours),
    )
