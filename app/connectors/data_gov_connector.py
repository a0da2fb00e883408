"""
app/connectors/data_gov_connector.py

data.gov.in connector for the district-wise rural employment dataset.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import requests

from app.config import DataGovSettings
from app.connectors.base import BaseConnector
from app.domain.district import PageFetchResult
from app.retry import RetryExhaustedError, RetryPolicy, linear_backoff

logger = logging.getLogger(__name__)


class DataGovConnector(BaseConnector):
    """
    Paginated reader for one data.gov.in resource.
    """

    def __init__(
        self,
        *,
        settings: DataGovSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            source="data_gov",
            timeout_seconds=settings.timeout_seconds,
            session=session,
        )
        self._settings = settings

    @property
    def page_limit(self) -> int:
        return self._settings.page_limit

    def fetch_page(
        self,
        offset: int,
        limit: int,
        retries: int | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> PageFetchResult:
        """
        Fetch one page of raw records.

        Never raises for upstream failures: after ``retries`` failed attempts
        an empty page flagged ``failed=True`` is returned.
        """

        attempts = self._settings.max_retries if retries is None else retries
        policy = RetryPolicy(
            max_attempts=max(1, attempts),
            backoff=linear_backoff(self._settings.backoff_seconds),
        )
        endpoint = f"{self._settings.base_url.rstrip('/')}/resource/{self._settings.resource_id}"

        try:
            payload = self._request_json(
                method="GET",
                url=endpoint,
                policy=policy,
                params={
                    "api-key": self._settings.api_key,
                    "format": "json",
                    "limit": limit,
                    "offset": offset,
                },
                cancel_event=cancel_event,
            )
        except RetryExhaustedError as exc:
            logger.error(
                "Page fetch exhausted retries source=%s offset=%s attempts=%s error=%s",
                self.source,
                offset,
                exc.attempts,
                exc.last_error,
            )
            return PageFetchResult(offset=offset, records=[], failed=True)

        return PageFetchResult(offset=offset, records=self._extract_records(payload), failed=False)

    @staticmethod
    def _extract_records(payload: Any) -> list[dict[str, Any]]:
        if not isinstance(payload, dict):
            return []
        records = payload.get("records")
        if not isinstance(records, list):
            return []
        return [record for record in records if isinstance(record, dict)]
