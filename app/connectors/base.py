"""
app/connectors/base.py

Base connector abstraction and shared HTTP mechanics.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import requests

from app.retry import RetryPolicy, run_with_retry

logger = logging.getLogger(__name__)


class ConnectorRequestError(RuntimeError):
    """
    Raised when a single connector request fails (transport, status or body).
    """


class BaseConnector:
    """
    Shared request plumbing for outbound statistics connectors.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        timeout_seconds: float,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        policy: RetryPolicy,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Any:
        """
        Execute an HTTP request with retries and return parsed JSON.

        Raises RetryExhaustedError once the policy gives up.
        """

        def attempt_request(attempt: int) -> Any:
            response = self._send(method=method, url=url, params=params, headers=headers)
            try:
                return response.json()
            except ValueError as exc:
                raise ConnectorRequestError(f"{self.source}: response was not valid JSON.") from exc

        return run_with_retry(
            attempt_request,
            policy,
            retry_on=(ConnectorRequestError,),
            cancel_event=cancel_event,
            description=f"{self.source} {method} request",
        )

    def _send(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """
        Execute one HTTP request; every failure surfaces as ConnectorRequestError.
        """

        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                timeout=self._timeout_seconds,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            raise ConnectorRequestError(
                f"{self.source}: HTTP status {status_code}."
            ) from exc
        except requests.RequestException as exc:
            # Transport messages embed the request URL, which carries the API key.
            raise ConnectorRequestError(f"{self.source}: {type(exc).__name__}") from exc
        return response
