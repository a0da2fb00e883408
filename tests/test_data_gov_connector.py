"""
tests/test_data_gov_connector.py

Connector tests against a scripted requests.Session double.
"""

from __future__ import annotations

from typing import Any

import pytest
import requests

from app.config import DataGovSettings
from app.connectors.data_gov_connector import DataGovConnector


class _FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("not json")
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)  # type: ignore[arg-type]


class _ScriptedSession:
    """Returns (or raises) the scripted outcomes in order, recording every call."""

    def __init__(self, outcomes: list[Any]) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> _FakeResponse:
        self.calls.append(kwargs)
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _settings(**overrides: Any) -> DataGovSettings:
    values: dict[str, Any] = {
        "api_key": "test-key",
        "resource_id": "ee03643a-ee4c-48c2-ac30-9f2ff26ab722",
        "base_url": "https://api.data.gov.in/",
        "backoff_seconds": 0.0,
    }
    values.update(overrides)
    return DataGovSettings(**values)


def _connector(outcomes: list[Any], **overrides: Any) -> tuple[DataGovConnector, _ScriptedSession]:
    session = _ScriptedSession(outcomes)
    connector = DataGovConnector(settings=_settings(**overrides), session=session)  # type: ignore[arg-type]
    return connector, session


def test_fetch_page_returns_records_and_sends_pagination_params() -> None:
    records = [{"district_name": "PUNE"}, {"district_name": "NASHIK"}]
    connector, session = _connector([_FakeResponse(payload={"records": records})])

    page = connector.fetch_page(2000, 1000)

    assert page.records == records
    assert page.offset == 2000
    assert page.failed is False
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://api.data.gov.in/resource/ee03643a-ee4c-48c2-ac30-9f2ff26ab722"
    assert call["params"] == {
        "api-key": "test-key",
        "format": "json",
        "limit": 1000,
        "offset": 2000,
    }
    assert call["timeout"] == 15.0


def test_missing_records_key_is_an_empty_page() -> None:
    connector, _ = _connector([_FakeResponse(payload={"status": "ok"})])

    page = connector.fetch_page(0, 1000)

    assert page.records == []
    assert page.failed is False


def test_non_dict_records_are_dropped() -> None:
    connector, _ = _connector([_FakeResponse(payload={"records": [{"a": 1}, "junk", None]})])
    assert connector.fetch_page(0, 10).records == [{"a": 1}]


def test_transient_failures_are_retried_then_succeed() -> None:
    connector, session = _connector(
        [
            requests.Timeout("slow"),
            _FakeResponse(status_code=503),
            _FakeResponse(payload={"records": [{"district_name": "PUNE"}]}),
        ]
    )

    page = connector.fetch_page(0, 1000)

    assert len(session.calls) == 3
    assert page.records == [{"district_name": "PUNE"}]
    assert page.failed is False


def test_exhausted_retries_return_failed_empty_page_without_raising() -> None:
    connector, session = _connector(
        [
            requests.ConnectionError("down"),
            _FakeResponse(status_code=500),
            _FakeResponse(invalid_json=True),
        ]
    )

    page = connector.fetch_page(0, 1000, retries=3)

    assert len(session.calls) == 3
    assert page.records == []
    assert page.failed is True


def test_client_errors_are_also_retried() -> None:
    connector, session = _connector([_FakeResponse(status_code=403), _FakeResponse(status_code=403)])

    page = connector.fetch_page(0, 1000, retries=2)

    assert len(session.calls) == 2
    assert page.failed is True


def test_retries_default_to_settings() -> None:
    connector, session = _connector([requests.Timeout("t")] * 5, max_retries=5)

    connector.fetch_page(0, 1000)

    assert len(session.calls) == 5


def _record_waits(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    waits: list[float] = []
    monkeypatch.setattr("app.retry.wait_or_cancel", lambda seconds, cancel_event=None: waits.append(seconds))
    return waits


def test_default_backoff_waits_one_then_two_seconds_and_not_after_last_attempt(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    waits = _record_waits(monkeypatch)
    session = _ScriptedSession([requests.Timeout("t")] * 3)
    connector = DataGovConnector(
        settings=DataGovSettings(api_key="test-key", resource_id="resource"),
        session=session,  # type: ignore[arg-type]
    )

    page = connector.fetch_page(0, 1000)

    assert page.failed is True
    assert len(session.calls) == 3
    assert waits == [1.0, 2.0]


def test_no_wait_after_a_successful_attempt(monkeypatch: pytest.MonkeyPatch) -> None:
    waits = _record_waits(monkeypatch)
    session = _ScriptedSession([_FakeResponse(status_code=502), _FakeResponse(payload={"records": []})])
    connector = DataGovConnector(
        settings=DataGovSettings(api_key="test-key", resource_id="resource"),
        session=session,  # type: ignore[arg-type]
    )

    connector.fetch_page(0, 1000)

    assert waits == [1.0]
