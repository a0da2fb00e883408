"""LLM adapters for narrative generation.

Provides a base interface, a Gemini REST adapter and a deterministic
mock for testing.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import requests


class LLMAdapterError(RuntimeError):
    """Raised when a text-generation request fails or returns no text."""


class BaseLLMAdapter(ABC):
    """Abstract base for all LLM adapters.

    Attributes:
        model: Identifier of the model this adapter talks to.
    """

    model: str = "unknown"

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Send a prompt to the LLM and return the raw response text.

        Args:
            prompt: The fully formatted prompt string.

        Returns:
            Raw string response from the model. May be empty.

        Raises:
            LLMAdapterError: If the request fails.
        """


def extract_gemini_text(payload: Any) -> Optional[str]:
    """Pull ``candidates[0].content.parts[0].text`` out of a Gemini response.

    Returns None when any level of the path is missing or has the wrong type.
    """
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


class GeminiLLMAdapter(BaseLLMAdapter):
    """Adapter for the Gemini ``generateContent`` REST endpoint."""

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1",
        timeout_seconds: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the Gemini adapter.

        Args:
            model: Model identifier, e.g. ``gemini-2.5-flash``.
            api_key: Gemini API key, sent as the ``key`` query parameter.
            base_url: API root up to and including the version segment.
            timeout_seconds: Per-request timeout.
            session: Optional shared ``requests.Session``.
        """
        self.model = model
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        """Call ``models/{model}:generateContent`` with a single user turn."""
        url = f"{self._base_url}/models/{self.model}:generateContent"
        body = {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": prompt}],
                }
            ]
        }
        try:
            response = self._session.post(
                url,
                params={"key": self._api_key},
                json=body,
                timeout=self._timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            raise LLMAdapterError(f"{self.model}: HTTP status {status_code}") from exc
        except requests.RequestException as exc:
            # Transport messages embed the request URL, which carries the key.
            raise LLMAdapterError(f"{self.model}: {type(exc).__name__}") from exc
        except ValueError as exc:
            raise LLMAdapterError(f"{self.model}: response was not valid JSON") from exc

        text = extract_gemini_text(payload)
        return text.strip() if text else ""


_MOCK_RESPONSE = (
    "Many families in the district got work this year. "
    "Some projects are finished and others are still going on. "
    "Most money went to land and water work. "
    "Workers earned around ₹250 a day. "
    "Most payments reached people on time."
)


class MockLLMAdapter(BaseLLMAdapter):
    """Deterministic adapter that returns a fixed narrative.

    Used for local runs and CI pipelines where no LLM API is available.
    """

    model = "mock"

    def generate(self, prompt: str) -> str:
        """Return a fixed narrative regardless of input.

        Args:
            prompt: Ignored - present only to satisfy the interface.
        """
        return _MOCK_RESPONSE
