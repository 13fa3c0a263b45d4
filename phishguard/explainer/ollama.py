"""Ollama-backed explanation generator for PhishGuard."""

import logging
from typing import Optional

import httpx

from .base import (
    BaseExplainer,
    ExplanationAPIError,
    ExplanationConfigError,
    ExplanationError,
    ExplanationRequest,
    ExplanationTimeoutError,
)
from .templates import build_prompt

logger = logging.getLogger(__name__)


class OllamaExplainer(BaseExplainer):
    """
    Generates explanations with a local or remote Ollama server.

    Sends a single non-streaming request to ``/api/generate`` and returns the
    ``response`` field of the reply. No retries: a failed call is reported as
    an ``ExplanationError`` and the caller falls back to canned text.
    """

    name = "ollama"

    timeout_seconds: float = 30.0
    user_agent: str = "PhishGuard/1.0"

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:11434",
        model: str = "llama3.1:8b",
        timeout_seconds: Optional[float] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.model = model
        if timeout_seconds is not None:
            self.timeout_seconds = timeout_seconds
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_seconds),
                headers={"User-Agent": self.user_agent},
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _generate(self, request: ExplanationRequest) -> str:
        if not self.base_url or not self.model:
            raise ExplanationConfigError("Ollama URL and model must be configured")

        payload = {
            "model": self.model,
            "prompt": build_prompt(request),
            "stream": False,
        }

        client = await self._get_client()
        try:
            resp = await client.post(f"{self.base_url}/api/generate", json=payload)
        except httpx.TimeoutException as e:
            raise ExplanationTimeoutError(f"Ollama request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise ExplanationError(f"Ollama request failed: {e}") from e

        if resp.status_code == 429:
            raise ExplanationAPIError(resp.status_code, "Ollama quota exceeded", resp.text or "")
        if resp.status_code != 200:
            raise ExplanationAPIError(resp.status_code, "Ollama error", (resp.text or "")[:200])

        try:
            data = resp.json()
        except ValueError as e:
            raise ExplanationError("Ollama returned malformed JSON") from e

        if not isinstance(data, dict):
            raise ExplanationError("Ollama returned an unexpected payload")

        text = data.get("response")
        if not isinstance(text, str):
            raise ExplanationError("Ollama response is missing the 'response' field")

        logger.debug("Ollama produced %d characters for %s", len(text), request.url)
        return text
