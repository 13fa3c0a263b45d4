"""Base classes for explanation generation in PhishGuard."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..analyzer.classifier_models import Classification, Verdict

logger = logging.getLogger(__name__)

FALLBACK_EXPLANATION = (
    "Could not generate an explanation at this time. "
    "The URL classification stands as reported."
)


@dataclass(frozen=True)
class ExplanationRequest:
    """Everything an explanation generator may look at."""

    url: str
    verdict: Verdict

    @property
    def classification(self) -> Classification:
        return self.verdict.classification

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "classification": self.classification.value,
            "features": self.verdict.to_dict(),
        }


class BaseExplainer(ABC):
    """Abstract base class for explanation generators."""

    name: str = "unknown"

    @abstractmethod
    async def _generate(self, request: ExplanationRequest) -> str:
        """Produce raw explanation text for a verdict."""

    async def explain(self, request: ExplanationRequest) -> str:
        """
        Generate prose explaining a verdict.

        Raises:
            ExplanationError: generation failed or produced no text
        """
        text = await self._generate(request)
        text = (text or "").strip()
        if not text:
            raise ExplanationError(f"{self.name} explainer returned an empty explanation")
        return text

    async def close(self) -> None:
        """Release any held resources."""
        return None


class ExplanationError(Exception):
    """Base exception for explanation generation failures."""

    pass


class ExplanationTimeoutError(ExplanationError):
    """Generator did not answer within the allowed time."""

    pass


class ExplanationAPIError(ExplanationError):
    """Text-generation API returned an error."""

    def __init__(self, status_code: int, message: str, response_body: str = ""):
        self.status_code = status_code
        self.message = message
        self.response_body = response_body
        super().__init__(f"API error {status_code}: {message}")


class ExplanationConfigError(ExplanationError):
    """Explainer not properly configured."""

    pass
