"""Analysis result types.

An ``AnalysisResult`` always carries exactly one outcome variant. The
variants are plain frozen dataclasses grouped under the ``Outcome`` union so
callers can dispatch with ``match``/``isinstance``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from ..analyzer.classifier_models import Verdict


@dataclass(frozen=True)
class Success:
    verdict: Verdict
    explanation: str

    kind = "success"


@dataclass(frozen=True)
class ValidationFailure:
    messages: tuple[str, ...] = field(default_factory=tuple)

    kind = "validation_error"

    @property
    def message(self) -> str:
        return ", ".join(self.messages)


@dataclass(frozen=True)
class ClassificationFailure:
    reason: str

    kind = "classification_error"


@dataclass(frozen=True)
class ExplanationFailure:
    """Generation failed; the verdict stands and the explanation is the fallback text."""

    verdict: Verdict
    reason: str
    explanation: str

    kind = "explanation_error"


Outcome = Union[Success, ValidationFailure, ClassificationFailure, ExplanationFailure]


@dataclass(frozen=True)
class AnalysisResult:
    """Finished analysis of one submitted URL."""

    submitted_url: str
    outcome: Outcome
    normalized_url: Optional[str] = None

    @property
    def verdict(self) -> Optional[Verdict]:
        if isinstance(self.outcome, (Success, ExplanationFailure)):
            return self.outcome.verdict
        return None

    @property
    def classified(self) -> bool:
        """True when a verdict exists, even if its explanation is the fallback."""
        return self.verdict is not None

    @property
    def classification(self) -> str:
        verdict = self.verdict
        return verdict.classification.value if verdict else "error"

    @property
    def explanation(self) -> str:
        outcome = self.outcome
        if isinstance(outcome, (Success, ExplanationFailure)):
            return outcome.explanation
        if isinstance(outcome, ValidationFailure):
            return f"Invalid URL provided. {outcome.message}"
        return f"Failed to analyze URL: {outcome.reason}"

    @property
    def error(self) -> Optional[str]:
        outcome = self.outcome
        if isinstance(outcome, ValidationFailure):
            return outcome.message
        if isinstance(outcome, ClassificationFailure):
            return outcome.reason
        return None

    def to_dict(self) -> dict:
        """Payload consumed by the presentation layer."""
        # Validation failures echo the raw input verbatim.
        if isinstance(self.outcome, ValidationFailure):
            display_url = self.submitted_url
        else:
            display_url = self.normalized_url or self.submitted_url

        verdict = self.verdict
        return {
            "url": display_url,
            "submittedUrl": display_url,
            "classification": self.classification,
            "explanation": self.explanation,
            "error": self.error,
            "confidence": verdict.confidence if verdict else None,
            "flags": list(verdict.flags) if verdict else [],
            "threatType": verdict.threat_type if verdict else None,
            "outcome": self.outcome.kind,
        }
