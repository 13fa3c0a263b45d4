"""Rule-based building blocks for URL classification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..config import HeuristicsConfig
from .classifier_models import Verdict
from .features import UrlFeatures


@dataclass(frozen=True)
class ClassificationContext:
    """Shared context passed to each classification rule."""

    url: str
    lowered_url: str
    host: str
    features: UrlFeatures
    heuristics: HeuristicsConfig


class ClassificationRule(Protocol):
    """Interface for classification rules.

    A rule returns a verdict when it matches and ``None`` otherwise.
    """

    name: str

    def apply(self, context: ClassificationContext) -> Optional[Verdict]:  # pragma: no cover - interface
        ...
