"""Heuristic URL classifier."""

from __future__ import annotations

import logging
import random
from typing import Optional
from urllib.parse import urlparse

from ..config import HeuristicsConfig
from .classifier_models import Verdict
from .classifier_rules import (
    IpLiteralHostRule,
    KeywordImpersonationRule,
    KnownPhishingRule,
    RandomFallbackRule,
    RandomSource,
    SuspiciousStructureRule,
    TrustedDomainRule,
)
from .features import UrlFeatures
from .rules import ClassificationContext, ClassificationRule

logger = logging.getLogger(__name__)


def system_random_source(url: str) -> float:
    """Unseeded draw; the URL is ignored."""
    return random.random()


def seeded_random_source(seed: int) -> RandomSource:
    """Build a source whose draw depends only on ``(seed, url)``.

    The same URL always gets the same draw, and no generator state is shared
    between calls.
    """

    def _draw(url: str) -> float:
        return random.Random(f"{seed}:{url}").random()

    return _draw


def make_random_source(seed: Optional[int] = None) -> RandomSource:
    if seed is None:
        return system_random_source
    return seeded_random_source(seed)


class HeuristicClassifier:
    """Turns URL features into a verdict using an ordered rule list.

    Rules are evaluated in priority order and the first one that returns a
    verdict wins. The final fallback rule always matches.
    """

    def __init__(
        self,
        heuristics: HeuristicsConfig | None = None,
        random_source: RandomSource | None = None,
    ):
        self.heuristics = heuristics or HeuristicsConfig()
        self.random_source = random_source or system_random_source

        self._rules: list[ClassificationRule] = [
            KnownPhishingRule(),
            IpLiteralHostRule(),
            TrustedDomainRule(),
            SuspiciousStructureRule(),
            KeywordImpersonationRule(),
            RandomFallbackRule(self.random_source),
        ]

    @property
    def rule_names(self) -> list[str]:
        return [rule.name for rule in self._rules]

    def classify(self, url: str, features: UrlFeatures) -> Verdict:
        """Classify a URL given its extracted features."""
        try:
            host = (urlparse(url).hostname or "").lower()
        except ValueError:
            host = ""

        context = ClassificationContext(
            url=url,
            lowered_url=url.lower(),
            host=host,
            features=features,
            heuristics=self.heuristics,
        )

        for rule in self._rules:
            verdict = rule.apply(context)
            if verdict is None:
                continue
            logger.info(
                "Rule %s matched %s: %s (%.2f)",
                rule.name,
                url,
                verdict.classification.value,
                verdict.confidence,
            )
            return verdict

        # RandomFallbackRule always matches; only a custom rule list can get here.
        raise RuntimeError(f"No classification rule matched {url}")
