"""Classifier rule tiers, highest priority first."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .classifier_models import Classification, ThreatType, Verdict
from .rules import ClassificationContext

logger = logging.getLogger(__name__)

# Takes the URL being classified, returns a float in [0, 1).
RandomSource = Callable[[str], float]


class KnownPhishingRule:
    name = "known_phishing"

    def apply(self, context: ClassificationContext) -> Optional[Verdict]:
        for entry in sorted(context.heuristics.denylist):
            if entry and entry in context.lowered_url:
                return Verdict(
                    classification=Classification.PHISHING,
                    confidence=0.95,
                    flags=("known_phishing_domain", "suspicious_keywords_in_path"),
                    threat_type=ThreatType.KNOWN_PHISHING.value,
                    rule=self.name,
                )
        return None


class IpLiteralHostRule:
    name = "ip_literal_host"

    def apply(self, context: ClassificationContext) -> Optional[Verdict]:
        if not context.features.host_is_ip_literal:
            return None
        return Verdict(
            classification=Classification.PHISHING,
            confidence=0.80,
            flags=("ip_address_as_host", "unusual_url_structure"),
            threat_type=ThreatType.SUSPICIOUS_INFRASTRUCTURE.value,
            rule=self.name,
        )


class TrustedDomainRule:
    name = "trusted_domain"

    def apply(self, context: ClassificationContext) -> Optional[Verdict]:
        if not context.host:
            return None
        if not any(entry and entry in context.host for entry in context.heuristics.allowlist):
            return None
        if context.features.uses_secure_scheme:
            flags = ("trusted_domain", "valid_ssl", "good_reputation_score")
        else:
            # Plain http to a trusted host carries no TLS evidence.
            flags = ("trusted_domain", "good_reputation_score")
        return Verdict(
            classification=Classification.SAFE,
            confidence=0.99,
            flags=flags,
            threat_type=ThreatType.NONE.value,
            rule=self.name,
        )


class SuspiciousStructureRule:
    """Long, punctuation-heavy URL served without TLS."""

    name = "suspicious_structure"

    def apply(self, context: ClassificationContext) -> Optional[Verdict]:
        f = context.features
        h = context.heuristics
        if (
            f.length > h.long_url_length
            and f.special_char_count > h.special_char_threshold
            and not f.uses_secure_scheme
        ):
            return Verdict(
                classification=Classification.PHISHING,
                confidence=0.70,
                flags=("long_url", "excessive_special_chars", "no_https"),
                threat_type=ThreatType.SUSPICIOUS_STRUCTURE.value,
                rule=self.name,
            )
        return None


class KeywordImpersonationRule:
    """Several credential-themed keywords on a plain-HTTP URL."""

    name = "keyword_impersonation"

    def apply(self, context: ClassificationContext) -> Optional[Verdict]:
        f = context.features
        if len(f.matched_keywords) < context.heuristics.keyword_match_threshold:
            return None
        if f.uses_secure_scheme:
            return None
        return Verdict(
            classification=Classification.PHISHING,
            confidence=0.90,
            flags=("domain_impersonation_heuristic", "suspicious_keywords"),
            threat_type=ThreatType.BRAND_IMPERSONATION.value,
            rule=self.name,
        )


class RandomFallbackRule:
    """Catch-all tier for URLs no other rule recognizes.

    Draws from the injected random source and calls the URL phishing when the
    draw exceeds ``fallback_threshold``. Always matches.
    """

    name = "random_fallback"

    def __init__(self, random_source: RandomSource):
        self.random_source = random_source

    def apply(self, context: ClassificationContext) -> Optional[Verdict]:
        draw = float(self.random_source(context.url))
        threshold = context.heuristics.fallback_threshold
        logger.debug("Fallback draw for %s: %.4f (threshold %.2f)", context.url, draw, threshold)

        if draw > threshold:
            return Verdict(
                classification=Classification.PHISHING,
                confidence=0.65,
                flags=("heuristic_detection",),
                threat_type=ThreatType.HEURISTIC.value,
                rule=self.name,
            )
        return Verdict(
            classification=Classification.SAFE,
            confidence=0.85,
            flags=("general_scan_ok",),
            threat_type=ThreatType.NONE.value,
            rule=self.name,
        )
