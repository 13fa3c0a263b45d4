"""Classifier data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Classification(str, Enum):
    """Final classification of a URL."""

    SAFE = "safe"
    PHISHING = "phishing"


class ThreatType(str, Enum):
    """Threat label attached to each classifier tier."""

    KNOWN_PHISHING = "Deceptive Content/Known Phishing"
    SUSPICIOUS_INFRASTRUCTURE = "Network Anomaly/Suspicious Infrastructure"
    SUSPICIOUS_STRUCTURE = "Suspicious URL Structure"
    BRAND_IMPERSONATION = "Brand Impersonation/Credential Theft"
    HEURISTIC = "Heuristic Analysis/Potential Malware Vector"
    NONE = "None"


@dataclass(frozen=True)
class Verdict:
    """Result of classifying a single URL."""

    classification: Classification
    confidence: float
    flags: tuple[str, ...] = field(default_factory=tuple)
    threat_type: str = ThreatType.NONE.value
    rule: str = ""

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")
        # Keep detection order, drop repeats.
        object.__setattr__(self, "flags", tuple(dict.fromkeys(self.flags)))

    @property
    def is_phishing(self) -> bool:
        return self.classification == Classification.PHISHING

    def to_dict(self) -> dict:
        """Report shape shared with the explanation generator."""
        return {
            "classification": self.classification.value,
            "confidenceScore": self.confidence,
            "detectedFlags": list(self.flags),
            "threatType": self.threat_type,
        }
