"""Analyzer modules for PhishGuard."""

from .classifier import HeuristicClassifier, make_random_source
from .classifier_models import Classification, ThreatType, Verdict
from .features import UrlFeatures, extract_features

__all__ = [
    "HeuristicClassifier",
    "make_random_source",
    "Classification",
    "ThreatType",
    "Verdict",
    "UrlFeatures",
    "extract_features",
]
