"""Analysis pipeline for PhishGuard."""

from .analysis import AnalysisEngine, analyze_url
from .results import (
    AnalysisResult,
    ClassificationFailure,
    ExplanationFailure,
    Outcome,
    Success,
    ValidationFailure,
)
from .validation import INVALID_URL_MESSAGE, UrlValidation, validate_url

__all__ = [
    "AnalysisEngine",
    "analyze_url",
    "AnalysisResult",
    "ClassificationFailure",
    "ExplanationFailure",
    "Outcome",
    "Success",
    "ValidationFailure",
    "INVALID_URL_MESSAGE",
    "UrlValidation",
    "validate_url",
]
