"""PhishGuard: URL phishing classification with plain-language explanations."""

from .analyzer import Classification, HeuristicClassifier, UrlFeatures, Verdict, extract_features
from .config import Config, HeuristicsConfig, load_config
from .explainer import FALLBACK_EXPLANATION, BaseExplainer, ExplanationError
from .pipeline import AnalysisEngine, AnalysisResult, analyze_url

__all__ = [
    "Classification",
    "HeuristicClassifier",
    "UrlFeatures",
    "Verdict",
    "extract_features",
    "Config",
    "HeuristicsConfig",
    "load_config",
    "FALLBACK_EXPLANATION",
    "BaseExplainer",
    "ExplanationError",
    "AnalysisEngine",
    "AnalysisResult",
    "analyze_url",
]
