"""Explanation generators for PhishGuard verdicts."""

from .base import (
    FALLBACK_EXPLANATION,
    BaseExplainer,
    ExplanationAPIError,
    ExplanationConfigError,
    ExplanationError,
    ExplanationRequest,
    ExplanationTimeoutError,
)
from .ollama import OllamaExplainer
from .templates import TemplateExplainer, build_prompt, describe_flag

__all__ = [
    "FALLBACK_EXPLANATION",
    "BaseExplainer",
    "ExplanationAPIError",
    "ExplanationConfigError",
    "ExplanationError",
    "ExplanationRequest",
    "ExplanationTimeoutError",
    "OllamaExplainer",
    "TemplateExplainer",
    "build_prompt",
    "describe_flag",
    "create_explainer",
]


def create_explainer(config) -> BaseExplainer:
    """Build the explainer selected by ``config.explainer_backend``."""
    backend = (getattr(config, "explainer_backend", "template") or "template").lower()
    if backend == "ollama":
        return OllamaExplainer(
            base_url=config.ollama_url,
            model=config.ollama_model,
            timeout_seconds=config.explanation_timeout,
        )
    if backend != "template":
        raise ExplanationConfigError(f"Unknown explainer backend: {backend}")
    return TemplateExplainer()
