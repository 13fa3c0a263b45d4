"""Analysis engine for PhishGuard."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..analyzer.classifier import HeuristicClassifier, make_random_source
from ..analyzer.classifier_models import Verdict
from ..analyzer.features import extract_features
from ..analyzer.metrics import metrics
from ..explainer import create_explainer
from ..explainer.base import FALLBACK_EXPLANATION, BaseExplainer, ExplanationRequest
from ..explainer.templates import TemplateExplainer
from .results import (
    AnalysisResult,
    ClassificationFailure,
    ExplanationFailure,
    Success,
    ValidationFailure,
)
from .validation import validate_url

logger = logging.getLogger(__name__)

DEFAULT_EXPLANATION_TIMEOUT = 15.0


class AnalysisEngine:
    """Validates, classifies and explains one submitted URL at a time.

    Holds no per-request state, so a single engine can serve concurrent
    ``analyze`` calls.
    """

    def __init__(
        self,
        *,
        classifier: HeuristicClassifier | None = None,
        explainer: BaseExplainer | None = None,
        explanation_timeout: float = DEFAULT_EXPLANATION_TIMEOUT,
    ):
        self.classifier = classifier or HeuristicClassifier()
        self.explainer = explainer or TemplateExplainer()
        self.explanation_timeout = explanation_timeout

    @classmethod
    def from_config(cls, config) -> "AnalysisEngine":
        """Wire classifier and explainer from application configuration."""
        classifier = HeuristicClassifier(
            heuristics=config.heuristics(),
            random_source=make_random_source(config.fallback_seed),
        )
        return cls(
            classifier=classifier,
            explainer=create_explainer(config),
            explanation_timeout=config.explanation_timeout,
        )

    def classify(self, url: str) -> Verdict:
        """Extract features and classify a validated URL."""
        features = extract_features(url, self.classifier.heuristics.keywords)
        logger.debug("Features for %s: %s", url, features.to_dict())
        return self.classifier.classify(url, features)

    async def analyze(
        self,
        raw_url: object,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AnalysisResult:
        """Analyze a single submitted URL.

        Args:
            raw_url: user input, passed through untouched on validation failure
            cancel_event: when set, aborts only the explanation step

        Returns:
            AnalysisResult carrying exactly one outcome variant
        """
        submitted = raw_url if isinstance(raw_url, str) else ""
        logger.info("Received URL for analysis: %r", submitted)

        validation = validate_url(raw_url)
        if not validation.is_valid:
            failure = ValidationFailure(messages=tuple(validation.messages))
            logger.info("Validation failed for %r: %s", submitted, failure.message)
            metrics.record_outcome(failure.kind)
            return AnalysisResult(submitted_url=submitted, outcome=failure)

        url = validation.normalized_url

        try:
            verdict = self.classify(url)
        except Exception as e:
            logger.exception("Classification failed for %s", url)
            failure = ClassificationFailure(reason=str(e) or type(e).__name__)
            metrics.record_outcome(failure.kind)
            return AnalysisResult(submitted_url=submitted, normalized_url=url, outcome=failure)

        metrics.record_rule(verdict.rule)
        metrics.record_classification(verdict.classification.value)

        outcome = await self._explain(url, verdict, cancel_event)
        metrics.record_outcome(outcome.kind)
        return AnalysisResult(submitted_url=submitted, normalized_url=url, outcome=outcome)

    async def _explain(
        self,
        url: str,
        verdict: Verdict,
        cancel_event: Optional[asyncio.Event],
    ) -> Success | ExplanationFailure:
        """Run the explainer with a bounded wait; never raises."""
        request = ExplanationRequest(url=url, verdict=verdict)
        explain_task = asyncio.ensure_future(self.explainer.explain(request))
        waiters = {explain_task}
        cancel_task = None
        if cancel_event is not None:
            cancel_task = asyncio.ensure_future(cancel_event.wait())
            waiters.add(cancel_task)

        try:
            done, _pending = await asyncio.wait(
                waiters,
                timeout=self.explanation_timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        except asyncio.CancelledError:
            explain_task.cancel()
            raise
        finally:
            if cancel_task is not None and not cancel_task.done():
                cancel_task.cancel()

        reason: Optional[str] = None
        if explain_task in done:
            try:
                text = explain_task.result()
            except asyncio.CancelledError:
                reason = "Explanation generation was cancelled"
            except Exception as e:
                reason = f"{type(e).__name__}: {e}"
            else:
                return Success(verdict=verdict, explanation=text)
        else:
            explain_task.cancel()
            if cancel_task is not None and cancel_task in done:
                reason = "Explanation generation was cancelled"
            else:
                reason = f"Explanation timed out after {self.explanation_timeout:g}s"

        logger.warning("Using fallback explanation for %s: %s", url, reason)
        return ExplanationFailure(verdict=verdict, reason=reason, explanation=FALLBACK_EXPLANATION)

    async def close(self) -> None:
        await self.explainer.close()


def analyze_url(raw_url: object, engine: AnalysisEngine | None = None) -> AnalysisResult:
    """Blocking wrapper around ``AnalysisEngine.analyze`` for synchronous callers.

    Each call runs on its own event loop, so the explainer is closed before the
    loop goes away. Explainers reopen their clients lazily, which keeps a
    caller-supplied engine usable across calls.
    """
    engine = engine or AnalysisEngine()

    async def _run() -> AnalysisResult:
        try:
            return await engine.analyze(raw_url)
        finally:
            await engine.close()

    return asyncio.run(_run())
