"""HTTP API server for PhishGuard."""

from __future__ import annotations

import logging

from aiohttp import web

from .analyzer.metrics import metrics
from .pipeline.analysis import AnalysisEngine

logger = logging.getLogger(__name__)

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


class AnalysisServer:
    """Serves URL analysis plus lightweight health and metrics endpoints."""

    def __init__(self, engine: AnalysisEngine, host: str = "127.0.0.1", port: int = 8080):
        self.engine = engine
        self.host = host
        self.port = port
        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/api/analyze", self._handle_analyze)
        app.router.add_get("/healthz", self._handle_health)
        app.router.add_get("/metrics", self._handle_metrics)
        return app

    async def start(self):
        """Start the API server."""
        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self.host, self.port)
        await self._site.start()
        logger.info("PhishGuard API listening on %s:%s", self.host, self.port)

    async def stop(self):
        """Stop the API server."""
        if self._site:
            await self._site.stop()
        if self._runner:
            await self._runner.cleanup()
        self._runner = None
        self._site = None
        await self.engine.close()

    async def _read_url(self, request: web.Request) -> object:
        """Pull the submitted URL from a JSON or form body."""
        if request.content_type == "application/json":
            payload = await request.json()
            if not isinstance(payload, dict):
                raise ValueError("JSON body must be an object")
            return payload.get("url")
        form = await request.post()
        return form.get("url")

    async def _handle_analyze(self, request: web.Request) -> web.Response:
        """Analyze one URL and return the renderable result."""
        try:
            raw_url = await self._read_url(request)
        except ValueError as exc:
            logger.info("Rejected unreadable analyze request: %s", exc)
            return web.json_response(
                {"error": "Request body must be JSON or form data with a 'url' field"},
                status=400,
                headers=CORS_HEADERS,
            )

        result = await self.engine.analyze(raw_url)
        return web.json_response(result.to_dict(), headers=CORS_HEADERS)

    async def _handle_health(self, request):  # noqa: ANN001
        """Return JSON health status."""
        return web.json_response(
            {"status": "ok", "explainer": self.engine.explainer.name},
            headers=CORS_HEADERS,
        )

    async def _handle_metrics(self, request):  # noqa: ANN001
        """Expose analysis counters (Prometheus-ish)."""
        summary = metrics.get_summary()

        lines = [
            f"phishguard_uptime_seconds {summary['uptime_seconds']}",
            f"phishguard_total_analyses {summary['total_analyses']}",
        ]
        for label, key in (("rule", "rules"), ("classification", "classifications"), ("outcome", "outcomes")):
            for name, value in sorted(summary[key].items()):
                lines.append(f'phishguard_{key}_total{{{label}="{name}"}} {value}')

        return web.Response(text="\n".join(lines) + "\n")
