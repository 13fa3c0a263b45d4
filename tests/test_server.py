"""Tests for the HTTP API server."""

from __future__ import annotations

import pytest
from aiohttp.test_utils import TestClient, TestServer

from phishguard.analyzer.classifier import HeuristicClassifier
from phishguard.explainer import FALLBACK_EXPLANATION, BaseExplainer, TemplateExplainer
from phishguard.pipeline.analysis import AnalysisEngine
from phishguard.server import AnalysisServer


class UnavailableExplainer(BaseExplainer):
    name = "unavailable"

    async def _generate(self, request):
        raise ConnectionError("LLM offline")


def make_server(explainer: BaseExplainer | None = None) -> AnalysisServer:
    engine = AnalysisEngine(
        classifier=HeuristicClassifier(random_source=lambda url: 0.0),
        explainer=explainer or TemplateExplainer(),
    )
    return AnalysisServer(engine)


@pytest.mark.asyncio
async def test_analyze_json_body():
    async with TestClient(TestServer(make_server().build_app())) as client:
        resp = await client.post("/api/analyze", json={"url": "https://phishing.example.com/login"})
        assert resp.status == 200
        data = await resp.json()
        assert data["classification"] == "phishing"
        assert data["confidence"] == 0.95
        assert "known_phishing_domain" in data["flags"]
        assert data["explanation"].startswith("Warning:")
        assert data["error"] is None


@pytest.mark.asyncio
async def test_analyze_form_body():
    async with TestClient(TestServer(make_server().build_app())) as client:
        resp = await client.post("/api/analyze", data={"url": "https://github.com"})
        assert resp.status == 200
        data = await resp.json()
        assert data["classification"] == "safe"
        assert data["submittedUrl"] == "https://github.com"


@pytest.mark.asyncio
async def test_analyze_invalid_url_still_renders():
    async with TestClient(TestServer(make_server().build_app())) as client:
        resp = await client.post("/api/analyze", json={"url": "not a url"})
        assert resp.status == 200
        data = await resp.json()
        assert data["classification"] == "error"
        assert data["submittedUrl"] == "not a url"
        assert data["error"]


@pytest.mark.asyncio
async def test_analyze_missing_url_field():
    async with TestClient(TestServer(make_server().build_app())) as client:
        resp = await client.post("/api/analyze", json={})
        data = await resp.json()
        assert data["classification"] == "error"
        assert data["submittedUrl"] == ""


@pytest.mark.asyncio
async def test_analyze_unreadable_body():
    async with TestClient(TestServer(make_server().build_app())) as client:
        resp = await client.post(
            "/api/analyze",
            data="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status == 400


@pytest.mark.asyncio
async def test_analyze_with_unavailable_explainer():
    server = make_server(UnavailableExplainer())
    async with TestClient(TestServer(server.build_app())) as client:
        resp = await client.post("/api/analyze", json={"url": "https://github.com"})
        data = await resp.json()
        assert data["classification"] == "safe"
        assert data["explanation"] == FALLBACK_EXPLANATION


@pytest.mark.asyncio
async def test_healthz_and_metrics():
    async with TestClient(TestServer(make_server().build_app())) as client:
        resp = await client.get("/healthz")
        assert resp.status == 200
        assert (await resp.json())["status"] == "ok"

        await client.post("/api/analyze", json={"url": "https://github.com"})
        resp = await client.get("/metrics")
        text = await resp.text()
        assert "phishguard_total_analyses 1" in text
        assert 'phishguard_rules_total{rule="trusted_domain"} 1' in text
        assert 'phishguard_outcomes_total{outcome="success"} 1' in text
