"""
Integration tests for the service info and health endpoints.

They run against the temporary SQLite database from conftest.py, so the
database should always report as connected.
"""

import pytest
from httpx import AsyncClient

from app.config import settings


@pytest.mark.asyncio
async def test_root_endpoint(client: AsyncClient):
    """GET / names the service and its version."""
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json() == {
        "service": "Video Summary Service",
        "status": "running",
        "version": "1.0.0",
    }


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """GET /health reports the database and PDF settings."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert data["pdf"]["font_family"] == settings.PDF_FONT_FAMILY
    assert data["environment"] == settings.APP_ENV


@pytest.mark.asyncio
async def test_health_reports_missing_api_key(client: AsyncClient, monkeypatch):
    """Without a Claude key the service is up but can't summarize."""
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", "")

    response = await client.get("/health")

    assert response.json()["summarizer"] == "missing api key"
