"""
Health Check Tests
==================

Tests for the health check and API info endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test the health check endpoint."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "healthy"
    assert "version" in data
    assert "environment" in data


@pytest.mark.asyncio
async def test_api_info_endpoint(client: AsyncClient):
    """Test the API info endpoint."""
    response = await client.get("/api")

    assert response.status_code == 200
    data = response.json()

    assert data["name"] == "DeskFlow API"
    assert "version" in data


@pytest.mark.asyncio
async def test_root_redirects_to_login_without_session(client: AsyncClient):
    """The home page is gated behind a session."""
    response = await client.get("/")

    assert response.status_code == 307
    assert response.headers["location"] == "/login?from=%2F"
