"""Tests for the public probes and the generic error shape."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/health", "/api/v1/health"])
async def test_health(async_client: AsyncClient, path):
    resp = await async_client.get(path)
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "OK"
    assert data["service"] == "franchise-saas-backend"
    assert data["timestamp"]


@pytest.mark.asyncio
async def test_readiness_reports_database(async_client: AsyncClient):
    resp = await async_client.get("/health/ready")
    assert resp.status_code == 200
    data = resp.json()
    assert data["db"] is True
    assert isinstance(data["redis"], bool)


@pytest.mark.asyncio
async def test_unknown_route_uses_error_shape(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert resp.json() == {
        "error": "Not Found",
        "message": "The requested resource was not found",
    }


class _UnreachableRedis:
    def __init__(self):
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        self.closed = True

    async def ping(self):
        raise ConnectionError("Connection refused")


@pytest.mark.asyncio
async def test_readiness_closes_redis_client_when_ping_fails(async_client: AsyncClient, monkeypatch):
    import redis.asyncio as aioredis

    clients = []

    def fake_from_url(url, **kwargs):
        clients.append(_UnreachableRedis())
        return clients[-1]

    monkeypatch.setattr(aioredis, "from_url", fake_from_url)

    resp = await async_client.get("/health/ready")
    assert resp.status_code == 200
    assert resp.json() == {"db": True, "redis": False}
    assert len(clients) == 1
    assert clients[0].closed
