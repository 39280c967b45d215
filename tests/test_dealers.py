"""Tests for the franchise-owner dealer views."""

import uuid

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_dealer_cannot_list_dealers(async_client: AsyncClient, register):
    dealer = await register(role="dealer")
    resp = await async_client.get("/api/v1/dealers", headers=dealer["headers"])
    assert resp.status_code == 403
    assert resp.json()["error"] == "Insufficient permissions"


@pytest.mark.asyncio
async def test_manager_cannot_list_dealers(async_client: AsyncClient, register):
    manager = await register(role="manager")
    resp = await async_client.get("/api/v1/dealers", headers=manager["headers"])
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_dealers_require_auth(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/dealers")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_owner_sees_only_own_tenant_dealers(async_client: AsyncClient, register):
    owner_a = await register(role="franchise-owner", tenant_id="tenant-a")
    dealer_a1 = await register(role="dealer", tenant_id="tenant-a")
    dealer_a2 = await register(role="dealer", tenant_id="tenant-a")
    await register(role="manager", tenant_id="tenant-a")
    await register(role="dealer", tenant_id="tenant-b")

    resp = await async_client.get("/api/v1/dealers", headers=owner_a["headers"])
    assert resp.status_code == 200
    dealers = resp.json()
    assert {d["id"] for d in dealers} == {dealer_a1["user"]["id"], dealer_a2["user"]["id"]}
    assert all(d["tenant_id"] == "tenant-a" for d in dealers)
    assert all("hashed_password" not in d for d in dealers)


@pytest.mark.asyncio
async def test_owner_can_filter_by_type(async_client: AsyncClient, register):
    owner = await register(role="franchise-owner")
    manager = await register(role="manager")
    await register(role="dealer")

    resp = await async_client.get("/api/v1/dealers?type=manager", headers=owner["headers"])
    assert resp.status_code == 200
    assert [u["id"] for u in resp.json()] == [manager["user"]["id"]]


@pytest.mark.asyncio
async def test_get_dealer_by_id(async_client: AsyncClient, register):
    owner = await register(role="franchise-owner")
    dealer = await register(role="dealer", first_name="Bob")

    resp = await async_client.get(f"/api/v1/dealers/{dealer['user']['id']}", headers=owner["headers"])
    assert resp.status_code == 200
    assert resp.json()["first_name"] == "Bob"


@pytest.mark.asyncio
async def test_get_dealer_from_other_tenant_is_not_found(async_client: AsyncClient, register):
    owner = await register(role="franchise-owner", tenant_id="tenant-a")
    foreign = await register(role="dealer", tenant_id="tenant-b")

    resp = await async_client.get(f"/api/v1/dealers/{foreign['user']['id']}", headers=owner["headers"])
    assert resp.status_code == 404
    assert resp.json()["error"] == "Dealer not found"


@pytest.mark.asyncio
async def test_get_dealer_rejects_non_dealers_and_unknown_ids(async_client: AsyncClient, register):
    owner = await register(role="franchise-owner")
    manager = await register(role="manager")

    not_dealer = await async_client.get(f"/api/v1/dealers/{manager['user']['id']}", headers=owner["headers"])
    assert not_dealer.status_code == 404

    unknown = await async_client.get(f"/api/v1/dealers/{uuid.uuid4()}", headers=owner["headers"])
    assert unknown.status_code == 404

    malformed = await async_client.get("/api/v1/dealers/not-a-uuid", headers=owner["headers"])
    assert malformed.status_code == 400
