"""
Tests for customer search-or-create.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_customer(client: AsyncClient, org_headers, organization):
    response = await client.post(
        "/api/v1/customers/",
        json={"first_name": "Luis", "last_name": "Gómez", "email": "luis@example.com"},
        headers=org_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["full_name"] == "Luis Gómez"
    assert data["email"] == "luis@example.com"


@pytest.mark.asyncio
async def test_create_customer_rejects_bad_email(client: AsyncClient, org_headers, organization):
    response = await client.post(
        "/api/v1/customers/", json={"first_name": "Luis", "email": "not-an-email"}, headers=org_headers
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_search_matches_any_field(client: AsyncClient, org_headers, customer):
    for term in ("ana", "RESTREPO", "1020304050", "300123"):
        response = await client.get("/api/v1/customers/", params={"q": term}, headers=org_headers)
        assert [c["id"] for c in response.json()] == [customer.id], term


@pytest.mark.asyncio
async def test_search_without_match(client: AsyncClient, org_headers, customer):
    response = await client.get("/api/v1/customers/", params={"q": "zzz"}, headers=org_headers)

    assert response.json() == []


@pytest.mark.asyncio
async def test_search_is_tenant_scoped(client: AsyncClient, customer):
    response = await client.get("/api/v1/customers/", params={"q": "ana"}, headers={"X-Organization-ID": "2"})

    assert response.json() == []
