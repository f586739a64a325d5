"""
Tests for tenant base currency resolution.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.currency_service import get_base_currency


@pytest.mark.asyncio
async def test_configured_base_currency(db_session: AsyncSession, organization):
    assert await get_base_currency(db_session, organization.id) == "USD"


@pytest.mark.asyncio
async def test_unconfigured_tenant_falls_back(db_session: AsyncSession, organization):
    assert await get_base_currency(db_session, 2) == "COP"
