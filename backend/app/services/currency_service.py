"""
Tenant currency configuration lookup.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.organization import OrganizationCurrency
from app.services.cache_service import get_cached_base_currency, set_cached_base_currency
from app.core.config import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


async def get_base_currency(db: AsyncSession, organization_id: int) -> str:
    """
    Return the tenant's base currency code.
    Falls back to DEFAULT_CURRENCY (logged) when the tenant has none configured.
    """
    cached = await get_cached_base_currency(organization_id)
    if cached:
        return cached

    result = await db.execute(
        select(OrganizationCurrency.code)
        .where(
            OrganizationCurrency.organization_id == organization_id,
            OrganizationCurrency.is_base.is_(True),
            OrganizationCurrency.is_active.is_(True),
        )
        .limit(1)
    )
    code = result.scalar_one_or_none()

    if not code:
        fallback = get_settings().DEFAULT_CURRENCY
        logger.warning("base_currency_fallback", organization_id=organization_id, currency=fallback)
        return fallback

    await set_cached_base_currency(organization_id, code)
    return code
