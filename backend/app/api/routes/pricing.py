"""
Price quotes. Read-only; nothing is stored.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_organization_id
from app.db.session import get_db
from app.schemas.pricing import PriceBreakdown, PriceQuoteRequest
from app.services.pricing_service import calculate_price

router = APIRouter(prefix="/pricing", tags=["Pricing"])


@router.post("/quote", response_model=PriceBreakdown)
async def quote_endpoint(
    quote: PriceQuoteRequest,
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    return await calculate_price(
        db,
        organization_id,
        quote.resource_type_id,
        quote.checkin,
        quote.checkout,
        unit_count=quote.unit_count,
        extras=quote.extras,
        plan=quote.plan,
    )
