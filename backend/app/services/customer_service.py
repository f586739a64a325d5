"""
Customer directory: search-or-create over counterparty records.
"""

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.customer import Customer
from app.schemas.customer import CustomerCreate
from app.core.config import get_settings
from app.core.exceptions import NotFound
from app.core.logging import get_logger

logger = get_logger(__name__)


async def search_customers(db: AsyncSession, organization_id: int, text: str = "") -> list[Customer]:
    """Case-insensitive match on name, email, phone or document number."""
    query = select(Customer).where(Customer.organization_id == organization_id)

    text = (text or "").strip()
    if text:
        term = f"%{text}%"
        query = query.where(
            or_(
                Customer.first_name.ilike(term),
                Customer.last_name.ilike(term),
                Customer.email.ilike(term),
                Customer.phone.ilike(term),
                Customer.document_number.ilike(term),
            )
        )

    result = await db.execute(
        query.order_by(Customer.first_name.asc(), Customer.id.asc()).limit(get_settings().CUSTOMER_SEARCH_LIMIT)
    )
    return list(result.scalars().all())


async def create_customer(db: AsyncSession, organization_id: int, data: CustomerCreate) -> Customer:
    customer = Customer(organization_id=organization_id, **data.model_dump())
    db.add(customer)
    await db.flush()
    await db.refresh(customer)

    logger.info("customer_created", customer_id=customer.id, organization_id=organization_id)
    return customer


async def get_customer(db: AsyncSession, organization_id: int, customer_id: int) -> Customer:
    result = await db.execute(
        select(Customer).where(
            Customer.id == customer_id,
            Customer.organization_id == organization_id,
        )
    )
    customer = result.scalar_one_or_none()
    if not customer:
        raise NotFound("Customer", customer_id)
    return customer
