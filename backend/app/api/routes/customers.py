"""
Customer search-or-create.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_organization_id
from app.db.session import get_db
from app.schemas.customer import CustomerCreate, CustomerResponse
from app.services.customer_service import create_customer, search_customers

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get("/", response_model=list[CustomerResponse])
async def search_customers_endpoint(
    q: str = Query("", max_length=255),
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    return await search_customers(db, organization_id, q)


@router.post("/", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer_endpoint(
    customer_data: CustomerCreate,
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    return await create_customer(db, organization_id, customer_data)
