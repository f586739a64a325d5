"""
Administrative block endpoints.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_organization_id
from app.db.session import get_db
from app.schemas.block import BlockCreate, BlockResponse
from app.services.block_service import create_block, delete_block, list_blocks

router = APIRouter(prefix="/blocks", tags=["Blocks"])


@router.post("/", response_model=BlockResponse, status_code=status.HTTP_201_CREATED)
async def create_block_endpoint(
    block_data: BlockCreate,
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    """Hold a resource for [date_from, date_to], both days inclusive."""
    return await create_block(db, organization_id, block_data)


@router.get("/", response_model=list[BlockResponse])
async def list_blocks_endpoint(
    resource_id: Optional[int] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    return await list_blocks(db, organization_id, resource_id, date_from, date_to)


@router.delete("/{block_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_block_endpoint(
    block_id: int,
    organization_id: int = Depends(get_organization_id),
    db: AsyncSession = Depends(get_db),
):
    await delete_block(db, organization_id, block_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
