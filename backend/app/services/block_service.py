"""
Administrative block maintenance (maintenance, owner holds, ...).
Blocks are read-only to the booking path; only these admin operations write them.
"""

from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.block import AdministrativeBlock
from app.models.resource import Resource
from app.schemas.block import BlockCreate
from app.services.intervals import inclusive_overlap_clause
from app.core.exceptions import NotFound
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_block(db: AsyncSession, organization_id: int, data: BlockCreate) -> AdministrativeBlock:
    resource = (
        await db.execute(
            select(Resource.id).where(
                Resource.id == data.resource_id,
                Resource.organization_id == organization_id,
            )
        )
    ).scalar_one_or_none()
    if resource is None:
        raise NotFound("Resource", data.resource_id)

    block = AdministrativeBlock(organization_id=organization_id, **data.model_dump())
    db.add(block)
    await db.flush()
    await db.refresh(block)

    logger.info(
        "block_created",
        block_id=block.id,
        resource_id=block.resource_id,
        date_from=str(block.date_from),
        date_to=str(block.date_to),
        block_type=block.block_type,
    )
    return block


async def list_blocks(
    db: AsyncSession,
    organization_id: int,
    resource_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list[AdministrativeBlock]:
    query = select(AdministrativeBlock).where(AdministrativeBlock.organization_id == organization_id)
    if resource_id is not None:
        query = query.where(AdministrativeBlock.resource_id == resource_id)
    if date_from and date_to:
        query = query.where(
            inclusive_overlap_clause(AdministrativeBlock.date_from, AdministrativeBlock.date_to, date_from, date_to)
        )
    result = await db.execute(query.order_by(AdministrativeBlock.date_from.asc(), AdministrativeBlock.id.asc()))
    return list(result.scalars().all())


async def delete_block(db: AsyncSession, organization_id: int, block_id: int) -> None:
    result = await db.execute(
        select(AdministrativeBlock).where(
            AdministrativeBlock.id == block_id,
            AdministrativeBlock.organization_id == organization_id,
        )
    )
    block = result.scalar_one_or_none()
    if not block:
        raise NotFound("AdministrativeBlock", block_id)

    await db.delete(block)
    await db.flush()
    logger.info("block_deleted", block_id=block_id)
