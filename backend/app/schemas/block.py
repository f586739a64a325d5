"""
Pydantic schemas for administrative blocks.
"""

from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator

BlockType = Literal["maintenance", "cleaning", "out_of_order", "reserved", "other"]


class BlockCreate(BaseModel):
    resource_id: int
    date_from: date
    date_to: date
    block_type: BlockType = "other"
    reason: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def _dates_ordered(self) -> "BlockCreate":
        if self.date_to < self.date_from:
            raise ValueError("date_to must be on or after date_from")
        return self


class BlockResponse(BaseModel):
    id: int
    resource_id: int
    date_from: date
    date_to: date
    block_type: str
    reason: Optional[str]

    model_config = {"from_attributes": True}
