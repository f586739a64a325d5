"""
Pydantic schemas for the customer directory.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class CustomerCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    document_number: Optional[str] = Field(None, max_length=50)


class CustomerResponse(BaseModel):
    id: int
    first_name: str
    last_name: Optional[str]
    full_name: str
    email: Optional[str]
    phone: Optional[str]
    document_number: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}
