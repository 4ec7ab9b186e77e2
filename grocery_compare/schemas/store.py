"""
Pydantic schemas for Store.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field


class StoreBase(BaseModel):
    """Base schema for Store"""
    name: str = Field(..., min_length=1, max_length=255, description="Store display name")
    chain: str = Field(..., min_length=1, max_length=100, description="Store chain")
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=50)
    zip_code: Optional[str] = Field(None, max_length=10)
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)
    distance: Decimal = Field(..., ge=0, max_digits=10, decimal_places=1, description="Precomputed travel distance in miles (one decimal place)")


class StoreCreate(StoreBase):
    """Schema for creating a store"""
    pass


class StoreResponse(StoreBase):
    """Schema for store response"""
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


class StoreListResponse(BaseModel):
    """Schema for a list of stores"""
    items: List[StoreResponse]
    total: int


class StoreRecord(BaseModel):
    """Typed store record consumed by the comparison engine"""
    id: int
    name: str
    chain: str
    distance: Decimal = Field(..., ge=0)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
