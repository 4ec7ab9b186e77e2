"""
Pydantic schemas for price alerts.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class PriceAlertCreate(BaseModel):
    """Schema for creating a price alert"""
    product_name: str = Field(..., min_length=1, max_length=255, description="Product name (exact match)")
    target_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Alert when the price is at or below this")
    store_id: Optional[int] = Field(None, description="Restrict to one store; omit for any store")
    email_alert: bool = True
    push_alert: bool = True


class PriceAlertResponse(PriceAlertCreate):
    """Schema for price alert response"""
    id: int
    user_id: int
    last_triggered_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
