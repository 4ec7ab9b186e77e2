"""
Pydantic schemas for prices and price history.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, field_validator


# ============================================================================
# Typed records (repository boundary)
# ============================================================================

class PriceRecord(BaseModel):
    """Current price of one product at one store"""
    store_id: int
    product_name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    is_on_sale: bool = False
    updated_at: Optional[datetime] = None


class PriceHistoryPoint(BaseModel):
    """A single historical price observation"""
    store_id: int
    product_name: str
    price: Decimal
    date: datetime

    class Config:
        from_attributes = True


# ============================================================================
# Request / Response Schemas
# ============================================================================

class PriceCreate(BaseModel):
    """Schema for creating or replacing the current price of a product at a store"""
    store_id: int = Field(..., description="Store ID")
    product_name: str = Field(..., min_length=1, max_length=255, description="Product name (exact join key)")
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, description="Current price, to the cent")
    is_on_sale: bool = Field(False, description="Whether the price is a sale price")

    @field_validator("product_name")
    @classmethod
    def strip_product_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("product_name must not be blank")
        return value


class PriceResponse(BaseModel):
    """Schema for price response"""
    id: int
    store_id: int
    product_name: str
    price: Decimal
    is_on_sale: bool
    updated_at: datetime

    class Config:
        from_attributes = True


class PriceListResponse(BaseModel):
    """Schema for a list of prices"""
    items: List[PriceResponse]
    total: int


class TriggeredAlert(BaseModel):
    """Alert fired by a price update, handed to the notifier"""
    alert_id: int
    user_id: int
    product_name: str
    store_id: int
    target_price: Decimal
    current_price: Decimal
    email_alert: bool
    push_alert: bool


class PriceUpdateResponse(BaseModel):
    """Result of a price upsert"""
    price: PriceResponse
    created: bool
    triggered_alerts: List[TriggeredAlert] = []


class PriceImportRequest(BaseModel):
    """Raw price documents, e.g. from the scraping subsystem"""
    documents: List[Dict[str, Any]] = Field(..., description="Raw price documents")


class BulkOperationResponse(BaseModel):
    """Response for bulk operations"""
    success: bool
    created_count: int = 0
    updated_count: int = 0
    failed_count: int = 0
    errors: List[str] = []


class CSVUploadResponse(BaseModel):
    """Response schema for CSV price sheet upload"""
    success: bool
    total_rows: int
    created_count: int = 0
    updated_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    errors: List[Dict[str, Any]] = []
    processing_time_seconds: float
