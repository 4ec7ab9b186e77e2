"""
Pydantic schemas for shopping-list price comparison.
"""

from decimal import Decimal
from typing import Optional, List, Any, Literal
from pydantic import BaseModel, Field, field_validator


class ShoppingListItem(BaseModel):
    """A product (by name) and quantity to price across stores"""
    product_name: str = Field(..., min_length=1, max_length=255, description="Product name (exact match)")
    quantity: int = Field(1, ge=1, strict=True, description="Number of units, at least 1")
    checked: bool = Field(False, description="Ticked off on the list")

    @field_validator("product_name")
    @classmethod
    def strip_product_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("product_name must not be blank")
        return value

    @field_validator("quantity", mode="before")
    @classmethod
    def reject_bool_quantity(cls, value):
        if isinstance(value, bool):
            raise ValueError("quantity must be an integer")
        return value


class ItemPriceDetail(BaseModel):
    """Price of one list item at one store"""
    product_name: str
    quantity: int
    price: Decimal
    total: Decimal
    is_on_sale: bool = False
    not_available: bool = False


class StorePriceBreakdown(BaseModel):
    """Per-store result of comparing a list against that store's prices"""
    store_id: int
    name: str
    chain: str
    distance: Decimal
    total_price: Decimal
    savings: Decimal
    items_total: int
    items_available: int
    price_details: List[ItemPriceDetail]


class ComparisonDiagnostics(BaseModel):
    """What happened while comparing, beyond the ranked breakdowns"""
    status: Literal["ok", "no_stores_found", "no_items"] = "ok"
    candidate_stores: int = 0
    dropped_stores: List[int] = Field(default_factory=list, description="Store IDs omitted after a lookup failure or timeout")
    savings_policy: str = "average"


class ComparisonResult(BaseModel):
    """Ranked breakdowns plus diagnostics"""
    breakdowns: List[StorePriceBreakdown]
    diagnostics: ComparisonDiagnostics


class SavingsSummary(BaseModel):
    """Presentation-level savings figures derived from ranked breakdowns"""
    best_savings: Decimal
    highest_price: Decimal
    savings_percentage: Decimal = Field(..., description="Raw percentage, may exceed 100 on anomalous data")
    display_percentage: Decimal = Field(..., description="savings_percentage clamped to [0, 100]")
    annual_savings: Decimal = Field(..., description="best_savings x 52 weekly shops")


# ============================================================================
# Request / Response Schemas
# ============================================================================

class CompareRequest(BaseModel):
    """
    Request body for a comparison.

    Items and max_distance are validated by the comparison engine, so malformed
    input surfaces as a 400 InvalidInput rather than a 422.
    """
    list_items: Optional[Any] = Field(None, description="[{product_name, quantity, checked}]")
    max_distance: Optional[Any] = Field(None, description="Maximum store distance in miles")


class CompareResponse(BaseModel):
    """Response body for a comparison"""
    status: Literal["ok", "no_stores_found", "no_items"]
    breakdowns: List[StorePriceBreakdown]
    diagnostics: ComparisonDiagnostics
    summary: SavingsSummary
