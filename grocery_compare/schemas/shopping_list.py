"""
Pydantic schemas for shopping lists and list items.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class ListItemCreate(BaseModel):
    """Schema for adding an item to a list"""
    product_name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(1, ge=1)
    checked: bool = False


class ListItemUpdate(BaseModel):
    """
    Schema for editing a list item (all fields optional).
    Quantities below 1 are accepted here and clamped to 1 by the repository.
    """
    product_name: Optional[str] = Field(None, max_length=255)
    quantity: Optional[int] = None
    checked: Optional[bool] = None


class ListItemResponse(BaseModel):
    """Schema for list item response"""
    id: int
    list_id: int
    product_name: str
    quantity: int
    checked: bool

    class Config:
        from_attributes = True


class ShoppingListCreate(BaseModel):
    """Schema for creating a shopping list"""
    name: str = Field(..., min_length=1, max_length=255)


class ShoppingListUpdate(BaseModel):
    """Schema for renaming a shopping list"""
    name: str = Field(..., min_length=1, max_length=255)


class ShoppingListResponse(BaseModel):
    """Schema for shopping list response"""
    id: int
    user_id: int
    name: str
    created_at: datetime
    updated_at: datetime
    items: List[ListItemResponse] = []

    class Config:
        from_attributes = True


class ListCompareRequest(BaseModel):
    """Compare a stored list; max_distance falls back to the configured default"""
    max_distance: Optional[float] = Field(None, ge=0)
    unchecked_only: bool = Field(False, description="Skip items already ticked off")
