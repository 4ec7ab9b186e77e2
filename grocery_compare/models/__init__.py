"""
Database models for the application.
"""

from grocery_compare.core.database import Base
from grocery_compare.models.store import Store
from grocery_compare.models.price import Price, PriceHistory
from grocery_compare.models.shopping_list import ShoppingList, ListItem
from grocery_compare.models.price_alert import PriceAlert

__all__ = [
    "Base",
    "Store",
    "Price",
    "PriceHistory",
    "ShoppingList",
    "ListItem",
    "PriceAlert",
]
