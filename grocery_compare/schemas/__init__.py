"""
Schemas for the application.

This module exports all Pydantic models and schemas used for request/response validation.
"""

from grocery_compare.schemas.store import (
    StoreBase,
    StoreCreate,
    StoreResponse,
    StoreListResponse,
    StoreRecord,
)

from grocery_compare.schemas.price import (
    PriceRecord,
    PriceHistoryPoint,
    PriceCreate,
    PriceResponse,
    PriceListResponse,
    TriggeredAlert,
    PriceUpdateResponse,
    PriceImportRequest,
    BulkOperationResponse,
    CSVUploadResponse,
)

from grocery_compare.schemas.comparison import (
    ShoppingListItem,
    ItemPriceDetail,
    StorePriceBreakdown,
    ComparisonDiagnostics,
    ComparisonResult,
    SavingsSummary,
    CompareRequest,
    CompareResponse,
)

from grocery_compare.schemas.shopping_list import (
    ListItemCreate,
    ListItemUpdate,
    ListItemResponse,
    ShoppingListCreate,
    ShoppingListUpdate,
    ShoppingListResponse,
    ListCompareRequest,
)

from grocery_compare.schemas.price_alert import (
    PriceAlertCreate,
    PriceAlertResponse,
)

__all__ = [
    # Store
    "StoreBase",
    "StoreCreate",
    "StoreResponse",
    "StoreListResponse",
    "StoreRecord",
    # Price
    "PriceRecord",
    "PriceHistoryPoint",
    "PriceCreate",
    "PriceResponse",
    "PriceListResponse",
    "TriggeredAlert",
    "PriceUpdateResponse",
    "PriceImportRequest",
    "BulkOperationResponse",
    "CSVUploadResponse",
    # Comparison
    "ShoppingListItem",
    "ItemPriceDetail",
    "StorePriceBreakdown",
    "ComparisonDiagnostics",
    "ComparisonResult",
    "SavingsSummary",
    "CompareRequest",
    "CompareResponse",
    # Shopping lists
    "ListItemCreate",
    "ListItemUpdate",
    "ListItemResponse",
    "ShoppingListCreate",
    "ShoppingListUpdate",
    "ShoppingListResponse",
    "ListCompareRequest",
    # Alerts
    "PriceAlertCreate",
    "PriceAlertResponse",
]
