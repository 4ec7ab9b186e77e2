"""
API routers for the application.
"""

from fastapi import APIRouter
from grocery_compare.routers import compare, stores, prices, lists, alerts

api_router = APIRouter()

# Include routers
api_router.include_router(compare.router)  # Shopping-list price comparison
api_router.include_router(stores.router)
api_router.include_router(prices.router)  # Current prices, history, imports
api_router.include_router(lists.router)
api_router.include_router(alerts.router)

__all__ = ["api_router", "compare", "stores", "prices", "lists", "alerts"]
