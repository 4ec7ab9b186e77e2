"""
Shared API dependencies.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from grocery_compare.core.config import settings
from grocery_compare.core.database import get_db
from grocery_compare.services.comparison_engine import ComparisonEngine
from grocery_compare.services.price_repository import PriceRepository
from grocery_compare.services.store_repository import StoreRepository


def get_current_user_id() -> int:
    """
    Id of the requesting user.
    Sessions are owned by the external auth layer; until it is wired in, every
    request acts as the configured demo user.
    """
    return settings.DEMO_USER_ID


def get_comparison_engine(db: Session = Depends(get_db)) -> ComparisonEngine:
    """Comparison engine over the SQL repositories for this request's session"""
    return ComparisonEngine(
        store_repository=StoreRepository(db),
        price_repository=PriceRepository(db),
        savings_policy=settings.SAVINGS_POLICY,
        store_timeout=settings.STORE_LOOKUP_TIMEOUT_SECONDS,
        sale_savings_rate=settings.SALE_SAVINGS_RATE,
    )
