"""
Repository layer for Price and PriceHistory operations.
Handles all database queries for the prices and price_history tables.

Lookups by product name are exact and case-sensitive; search() is the
case-insensitive partial-match path used for browsing.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy import and_
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from grocery_compare.core.database import run_in_new_session
from grocery_compare.core.exceptions import RepositoryUnavailable
from grocery_compare.models.price import Price, PriceHistory
from grocery_compare.schemas.price import PriceRecord
from grocery_compare.services.record_mapper import price_record_from_row

logger = logging.getLogger(__name__)


class PriceRepository:
    """Repository for Price operations, bound to one session"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, price_id: int) -> Optional[Price]:
        """Get price entry by ID"""
        return self.db.query(Price).filter(Price.id == price_id).first()

    def get_row(self, store_id: int, product_name: str) -> Optional[Price]:
        """Get the current price row for an exact (store, product name) pair"""
        return self.db.query(Price).filter(
            and_(
                Price.store_id == store_id,
                Price.product_name == product_name
            )
        ).first()

    def get_all(
        self,
        store_id: Optional[int] = None,
        product_name: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = 100
    ) -> Tuple[List[Price], int]:
        """Get prices filtered by store and/or exact product name"""
        query = self.db.query(Price)

        if store_id is not None:
            query = query.filter(Price.store_id == store_id)
        if product_name:
            query = query.filter(Price.product_name == product_name)

        total = query.count()
        entries = query.order_by(Price.store_id, Price.product_name).offset(skip).limit(limit).all()
        return entries, total

    def search(self, term: str, skip: int = 0, limit: int = 100) -> Tuple[List[Price], int]:
        """Case-insensitive partial match on product name"""
        query = self.db.query(Price).filter(Price.product_name.ilike(f"%{term}%"))
        total = query.count()
        entries = query.order_by(Price.product_name, Price.store_id).offset(skip).limit(limit).all()
        return entries, total

    def upsert(self, record: PriceRecord) -> Tuple[Price, Optional[Decimal], bool]:
        """
        Create or update the current price for (store, product name).

        Flushes but does not commit, so the caller can write history and alert
        state in the same transaction.

        Returns:
            (row, previous price or None, created)
        """
        existing = self.get_row(record.store_id, record.product_name)
        updated_at = record.updated_at or datetime.now(timezone.utc)

        if existing:
            previous = existing.price
            existing.price = record.price
            existing.is_on_sale = record.is_on_sale
            existing.updated_at = updated_at
            self.db.flush()
            return existing, previous, False

        db_price = Price(
            store_id=record.store_id,
            product_name=record.product_name,
            price=record.price,
            is_on_sale=record.is_on_sale,
            updated_at=updated_at,
        )
        self.db.add(db_price)
        self.db.flush()
        return db_price, None, True

    def delete(self, price_id: int) -> bool:
        """Delete a price entry by ID; history is kept"""
        db_price = self.get_by_id(price_id)
        if not db_price:
            return False

        self.db.delete(db_price)
        self.db.commit()
        return True

    # ============================================================================
    # PRICE HISTORY
    # ============================================================================

    def add_history(self, store_id: int, product_name: str, price: Decimal, date: Optional[datetime] = None) -> PriceHistory:
        """Append a history point (flushed, not committed)"""
        point = PriceHistory(
            store_id=store_id,
            product_name=product_name,
            price=price,
            date=date or datetime.now(timezone.utc),
        )
        self.db.add(point)
        self.db.flush()
        return point

    def get_history(self, store_id: int, product_name: str) -> List[PriceHistory]:
        """History for one product at one store, oldest first"""
        return self.db.query(PriceHistory).filter(
            and_(
                PriceHistory.store_id == store_id,
                PriceHistory.product_name == product_name
            )
        ).order_by(PriceHistory.date, PriceHistory.id).all()

    # ============================================================================
    # COMPARISON ENGINE READS
    # ============================================================================

    # Each read runs in a worker thread on a session of its own

    async def _read(self, work, failure: str):
        try:
            return await run_in_new_session(self.db.get_bind(), lambda session: work(type(self)(session)))
        except SQLAlchemyError as e:
            logger.error(f"{failure}: {str(e)}", exc_info=True)
            raise RepositoryUnavailable("Price repository is unavailable") from e

    async def get_price(self, store_id: int, product_name: str) -> Optional[PriceRecord]:
        """Current price at a store by exact product name, or None"""
        def lookup(repository: "PriceRepository") -> Optional[PriceRecord]:
            row = repository.get_row(store_id, product_name)
            return price_record_from_row(row) if row else None

        return await self._read(lookup, f"Price lookup failed for store {store_id}")

    async def list_by_product_name(self, product_name: str) -> List[PriceRecord]:
        """Current prices of a product at every store that carries it"""
        def lookup(repository: "PriceRepository") -> List[PriceRecord]:
            rows, _ = repository.get_all(product_name=product_name, limit=None)
            return [price_record_from_row(row) for row in rows]

        return await self._read(lookup, f"Price lookup failed for '{product_name}'")

    async def list_by_store(self, store_id: int) -> List[PriceRecord]:
        """Every current price at a store"""
        def lookup(repository: "PriceRepository") -> List[PriceRecord]:
            rows, _ = repository.get_all(store_id=store_id, limit=None)
            return [price_record_from_row(row) for row in rows]

        return await self._read(lookup, f"Price lookup failed for store {store_id}")
