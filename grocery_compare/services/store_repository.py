"""
Repository layer for Store operations.
Handles all database queries for the stores table and serves the comparison
engine's candidate-store lookup.
"""

import logging
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from grocery_compare.core.database import run_in_new_session
from grocery_compare.core.exceptions import RepositoryUnavailable
from grocery_compare.models.store import Store
from grocery_compare.schemas.store import StoreCreate, StoreRecord
from grocery_compare.services.record_mapper import store_record_from_row

logger = logging.getLogger(__name__)


class StoreRepository:
    """Repository for Store operations, bound to one session"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, store: StoreCreate) -> Store:
        """Create a new store"""
        db_store = Store(**store.model_dump())
        self.db.add(db_store)
        self.db.commit()
        self.db.refresh(db_store)
        return db_store

    def get_by_id(self, store_id: int) -> Optional[Store]:
        """Get store by ID"""
        return self.db.query(Store).filter(Store.id == store_id).first()

    def get_all(self, skip: int = 0, limit: int = 100) -> Tuple[List[Store], int]:
        """Get all stores ordered by distance, with pagination"""
        query = self.db.query(Store)
        total = query.count()
        stores = query.order_by(Store.distance, Store.id).offset(skip).limit(limit).all()
        return stores, total

    def get_within_distance(self, max_distance: Decimal) -> List[Store]:
        """Get stores with distance <= max_distance, nearest first"""
        return self.db.query(Store).filter(
            Store.distance <= max_distance
        ).order_by(Store.distance, Store.id).all()

    def count(self) -> int:
        return self.db.query(Store).count()

    # ============================================================================
    # COMPARISON ENGINE READS
    # ============================================================================

    async def list_within_distance(self, max_distance: Decimal) -> List[StoreRecord]:
        """Candidate stores for a comparison, read in a worker thread"""
        def lookup(session: Session) -> List[StoreRecord]:
            rows = type(self)(session).get_within_distance(max_distance)
            return [store_record_from_row(row) for row in rows]

        try:
            return await run_in_new_session(self.db.get_bind(), lookup)
        except SQLAlchemyError as e:
            logger.error(f"Store lookup failed: {str(e)}", exc_info=True)
            raise RepositoryUnavailable("Store repository is unavailable") from e
