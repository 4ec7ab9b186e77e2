"""
Shared pytest fixtures: in-memory repositories for the comparison engine,
a throwaway SQLite session and a TestClient bound to it.
"""
import os
import asyncio
from decimal import Decimal
from typing import Dict, Generator, List, Optional, Tuple

# Keep the app off the on-disk database during tests
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from grocery_compare.core.database import Base, get_db
from grocery_compare.models.store import Store
from grocery_compare.schemas.price import PriceRecord
from grocery_compare.schemas.store import StoreRecord
import grocery_compare.models  # noqa: F401


# ============================================================================
# In-memory repositories
# ============================================================================

class InMemoryStoreRepository:
    """StoreSource over a plain list; optionally fails every call"""

    def __init__(self, stores: List[StoreRecord], error: Optional[Exception] = None):
        self.stores = list(stores)
        self.error = error
        self.calls = 0

    async def list_within_distance(self, max_distance: Decimal) -> List[StoreRecord]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return [store for store in self.stores if store.distance <= max_distance]


class UnfilteredStoreRepository(InMemoryStoreRepository):
    """Returns every store regardless of distance"""

    async def list_within_distance(self, max_distance: Decimal) -> List[StoreRecord]:
        self.calls += 1
        return list(self.stores)


class InMemoryPriceRepository:
    """
    PriceSource keyed by (store_id, product_name).

    failing_stores: store ids whose lookups raise
    slow_stores: store id -> seconds to sleep before answering
    """

    def __init__(
        self,
        records: List[PriceRecord],
        failing_stores: Optional[set] = None,
        slow_stores: Optional[Dict[int, float]] = None,
    ):
        self.records: Dict[Tuple[int, str], PriceRecord] = {
            (record.store_id, record.product_name): record for record in records
        }
        self.failing_stores = failing_stores or set()
        self.slow_stores = slow_stores or {}

    async def get_price(self, store_id: int, product_name: str) -> Optional[PriceRecord]:
        if store_id in self.slow_stores:
            await asyncio.sleep(self.slow_stores[store_id])
        if store_id in self.failing_stores:
            raise ConnectionError(f"price backend for store {store_id} is down")
        return self.records.get((store_id, product_name))

    async def list_by_product_name(self, product_name: str) -> List[PriceRecord]:
        return [record for (_, name), record in self.records.items() if name == product_name]


def make_store(store_id: int, distance: str, name: Optional[str] = None, chain: str = "TestChain") -> StoreRecord:
    return StoreRecord(id=store_id, name=name or f"Store {store_id}", chain=chain, distance=Decimal(distance))


def make_price(store_id: int, product_name: str, price: str, is_on_sale: bool = False) -> PriceRecord:
    return PriceRecord(store_id=store_id, product_name=product_name, price=Decimal(price), is_on_sale=is_on_sale)


@pytest.fixture
def two_store_repositories():
    """Store X (5 mi, milk 3.99) and store Y (8 mi, milk 4.29)"""
    stores = InMemoryStoreRepository([make_store(1, "5", "Store X"), make_store(2, "8", "Store Y")])
    prices = InMemoryPriceRepository([make_price(1, "milk", "3.99"), make_price(2, "milk", "4.29")])
    return stores, prices


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
def test_db(tmp_path) -> Generator[Session, None, None]:
    """
    Create a throwaway SQLite database for testing.

    File-backed so that comparison reads, which open their own sessions in
    worker threads, see the same data on separate connections.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def stores_db(test_db):
    """Database with three stores at 1.5, 4.0 and 12.0 miles"""
    for name, chain, distance in [
        ("FreshMarket", "FreshMarket", Decimal("1.5")),
        ("SaveMart", "SaveMart", Decimal("4.0")),
        ("BulkBuy", "BulkBuy", Decimal("12.0")),
    ]:
        test_db.add(Store(name=name, chain=chain, distance=distance))
    test_db.commit()
    return test_db


@pytest.fixture
def client(test_db) -> Generator[TestClient, None, None]:
    """TestClient whose requests share the test session"""
    from main import app

    def _get_db():
        yield test_db

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        del app.dependency_overrides[get_db]
