"""
Sample stores and prices for demo deployments.
Loaded on startup when SEED_SAMPLE_DATA is enabled and the stores table is empty.
"""

import logging
from decimal import Decimal
from sqlalchemy.orm import Session

from grocery_compare.models.store import Store
from grocery_compare.schemas.price import PriceCreate
from grocery_compare.services.price_update_service import PriceUpdateService

logger = logging.getLogger(__name__)

SAMPLE_STORES = [
    {"name": "SaveMart Downtown", "chain": "SaveMart", "address": "123 Main St",
     "city": "San Francisco", "state": "CA", "zip_code": "94103", "distance": Decimal("2.3")},
    {"name": "ValuMart 4th & Howard", "chain": "ValuMart", "address": "456 Howard St",
     "city": "San Francisco", "state": "CA", "zip_code": "94105", "distance": Decimal("1.1")},
    {"name": "FreshMarket 2nd & Folsom", "chain": "FreshMarket", "address": "789 Folsom St",
     "city": "San Francisco", "state": "CA", "zip_code": "94107", "distance": Decimal("0.8")},
    {"name": "SuperShop SOMA", "chain": "SuperShop", "address": "321 Brannan St",
     "city": "San Francisco", "state": "CA", "zip_code": "94107", "distance": Decimal("4.2")},
    {"name": "GroceryMaster Union Square", "chain": "GroceryMaster", "address": "567 Powell St",
     "city": "San Francisco", "state": "CA", "zip_code": "94108", "distance": Decimal("5.5")},
    {"name": "BulkBuy Warehouse", "chain": "BulkBuy", "address": "987 Industrial Blvd",
     "city": "South San Francisco", "state": "CA", "zip_code": "94080", "distance": Decimal("12.7")},
]

# (product name, [price at each sample store, in SAMPLE_STORES order], on-sale store indexes)
SAMPLE_PRICES = [
    ("Organic Milk (1 gallon)", ["3.99", "4.29", "4.49", "3.79", "4.19", "3.49"], {0, 3}),
    ("Eggs (Dozen, Large)", ["4.49", "3.99", "4.79", "4.29", "4.59", "3.89"], {0}),
    ("Whole Wheat Bread", ["2.99", "3.29", "3.49", "2.79", "3.19", "2.49"], set()),
    ("Bananas (lb)", ["0.59", "0.69", "0.79", "0.55", "0.65", "0.49"], {0, 5}),
    ("Ground Beef (lb)", ["5.99", "6.49", "6.99", "5.79", "6.29", "5.49"], {2}),
    ("Chicken Breast (lb)", ["3.99", "4.49", "4.99", "4.29", "4.79", "3.79"], {0}),
    ("Apples (lb)", ["1.49", "1.29", "1.69", "1.39", "1.59", "1.19"], {1}),
    ("Pasta (16oz)", ["1.29", "1.19", "1.49", "0.99", "1.39", "0.89"], {3}),
]


def seed_sample_data(db: Session) -> bool:
    """Insert sample stores and prices if no stores exist. Returns True if seeded."""
    if db.query(Store).count() > 0:
        return False

    stores = []
    for data in SAMPLE_STORES:
        store = Store(**data)
        db.add(store)
        stores.append(store)
    db.commit()

    service = PriceUpdateService(db)
    for product_name, prices, on_sale in SAMPLE_PRICES:
        for index, (store, price) in enumerate(zip(stores, prices)):
            service.upsert_price(PriceCreate(
                store_id=store.id,
                product_name=product_name,
                price=Decimal(price),
                is_on_sale=index in on_sale,
            ))

    logger.info(f"Seeded {len(stores)} stores and {len(SAMPLE_PRICES) * len(stores)} prices")
    return True
