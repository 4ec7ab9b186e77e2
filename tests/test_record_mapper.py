"""
Tests for mapping raw price documents and ORM rows to typed records.
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from grocery_compare.core.exceptions import MalformedRecord
from grocery_compare.models.store import Store
from grocery_compare.services.record_mapper import (
    price_record_from_document,
    store_record_from_row,
)


@pytest.mark.unit
class TestPriceDocuments:

    def test_snake_case_document(self):
        record = price_record_from_document({
            "store_id": 3,
            "product_name": "Organic Milk (1 gallon)",
            "price": "3.99",
            "is_on_sale": True,
        })

        assert record.store_id == 3
        assert record.product_name == "Organic Milk (1 gallon)"
        assert record.price == Decimal("3.99")
        assert record.is_on_sale is True
        assert record.updated_at is None

    def test_camel_case_document(self):
        record = price_record_from_document({
            "storeId": "4",
            "productName": " Bananas (lb) ",
            "price": 0.59,
            "isOnSale": False,
            "updatedAt": "2024-03-01T10:00:00Z",
        })

        assert record.store_id == 4
        assert record.product_name == "Bananas (lb)"
        assert record.price == Decimal("0.59")
        assert record.updated_at == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)

    def test_sale_flag_defaults_to_false(self):
        record = price_record_from_document({"store_id": 1, "name": "Pasta (16oz)", "price": "1.29"})

        assert record.is_on_sale is False

    def test_trailing_zeros_accepted(self):
        record = price_record_from_document({"store_id": 1, "product_name": "milk", "price": "2.500"})

        assert record.price == Decimal("2.5")

    def test_same_value_under_two_spellings_accepted(self):
        record = price_record_from_document({"store_id": 1, "storeId": 1, "product_name": "milk", "price": "1"})

        assert record.store_id == 1

    @pytest.mark.parametrize("document", [
        {"product_name": "milk", "price": "1.00"},
        {"store_id": 1, "price": "1.00"},
        {"store_id": 1, "product_name": "milk"},
        {"store_id": 1, "storeId": 2, "product_name": "milk", "price": "1.00"},
        {"store_id": "one", "product_name": "milk", "price": "1.00"},
        {"store_id": True, "product_name": "milk", "price": "1.00"},
        {"store_id": 1, "product_name": "", "price": "1.00"},
        {"store_id": 1, "product_name": 12, "price": "1.00"},
        {"store_id": 1, "product_name": "milk", "price": "cheap"},
        {"store_id": 1, "product_name": "milk", "price": "-0.01"},
        {"store_id": 1, "product_name": "milk", "price": "3.999"},
        {"store_id": 1, "product_name": "milk", "price": None},
        {"store_id": 1, "product_name": "milk", "price": "1.00", "isOnSale": "yes"},
        {"store_id": 1, "product_name": "milk", "price": "1.00", "updatedAt": "last tuesday"},
    ])
    def test_malformed_documents_rejected(self, document):
        with pytest.raises(MalformedRecord) as exc_info:
            price_record_from_document(document)
        assert exc_info.value.record is document

    def test_non_mapping_rejected(self):
        with pytest.raises(MalformedRecord):
            price_record_from_document(["store_id", 1])


@pytest.mark.unit
class TestStoreRows:

    def test_store_row_mapped(self):
        row = Store(id=1, name="FreshMarket", chain="FreshMarket", distance=Decimal("0.8"), city="San Francisco")

        record = store_record_from_row(row)

        assert record.id == 1
        assert record.distance == Decimal("0.8")
        assert record.city == "San Francisco"

    def test_store_without_distance_rejected(self):
        row = Store(id=2, name="Nowhere", chain="Nowhere", distance=None)

        with pytest.raises(MalformedRecord):
            store_record_from_row(row)
