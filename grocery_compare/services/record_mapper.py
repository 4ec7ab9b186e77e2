"""
Mapping from raw storage shapes to typed records.

This is the only place that knows how rows and raw documents look. Anything
that cannot be mapped raises MalformedRecord instead of being defaulted.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Tuple

from pydantic import ValidationError

from grocery_compare.core.exceptions import MalformedRecord
from grocery_compare.models.price import Price
from grocery_compare.models.store import Store
from grocery_compare.schemas.price import PriceRecord
from grocery_compare.schemas.store import StoreRecord


# Accepted spellings per field, as written by the scraping subsystem and older imports
PRICE_DOCUMENT_FIELDS = {
    "store_id": ("store_id", "storeId"),
    "product_name": ("product_name", "productName", "name"),
    "price": ("price",),
    "is_on_sale": ("is_on_sale", "isOnSale", "on_sale"),
    "updated_at": ("updated_at", "updatedAt"),
}
REQUIRED_PRICE_FIELDS = ("store_id", "product_name", "price")
CENTS = Decimal("0.01")


def price_record_from_row(row: Price) -> PriceRecord:
    """Map a Price ORM row to a PriceRecord"""
    try:
        return PriceRecord(
            store_id=row.store_id,
            product_name=row.product_name,
            price=row.price,
            is_on_sale=bool(row.is_on_sale),
            updated_at=row.updated_at,
        )
    except ValidationError as e:
        raise MalformedRecord(f"Invalid price row {row!r}: {e}", record=row) from e


def store_record_from_row(row: Store) -> StoreRecord:
    """Map a Store ORM row to a StoreRecord"""
    if row.distance is None:
        raise MalformedRecord(f"Store {row.id} has no distance", record=row)
    try:
        return StoreRecord(
            id=row.id,
            name=row.name,
            chain=row.chain,
            distance=row.distance,
            address=row.address,
            city=row.city,
            state=row.state,
            zip_code=row.zip_code,
        )
    except ValidationError as e:
        raise MalformedRecord(f"Invalid store row {row!r}: {e}", record=row) from e


def _pick(document: Mapping[str, Any], field: str) -> Tuple[bool, Any]:
    """Return (present, value) for a field, rejecting conflicting spellings"""
    found = [(key, document[key]) for key in PRICE_DOCUMENT_FIELDS[field] if key in document]
    if not found:
        return False, None
    values = {repr(value) for _, value in found}
    if len(values) > 1:
        keys = ", ".join(key for key, _ in found)
        raise MalformedRecord(f"Conflicting values for {field} ({keys})", record=document)
    return True, found[0][1]


def _parse_store_id(value: Any, document: Mapping[str, Any]) -> int:
    if isinstance(value, bool):
        raise MalformedRecord(f"store_id must be an integer, got {value!r}", record=document)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise MalformedRecord(f"store_id must be an integer, got {value!r}", record=document)


def _parse_price(value: Any, document: Mapping[str, Any]) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise MalformedRecord(f"price must be numeric, got {value!r}", record=document)
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise MalformedRecord(f"price must be numeric, got {value!r}", record=document) from e
    if not price.is_finite() or price < 0:
        raise MalformedRecord(f"price must be a non-negative number, got {value!r}", record=document)
    if price.normalize().as_tuple().exponent < CENTS.as_tuple().exponent:
        raise MalformedRecord(f"price has more than two decimal places: {value!r}", record=document)
    return price


def _parse_updated_at(value: Any, document: Mapping[str, Any]) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise MalformedRecord(f"updated_at is not ISO 8601: {value!r}", record=document) from e
    raise MalformedRecord(f"updated_at has unsupported type {type(value).__name__}", record=document)


def price_record_from_document(document: Mapping[str, Any]) -> PriceRecord:
    """
    Map a raw price document (e.g. a scraped or imported record) to a PriceRecord.

    Recognised spellings are listed in PRICE_DOCUMENT_FIELDS. Missing required
    fields, conflicting spellings and unparseable values raise MalformedRecord.
    is_on_sale defaults to False and updated_at to None when absent.
    """
    if not isinstance(document, Mapping):
        raise MalformedRecord(f"Price document must be a mapping, got {type(document).__name__}", record=document)

    values = {}
    for field in PRICE_DOCUMENT_FIELDS:
        present, value = _pick(document, field)
        if present:
            values[field] = value

    missing = [field for field in REQUIRED_PRICE_FIELDS if field not in values]
    if missing:
        raise MalformedRecord(f"Price document is missing {', '.join(missing)}", record=document)

    product_name = values["product_name"]
    if not isinstance(product_name, str) or not product_name.strip():
        raise MalformedRecord(f"product_name must be a non-empty string, got {product_name!r}", record=document)

    is_on_sale = values.get("is_on_sale", False)
    if not isinstance(is_on_sale, bool):
        raise MalformedRecord(f"is_on_sale must be a boolean, got {is_on_sale!r}", record=document)

    return PriceRecord(
        store_id=_parse_store_id(values["store_id"], document),
        product_name=product_name.strip(),
        price=_parse_price(values["price"], document),
        is_on_sale=is_on_sale,
        updated_at=_parse_updated_at(values.get("updated_at"), document),
    )
