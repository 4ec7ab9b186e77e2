"""
Shopping-list price comparison engine.

Given list items and a maximum travel distance, prices the list at every store
within that distance, computes per-store savings and ranks stores by total.

Flow:
1. Validate items and max distance (InvalidInput, no coercion)
2. Fetch candidate stores (distance <= max distance)
3. For the "average" policy, compute the mean price of each product over the
   candidate stores that carry it
4. Price every store concurrently; each store is independent and read-only
   against shared price data, and runs under its own timeout
5. Sort by (total_price, store_id) after all stores are in

Stores whose lookups fail or time out are dropped and reported in the
diagnostics; failure of the whole repository raises RepositoryUnavailable.
Store and price reads are not taken from one snapshot; prices move slowly
compared to a request, so eventual consistency between the two is accepted.
"""

import asyncio
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Union

from pydantic import ValidationError

from grocery_compare.core.exceptions import GroceryCompareError, InvalidInput, RepositoryUnavailable
from grocery_compare.schemas.comparison import (
    ShoppingListItem,
    ItemPriceDetail,
    StorePriceBreakdown,
    ComparisonDiagnostics,
    ComparisonResult,
)
from grocery_compare.schemas.price import PriceRecord
from grocery_compare.schemas.store import StoreRecord

logger = logging.getLogger(__name__)

SAVINGS_POLICY_AVERAGE = "average"
SAVINGS_POLICY_SALE = "sale"
SAVINGS_POLICIES = (SAVINGS_POLICY_AVERAGE, SAVINGS_POLICY_SALE)

DEFAULT_SALE_SAVINGS_RATE = Decimal("0.10")
CENTS = Decimal("0.01")
ZERO = Decimal("0")


class StoreSource(Protocol):
    async def list_within_distance(self, max_distance: Decimal) -> List[StoreRecord]: ...


class PriceSource(Protocol):
    async def get_price(self, store_id: int, product_name: str) -> Optional[PriceRecord]: ...

    async def list_by_product_name(self, product_name: str) -> List[PriceRecord]: ...


def validate_max_distance(max_distance: Any) -> Decimal:
    """Parse max_distance as a finite, non-negative Decimal"""
    if max_distance is None:
        raise InvalidInput("max_distance is required")
    if isinstance(max_distance, bool):
        raise InvalidInput("max_distance must be a number")
    try:
        distance = Decimal(str(max_distance).strip())
    except InvalidOperation:
        raise InvalidInput(f"max_distance must be a number, got {max_distance!r}")
    if not distance.is_finite():
        raise InvalidInput("max_distance must be finite")
    if distance < 0:
        raise InvalidInput("max_distance must not be negative")
    return distance


def validate_items(items: Any) -> List[ShoppingListItem]:
    """Validate list items; a single bad item rejects the whole call"""
    if items is None or isinstance(items, (str, bytes, dict)):
        raise InvalidInput("list items must be a list")
    try:
        items = list(items)
    except TypeError:
        raise InvalidInput("list items must be a list")

    validated = []
    for index, item in enumerate(items):
        if isinstance(item, ShoppingListItem):
            validated.append(item)
            continue
        try:
            if isinstance(item, dict):
                validated.append(ShoppingListItem.model_validate(item))
            else:
                validated.append(ShoppingListItem.model_validate(item, from_attributes=True))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(x) for x in error['loc'])}: {error['msg']}" for error in e.errors()
            )
            raise InvalidInput(f"Invalid list item at index {index}: {problems}") from e
    return validated


class ComparisonEngine:
    """
    Compares a shopping list across nearby stores.

    Repositories are injected so in-memory fakes can stand in for storage.
    """

    def __init__(
        self,
        store_repository: StoreSource,
        price_repository: PriceSource,
        savings_policy: str = SAVINGS_POLICY_AVERAGE,
        store_timeout: Optional[float] = None,
        sale_savings_rate: Decimal = DEFAULT_SALE_SAVINGS_RATE,
    ):
        if savings_policy not in SAVINGS_POLICIES:
            raise ValueError(f"Unknown savings policy '{savings_policy}', expected one of {SAVINGS_POLICIES}")
        self.store_repository = store_repository
        self.price_repository = price_repository
        self.savings_policy = savings_policy
        self.store_timeout = store_timeout
        self.sale_savings_rate = Decimal(str(sale_savings_rate))

    async def compare(self, items: Iterable[Union[ShoppingListItem, Dict[str, Any]]], max_distance: Any) -> ComparisonResult:
        return await self.compare_shopping_list(items, max_distance)

    async def compare_shopping_list(
        self,
        items: Iterable[Union[ShoppingListItem, Dict[str, Any]]],
        max_distance: Any,
    ) -> ComparisonResult:
        """
        Price a list at every store within max_distance and rank the stores.

        An empty item list is valid: every candidate store comes back with a
        zero total and the diagnostics status is "no_items".

        Raises:
            InvalidInput: malformed items or max distance
            RepositoryUnavailable: the store or price repository failed as a whole
        """
        list_items = validate_items(items)
        distance = validate_max_distance(max_distance)

        stores = await self._fetch_candidate_stores(distance)
        diagnostics = ComparisonDiagnostics(
            candidate_stores=len(stores),
            savings_policy=self.savings_policy,
        )

        if not stores:
            logger.info(f"No stores within {distance} miles")
            diagnostics.status = "no_stores_found"
            return ComparisonResult(breakdowns=[], diagnostics=diagnostics)

        if not list_items:
            diagnostics.status = "no_items"

        logger.info(f"Comparing {len(list_items)} item(s) across {len(stores)} store(s) within {distance} miles")

        averages: Dict[str, Decimal] = {}
        if self.savings_policy == SAVINGS_POLICY_AVERAGE and list_items:
            averages = await self._average_prices(list_items, stores)

        outcomes = await asyncio.gather(
            *(self._price_store_with_timeout(store, list_items, averages) for store in stores),
            return_exceptions=True,
        )

        breakdowns = []
        failures = []
        for store, outcome in zip(stores, outcomes):
            if isinstance(outcome, BaseException):
                failures.append((store, outcome))
                continue
            breakdowns.append(outcome)

        if failures:
            diagnostics.dropped_stores = sorted(store.id for store, _ in failures)
            if not breakdowns:
                logger.error(f"Pricing failed for all {len(stores)} candidate store(s)")
                raise RepositoryUnavailable("Price lookups failed for every candidate store") from failures[0][1]

        breakdowns.sort(key=lambda b: (b.total_price, b.store_id))
        return ComparisonResult(breakdowns=breakdowns, diagnostics=diagnostics)

    async def _fetch_candidate_stores(self, distance: Decimal) -> List[StoreRecord]:
        try:
            stores = await self.store_repository.list_within_distance(distance)
        except GroceryCompareError:
            raise
        except Exception as e:
            logger.error(f"Store repository failed: {str(e)}", exc_info=True)
            raise RepositoryUnavailable("Store repository is unavailable") from e
        # Repositories are expected to filter; re-check so the bound always holds
        return [store for store in stores if store.distance <= distance]

    async def _average_prices(self, items: Sequence[ShoppingListItem], stores: Sequence[StoreRecord]) -> Dict[str, Decimal]:
        """Mean price per product name over the candidate stores that carry it"""
        store_ids = {store.id for store in stores}
        names = list(dict.fromkeys(item.product_name for item in items))

        try:
            price_lists = await asyncio.gather(
                *(self.price_repository.list_by_product_name(name) for name in names)
            )
        except GroceryCompareError:
            raise
        except Exception as e:
            logger.error(f"Price repository failed: {str(e)}", exc_info=True)
            raise RepositoryUnavailable("Price repository is unavailable") from e

        averages = {}
        for name, records in zip(names, price_lists):
            prices = [record.price for record in records if record.store_id in store_ids]
            if prices:
                averages[name] = sum(prices, ZERO) / len(prices)
        return averages

    async def _price_store_with_timeout(
        self,
        store: StoreRecord,
        items: Sequence[ShoppingListItem],
        averages: Dict[str, Decimal],
    ) -> StorePriceBreakdown:
        try:
            if self.store_timeout is None:
                return await self._price_store(store, items, averages)
            return await asyncio.wait_for(self._price_store(store, items, averages), timeout=self.store_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Dropping store {store.id} ({store.name}): pricing timed out after {self.store_timeout}s")
            raise
        except Exception as e:
            logger.warning(f"Dropping store {store.id} ({store.name}): {type(e).__name__}: {str(e)}")
            raise

    async def _price_store(
        self,
        store: StoreRecord,
        items: Sequence[ShoppingListItem],
        averages: Dict[str, Decimal],
    ) -> StorePriceBreakdown:
        records = await asyncio.gather(
            *(self.price_repository.get_price(store.id, item.product_name) for item in items),
            return_exceptions=True,
        )
        # Every lookup has settled; the first failure drops the store
        for record in records:
            if isinstance(record, BaseException):
                raise record

        total_price = ZERO
        savings = ZERO
        details = []
        for item, record in zip(items, records):
            if record is None:
                details.append(ItemPriceDetail(
                    product_name=item.product_name,
                    quantity=item.quantity,
                    price=ZERO,
                    total=ZERO,
                    is_on_sale=False,
                    not_available=True,
                ))
                continue

            line_total = record.price * item.quantity
            total_price += line_total
            savings += self._item_savings(record, item, line_total, averages)
            details.append(ItemPriceDetail(
                product_name=item.product_name,
                quantity=item.quantity,
                price=record.price,
                total=line_total,
                is_on_sale=record.is_on_sale,
            ))

        return StorePriceBreakdown(
            store_id=store.id,
            name=store.name,
            chain=store.chain,
            distance=store.distance,
            total_price=total_price,
            savings=savings.quantize(CENTS, rounding=ROUND_HALF_UP),
            items_total=len(items),
            items_available=sum(1 for detail in details if not detail.not_available),
            price_details=details,
        )

    def _item_savings(
        self,
        record: PriceRecord,
        item: ShoppingListItem,
        line_total: Decimal,
        averages: Dict[str, Decimal],
    ) -> Decimal:
        if self.savings_policy == SAVINGS_POLICY_SALE:
            return line_total * self.sale_savings_rate if record.is_on_sale else ZERO

        average = averages.get(item.product_name)
        if average is None:
            return ZERO
        return max(ZERO, average - record.price) * item.quantity
