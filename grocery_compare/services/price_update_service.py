"""
Price updates: current price, history and alerts.

Every write of a current price (admin entry or scrape ingestion) goes through
PriceUpdateService so that a history point is appended and price alerts are
evaluated in the same transaction. Delivering alerts (email / push) is the
notifier's job; the default notifier only logs.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from grocery_compare.core.exceptions import InvalidInput, MalformedRecord
from grocery_compare.models.price import Price
from grocery_compare.models.store import Store
from grocery_compare.schemas.price import PriceCreate, PriceRecord, TriggeredAlert
from grocery_compare.services.price_alert_repository import PriceAlertRepository
from grocery_compare.services.price_repository import PriceRepository
from grocery_compare.services.record_mapper import price_record_from_document

logger = logging.getLogger(__name__)


class AlertNotifier(Protocol):
    def notify(self, alert: TriggeredAlert) -> None: ...


class LoggingAlertNotifier:
    """Default notifier: records triggered alerts in the log"""

    def notify(self, alert: TriggeredAlert) -> None:
        channels = [name for name, enabled in (("email", alert.email_alert), ("push", alert.push_alert)) if enabled]
        logger.info(
            f"Price alert {alert.alert_id} for user {alert.user_id}: '{alert.product_name}' at store "
            f"{alert.store_id} is {alert.current_price} (target {alert.target_price}) via {channels or ['none']}"
        )


class PriceUpdateService:
    """Writes current prices, appends history and fires price alerts"""

    def __init__(self, db: Session, notifier: Optional[AlertNotifier] = None):
        self.db = db
        self.prices = PriceRepository(db)
        self.alerts = PriceAlertRepository(db)
        self.notifier = notifier or LoggingAlertNotifier()

    def upsert_price(self, entry: PriceCreate) -> Tuple[Price, bool, List[TriggeredAlert]]:
        """
        Create or update the current price of a product at a store.

        Returns:
            (price row, created, triggered alerts)

        Raises:
            InvalidInput: if the store does not exist
        """
        record = PriceRecord(
            store_id=entry.store_id,
            product_name=entry.product_name,
            price=entry.price,
            is_on_sale=entry.is_on_sale,
        )
        return self._apply(record)

    def import_raw_prices(self, documents: Iterable[Mapping[str, Any]]) -> dict:
        """
        Ingest raw price documents (e.g. from the scraping subsystem).
        Malformed documents and unknown stores are counted as failures; the
        rest are applied one by one.
        """
        created_count = 0
        updated_count = 0
        failed_count = 0
        errors = []

        for index, document in enumerate(documents):
            try:
                record = price_record_from_document(document)
                _, created, _ = self._apply(record)
                if created:
                    created_count += 1
                else:
                    updated_count += 1
            except (MalformedRecord, InvalidInput) as e:
                failed_count += 1
                errors.append(f"Document {index}: {str(e)}")
            except SQLAlchemyError as e:
                self.db.rollback()
                failed_count += 1
                errors.append(f"Document {index}: database error: {str(e)}")

        logger.info(f"Price import: {created_count} created, {updated_count} updated, {failed_count} failed")
        return {
            "success": failed_count == 0,
            "created_count": created_count,
            "updated_count": updated_count,
            "failed_count": failed_count,
            "errors": errors
        }

    def _apply(self, record: PriceRecord) -> Tuple[Price, bool, List[TriggeredAlert]]:
        if not self.db.query(Store).filter(Store.id == record.store_id).first():
            raise InvalidInput(f"Store with ID {record.store_id} not found")

        now = datetime.now(timezone.utc)
        try:
            row, previous, created = self.prices.upsert(record)
            self.prices.add_history(record.store_id, record.product_name, record.price, date=record.updated_at or now)
            triggered = self._evaluate_alerts(record, previous, now)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(row)

        for alert in triggered:
            try:
                self.notifier.notify(alert)
            except Exception as e:
                # Price write already committed; delivery is best effort
                logger.error(f"Failed to deliver price alert {alert.alert_id}: {str(e)}", exc_info=True)

        return row, created, triggered

    def _evaluate_alerts(self, record: PriceRecord, previous: Optional[Decimal], now: datetime) -> List[TriggeredAlert]:
        """
        An alert fires when the price crosses to or below its target: the new
        price is <= target and the previous price (if any) was above it.
        """
        triggered = []
        for alert in self.alerts.find_matching(record.product_name, record.store_id, record.price):
            if previous is not None and previous <= alert.target_price:
                continue
            alert.last_triggered_at = now
            triggered.append(TriggeredAlert(
                alert_id=alert.id,
                user_id=alert.user_id,
                product_name=alert.product_name,
                store_id=record.store_id,
                target_price=alert.target_price,
                current_price=record.price,
                email_alert=alert.email_alert,
                push_alert=alert.push_alert,
            ))
        return triggered
