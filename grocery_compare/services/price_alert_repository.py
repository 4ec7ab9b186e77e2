"""
Repository layer for PriceAlert operations.
"""

from decimal import Decimal
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from grocery_compare.core.exceptions import InvalidInput
from grocery_compare.models.price_alert import PriceAlert
from grocery_compare.models.store import Store
from grocery_compare.schemas.price_alert import PriceAlertCreate


class PriceAlertRepository:
    """Repository for PriceAlert operations, bound to one session"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: int, alert: PriceAlertCreate) -> PriceAlert:
        """Create a price alert for a user"""
        if alert.store_id is not None:
            if not self.db.query(Store).filter(Store.id == alert.store_id).first():
                raise InvalidInput(f"Store with ID {alert.store_id} not found")

        db_alert = PriceAlert(user_id=user_id, **alert.model_dump())
        db_alert.product_name = db_alert.product_name.strip()
        self.db.add(db_alert)
        self.db.commit()
        self.db.refresh(db_alert)
        return db_alert

    def get_by_id(self, alert_id: int) -> Optional[PriceAlert]:
        return self.db.query(PriceAlert).filter(PriceAlert.id == alert_id).first()

    def get_for_user(self, user_id: int) -> List[PriceAlert]:
        """All alerts of a user, newest first"""
        return self.db.query(PriceAlert).filter(
            PriceAlert.user_id == user_id
        ).order_by(PriceAlert.id.desc()).all()

    def delete(self, alert_id: int, user_id: int) -> bool:
        """Delete a user's alert"""
        db_alert = self.db.query(PriceAlert).filter(
            PriceAlert.id == alert_id,
            PriceAlert.user_id == user_id
        ).first()
        if not db_alert:
            return False

        self.db.delete(db_alert)
        self.db.commit()
        return True

    def find_matching(self, product_name: str, store_id: int, price: Decimal) -> List[PriceAlert]:
        """Alerts on this product (for this store or any store) whose target is >= price"""
        return self.db.query(PriceAlert).filter(
            PriceAlert.product_name == product_name,
            PriceAlert.target_price >= price,
            or_(PriceAlert.store_id.is_(None), PriceAlert.store_id == store_id)
        ).order_by(PriceAlert.id).all()
