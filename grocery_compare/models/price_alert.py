"""
PriceAlert model.
"""

from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from grocery_compare.core.database import Base


class PriceAlert(Base):
    """Fires when a product's price drops to or below target_price"""
    __tablename__ = "price_alerts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    product_name = Column(String(255), nullable=False, index=True)
    target_price = Column(Numeric(10, 2), nullable=False)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=True)  # None = any store
    email_alert = Column(Boolean, default=True, nullable=False)
    push_alert = Column(Boolean, default=True, nullable=False)
    last_triggered_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<PriceAlert(id={self.id}, product_name='{self.product_name}', target_price={self.target_price})>"
