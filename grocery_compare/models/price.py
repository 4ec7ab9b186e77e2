"""
Price and PriceHistory models.
Current price per (store, product name) plus an append-only history.
"""

from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from grocery_compare.core.database import Base


class Price(Base):
    """Current price of a product (by name) at a store"""
    __tablename__ = "prices"
    __table_args__ = (
        UniqueConstraint("store_id", "product_name", name="uq_price_store_product"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    product_name = Column(String(255), nullable=False, index=True)  # Join key, exact match
    price = Column(Numeric(10, 2), nullable=False)
    is_on_sale = Column(Boolean, default=False, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    store = relationship("Store", back_populates="prices")

    def __repr__(self):
        return f"<Price(store_id={self.store_id}, product_name='{self.product_name}', price={self.price})>"


class PriceHistory(Base):
    """Historical price points, append-only"""
    __tablename__ = "price_history"
    __table_args__ = (
        Index("idx_price_history_store_product", "store_id", "product_name"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    product_name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    # Relationships
    store = relationship("Store", back_populates="price_history")

    def __repr__(self):
        return f"<PriceHistory(store_id={self.store_id}, product_name='{self.product_name}', price={self.price}, date={self.date})>"
