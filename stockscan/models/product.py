# -*- coding: utf-8 -*-
"""
SQLAlchemy model for the Product entity.
"""
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Float, Integer, String

from stockscan.database import Base

DEFAULT_MIN_STOCK = 10


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    barcode = Column(String(128), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=False)
    category = Column(String(100), index=True, nullable=False)
    cost = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer, nullable=False, default=DEFAULT_MIN_STOCK)
    last_scanned = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("cost >= 0", name="ck_products_cost_positive"),
        CheckConstraint("stock >= 0", name="ck_products_stock_positive"),
    )

    def __repr__(self):
        return f"<Product {self.barcode} {self.name!r} stock={self.stock}>"
