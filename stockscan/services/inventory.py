# -*- coding: utf-8 -*-
"""
Product persistence and stock logic. Routes call these; they raise the errors
in ``stockscan.exceptions`` and never touch HTTP.

Reads are pure except where a caller explicitly asks for ``touch_product``.
"""

import logging
from datetime import datetime

from sqlalchemy import distinct, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stockscan.exceptions import BarcodeImmutable, ProductAlreadyExists, ProductNotFound
from stockscan.models.product import Product
from stockscan.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


def get_product_by_barcode(db: Session, barcode: str):
    return db.query(Product).filter(Product.barcode == barcode).first()


def _get_or_404(db: Session, barcode: str) -> Product:
    product = get_product_by_barcode(db, barcode)
    if product is None:
        logger.warning(f"Product {barcode} not found")
        raise ProductNotFound()
    return product


def touch_product(db: Session, product: Product) -> Product:
    """Marks the product as just scanned and saves it."""
    product.last_scanned = datetime.utcnow()
    db.commit()
    db.refresh(product)
    return product


def create_product(db: Session, data: ProductCreate) -> Product:
    if get_product_by_barcode(db, data.barcode) is not None:
        logger.warning(f"Product {data.barcode} already exists")
        raise ProductAlreadyExists()

    product = Product(**data.model_dump(), last_scanned=datetime.utcnow())
    db.add(product)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with another create of the same barcode
        db.rollback()
        raise ProductAlreadyExists()
    db.refresh(product)
    logger.info(f"Created product {product.barcode} ({product.name})")
    return product


def list_products(db: Session, category=None, low_stock=False):
    query = db.query(Product)
    if category:
        query = query.filter(Product.category == category)
    if low_stock:
        query = query.filter(Product.stock <= Product.min_stock)
    return query.order_by(Product.updated_at.desc(), Product.id.desc()).all()


def list_categories(db: Session):
    rows = db.query(distinct(Product.category)).order_by(Product.category).all()
    return [row[0] for row in rows]


def apply_stock_action(current: int, action: str, quantity: int) -> int:
    """Returns the new stock level. Decreases stop at zero."""
    if action == "increase":
        return current + quantity
    if action == "decrease":
        return max(0, current - quantity)
    if action == "set":
        return quantity
    raise ValueError(f"Unknown stock action: {action}")


def adjust_stock(db: Session, barcode: str, action: str, quantity: int = 1) -> Product:
    product = _get_or_404(db, barcode)
    previous = product.stock
    product.stock = apply_stock_action(previous, action, quantity)
    product.last_scanned = datetime.utcnow()
    db.commit()
    db.refresh(product)
    logger.info(f"Stock {action} {quantity} on {barcode}: {previous} -> {product.stock}")
    return product


def update_product(db: Session, barcode: str, data: ProductUpdate) -> Product:
    product = _get_or_404(db, barcode)

    update_data = data.model_dump(exclude_unset=True)
    new_barcode = update_data.pop("barcode", barcode)
    if new_barcode != barcode:
        raise BarcodeImmutable()

    for key, value in update_data.items():
        setattr(product, key, value)
    product.last_scanned = datetime.utcnow()
    db.commit()
    db.refresh(product)
    logger.info(f"Updated product {barcode}: {sorted(update_data)}")
    return product


def delete_product(db: Session, barcode: str) -> None:
    product = _get_or_404(db, barcode)
    db.delete(product)
    db.commit()
    logger.info(f"Deleted product {barcode}")


def get_inventory_stats(db: Session) -> dict:
    total_products = db.query(func.count(Product.id)).scalar()
    total_value = db.query(func.sum(Product.cost * Product.stock)).scalar()
    low_stock_count = (
        db.query(func.count(Product.id))
        .filter(Product.stock <= Product.min_stock)
        .scalar()
    )
    categories_count = db.query(func.count(distinct(Product.category))).scalar()

    return {
        "total_products": total_products or 0,
        "total_value": float(total_value or 0),
        "low_stock_count": low_stock_count or 0,
        "categories_count": categories_count or 0,
    }
