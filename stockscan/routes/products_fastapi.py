# -*- coding: utf-8 -*-
"""
FastAPI routes for products, categories and inventory statistics.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from stockscan.database import get_db
from stockscan.exceptions import BarcodeImmutable, ProductAlreadyExists, ProductNotFound
from stockscan.schemas.product import (
    DeleteResult,
    InventoryStats,
    ProductCreate,
    ProductLookup,
    ProductRead,
    ProductResult,
    ProductUpdate,
    StockUpdate,
)
from stockscan.services import inventory

router = APIRouter(
    tags=["Products"],
    responses={404: {"description": "Product not found"}},
)


def _not_found():
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")


@router.get(
    "/products/barcode/{barcode:path}",
    response_model=ProductLookup,
    response_model_exclude_none=True,
)
def lookup_product(barcode: str, db: Session = Depends(get_db)):
    """
    Looks up a product by barcode. A hit counts as a scan and updates lastScanned.
    """
    product = inventory.get_product_by_barcode(db, barcode)
    if product is None:
        return {"exists": False, "barcode": barcode}

    product = inventory.touch_product(db, product)
    return {"exists": True, "product": product}


@router.post("/products", response_model=ProductResult, status_code=status.HTTP_201_CREATED)
def create_product(product: ProductCreate, db: Session = Depends(get_db)):
    try:
        db_product = inventory.create_product(db, product)
    except ProductAlreadyExists as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "product": db_product}


@router.patch("/products/{barcode:path}/stock", response_model=ProductResult)
def update_stock(barcode: str, stock_update: StockUpdate, db: Session = Depends(get_db)):
    """
    Increases, decreases (never below zero) or sets the stock of a product.
    """
    try:
        product = inventory.adjust_stock(db, barcode, stock_update.action, stock_update.quantity)
    except ProductNotFound:
        raise _not_found()
    return {"success": True, "product": product}


@router.put("/products/{barcode:path}", response_model=ProductResult)
def update_product(barcode: str, product_update: ProductUpdate, db: Session = Depends(get_db)):
    try:
        product = inventory.update_product(db, barcode, product_update)
    except ProductNotFound:
        raise _not_found()
    except BarcodeImmutable as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "product": product}


@router.get("/products", response_model=List[ProductRead])
def read_products(
    category: Optional[str] = None,
    low_stock: bool = Query(False, alias="lowStock"),
    db: Session = Depends(get_db),
):
    """
    Lists products, most recently updated first, optionally filtered by
    category and/or to those at or below their minimum stock.
    """
    return inventory.list_products(db, category=category, low_stock=low_stock)


@router.get("/categories", response_model=List[str])
def read_categories(db: Session = Depends(get_db)):
    return inventory.list_categories(db)


@router.delete("/products/{barcode:path}", response_model=DeleteResult)
def delete_product(barcode: str, db: Session = Depends(get_db)):
    try:
        inventory.delete_product(db, barcode)
    except ProductNotFound:
        raise _not_found()
    return {"success": True, "message": "Product deleted"}


@router.get("/stats", response_model=InventoryStats)
def read_stats(db: Session = Depends(get_db)):
    return inventory.get_inventory_stats(db)
