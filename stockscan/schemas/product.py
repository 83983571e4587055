# -*- coding: utf-8 -*-
"""
Pydantic schemas for the Product entity.

Fields are snake_case in Python and camelCase on the wire (``minStock``,
``lastScanned``...). Request bodies accept either spelling.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from stockscan.models.product import DEFAULT_MIN_STOCK

StockAction = Literal["increase", "decrease", "set"]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ProductBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    cost: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    min_stock: int = Field(DEFAULT_MIN_STOCK, ge=0)

    @field_validator("stock", "min_stock", mode="before")
    @classmethod
    def none_to_default(cls, v, info):
        """A null stock or minStock falls back to the default, like an omitted one."""
        if v is None:
            return {"stock": 0, "min_stock": DEFAULT_MIN_STOCK}[info.field_name]
        return v


class ProductCreate(ProductBase):
    barcode: str = Field(..., min_length=1, max_length=128)


class ProductUpdate(CamelModel):
    # Only the fields sent are applied; barcode is accepted so an unchanged
    # value round-trips, but it can never be changed.
    barcode: Optional[str] = Field(None, min_length=1, max_length=128)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    cost: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    min_stock: Optional[int] = Field(None, ge=0)

    @field_validator("barcode", "name", "category", "cost", "stock", "min_stock", mode="before")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class StockUpdate(CamelModel):
    action: StockAction
    quantity: int = Field(1, ge=0)


class ProductRead(CamelModel):
    id: int
    barcode: str
    name: str
    category: str
    cost: float
    stock: int
    min_stock: int
    last_scanned: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProductLookup(CamelModel):
    exists: bool
    barcode: Optional[str] = None
    product: Optional[ProductRead] = None


class ProductResult(CamelModel):
    success: bool = True
    product: ProductRead


class DeleteResult(CamelModel):
    success: bool = True
    message: str


class InventoryStats(CamelModel):
    total_products: int
    total_value: float
    low_stock_count: int
    categories_count: int
