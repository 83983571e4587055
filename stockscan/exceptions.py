# -*- coding: utf-8 -*-
"""
Domain errors raised by the inventory services and translated to HTTP
responses by the routes.
"""


class InventoryError(Exception):
    """Base class for inventory errors."""

    message = "Inventory error"

    def __init__(self, message=None):
        super().__init__(message or self.message)


class ProductNotFound(InventoryError):
    message = "Product not found"


class ProductAlreadyExists(InventoryError):
    message = "Product already exists"


class BarcodeImmutable(InventoryError):
    message = "Barcode cannot be changed"
