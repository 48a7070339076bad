"""Thin async wrappers around the backend order/product API."""
from __future__ import annotations

from .client import ApiClient
from .orders import OrderGateway
from .products import ProductGateway

__all__ = ["ApiClient", "OrderGateway", "ProductGateway"]
