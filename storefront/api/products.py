"""Product listing and detail lookups against ``/api/products``."""
from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from storefront.core.exceptions import HttpError
from storefront.domain.product import Product
from storefront.logging_config import logger

from .client import ApiClient


def _parse_product(record: Any) -> Product | None:
    try:
        return Product.model_validate(record)
    except ValidationError as exc:
        logger.warning("Skipping malformed product record: %s", exc.errors()[:1])
        return None


class ProductGateway(ApiClient):
    async def list_products(self, *, category: Any = None, search: str | None = None) -> list[Product]:
        params: dict[str, str] = {}
        if category not in (None, ""):
            params["cat"] = str(category)
        term = (search or "").strip().lower()
        if term:
            params["search"] = term

        data = await self.request_json(
            "GET",
            "/api/products",
            params=params or None,
            error_message="API error",
        )
        if not isinstance(data, list):
            return []
        products = [_parse_product(record) for record in data]
        return [product for product in products if product is not None]

    async def get_product(self, product_id: Any) -> Product | None:
        """Fetch one product; ``None`` when the backend has no such id."""
        try:
            data = await self.request_json(
                "GET",
                f"/api/products/{product_id}",
                error_message="Fetch product failed",
            )
        except HttpError as exc:
            if exc.status == 404:
                return None
            raise
        if not isinstance(data, dict):
            return None
        return _parse_product(data)
