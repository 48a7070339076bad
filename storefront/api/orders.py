"""Order creation and lookup against ``/api/orders``."""
from __future__ import annotations

from typing import Any

from .client import ApiClient


class OrderGateway(ApiClient):
    async def create_order(self, *, user_id: int, items: list[dict[str, Any]], amount: float) -> Any:
        """POST the order and return the backend's order record."""
        body = {"userId": user_id, "items": items, "amount": amount}
        return await self.request_json(
            "POST",
            "/api/orders",
            json_body=body,
            error_message="Create order failed",
        )

    async def get_order(self, order_id: Any) -> Any:
        return await self.request_json(
            "GET",
            f"/api/orders/{order_id}",
            error_message="Fetch order failed",
        )
