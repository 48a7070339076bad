"""Post-checkout order summary."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from pydantic import ValidationError

from storefront.api.orders import OrderGateway
from storefront.core.exceptions import MalformedResponseError, ValidationException
from storefront.core.images import get_product_image
from storefront.core.order_math import round_money
from storefront.core.request_guard import RequestGuard
from storefront.domain.order import Order


@dataclass(frozen=True, slots=True)
class SummaryItem:
    product_id: int | None
    name: str
    quantity: int
    image_url: str


@dataclass(frozen=True)
class OrderSummary:
    order_id: str
    amount: Decimal
    items: list[SummaryItem] = field(default_factory=list)


def build_summary(order_id: str, record: Any) -> OrderSummary:
    try:
        order = Order.model_validate(record if isinstance(record, dict) else {})
    except ValidationError as exc:
        raise MalformedResponseError("Order details could not be read.") from exc

    items = [
        SummaryItem(
            product_id=item.product_id,
            name=str((item.product or {}).get("name") or ""),
            quantity=item.quantity,
            image_url=get_product_image(item.product),
        )
        for item in order.items
    ]
    return OrderSummary(order_id=order_id, amount=round_money(order.amount), items=items)


class ConfirmationService:
    def __init__(self, orders: OrderGateway) -> None:
        self.orders = orders
        self.guard = RequestGuard("confirmation")

    async def load(self, order_id: Any) -> OrderSummary | None:
        """Fetch the order for the confirmation view.

        Returns ``None`` if the view moved on before the response arrived.
        """
        order_key = str(order_id).strip() if order_id is not None else ""
        if not order_key:
            raise ValidationException("No order ID provided.")

        fresh, record = await self.guard.run(self.orders.get_order(order_key))
        if not fresh:
            return None
        return build_summary(order_key, record)
