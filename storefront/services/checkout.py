"""Checkout totals and order placement."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from storefront.api.orders import OrderGateway
from storefront.core.constants import CONFIRMATION_PATH, DEFAULT_USER_ID, TAX_RATE
from storefront.core.exceptions import EmptyCartError, MalformedResponseError
from storefront.core.order_math import CheckoutTotals, compute_totals
from storefront.domain.order import extract_order_id
from storefront.logging_config import logger

from .cart_store import CartStore


@dataclass(frozen=True, slots=True)
class PlacedOrder:
    order_id: Any
    total: Decimal

    @property
    def confirmation_path(self) -> str:
        return f"{CONFIRMATION_PATH}?orderId={self.order_id}"


class CheckoutService:
    def __init__(
        self,
        cart: CartStore,
        orders: OrderGateway,
        *,
        user_id: int = DEFAULT_USER_ID,
        tax_rate: Decimal = TAX_RATE,
    ) -> None:
        self.cart = cart
        self.orders = orders
        self.user_id = user_id
        self.tax_rate = tax_rate

    def totals(self) -> CheckoutTotals:
        return compute_totals(self.cart.lines, self.cart.get_totals(), tax_rate=self.tax_rate)

    async def place_order(self) -> PlacedOrder:
        """Create the order and clear the cart once the backend confirms it.

        Any failure leaves the cart exactly as it was.
        """
        lines = self.cart.lines
        if not lines:
            raise EmptyCartError()

        totals = self.totals()
        payload = self.cart.build_checkout_payload(self.user_id)
        items = [item.to_dict() for item in payload.items]

        order = await self.orders.create_order(
            user_id=payload.user_id,
            items=items,
            amount=float(totals.grand_total),
        )

        order_id = extract_order_id(order)
        if order_id is None:
            raise MalformedResponseError("Order created, but no orderId returned.")

        self.cart.clear_cart()
        logger.info(
            "Order %s placed: %s line(s), total %s", order_id, len(items), totals.grand_total
        )
        return PlacedOrder(order_id=order_id, total=totals.grand_total)
