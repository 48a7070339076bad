"""Client-held shopping cart with local persistence.

The store owns the list of cart lines. Every change goes through the pure
reducer in ``storefront.domain.cart_reducer`` and is then written in full to a
single storage key. Persistence is best effort: storage failures are logged
and never reach the caller.
"""
from __future__ import annotations

import json
from typing import Any, Callable

from storefront.core.constants import CART_STORAGE_KEY
from storefront.core.exceptions import ValidationException
from storefront.core.images import get_product_image
from storefront.core.order_math import (
    calc_item_count,
    calc_subtotal_cents,
    cents_to_amount,
    price_to_cents,
    round_money,
)
from storefront.domain.cart import CartLine, CartTotals, CheckoutItem, CheckoutPayload
from storefront.domain.cart_reducer import (
    AddItem,
    CartAction,
    ClearCart,
    RemoveItem,
    UpdateQuantity,
    migrate_lines,
    reduce_cart,
)
from storefront.integrations.storage import KeyValueStorage
from storefront.logging_config import logger

CartListener = Callable[[tuple[CartLine, ...]], None]


def _product_field(product: Any, *names: str) -> Any:
    for name in names:
        if isinstance(product, dict):
            value = product.get(name)
        else:
            value = getattr(product, name, None)
        if value is not None:
            return value
    return None


class CartStore:
    """Sole owner of cart lines; construct once and pass it to whoever needs it."""

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        storage_key: str = CART_STORAGE_KEY,
        placeholder: str | None = None,
    ) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._placeholder = placeholder
        self._listeners: list[CartListener] = []
        self._lines: list[CartLine] = self._load()

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------

    def _load(self) -> list[CartLine]:
        try:
            raw = self._storage.get(self._storage_key)
        except Exception as exc:
            logger.warning("Cart storage read failed, starting empty: %s", exc)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Persisted cart is corrupt, starting empty")
            return []
        return migrate_lines(data)

    def _persist(self) -> None:
        serialized = json.dumps([line.to_dict() for line in self._lines], ensure_ascii=False)
        try:
            self._storage.set(self._storage_key, serialized)
        except Exception as exc:
            logger.warning("Cart storage write failed, keeping in-memory cart: %s", exc)

    def _dispatch(self, action: CartAction) -> None:
        self._lines = reduce_cart(self._lines, action)
        self._persist()
        snapshot = self.lines
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Cart listener failed")

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def get_line(self, line_key: str) -> CartLine | None:
        for line in self._lines:
            if line.line_key == line_key:
                return line
        return None

    def get_totals(self) -> CartTotals:
        return CartTotals(
            subtotal_cents=calc_subtotal_cents(self._lines),
            item_count=calc_item_count(self._lines),
        )

    def build_checkout_payload(self, user_id: int) -> CheckoutPayload:
        amount = round_money(cents_to_amount(self.get_totals().subtotal_cents))
        items = [
            CheckoutItem(product_id=line.product_id, size=line.size, quantity=line.quantity)
            for line in self._lines
        ]
        return CheckoutPayload(user_id=int(user_id), amount=amount, items=items)

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Call ``listener`` with the new lines after every change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------

    def add_to_cart(self, product: Any, *, size: str | None = None, quantity: Any = 1) -> CartLine:
        product_id = _product_field(product, "id", "product_id", "productId")
        if product_id is None:
            raise ValidationException("Product has no id")
        try:
            product_id = int(product_id)
        except (TypeError, ValueError) as exc:
            raise ValidationException("Product has no valid id") from exc
        action = AddItem(
            product_id=product_id,
            name=str(_product_field(product, "name") or ""),
            image_url=get_product_image(product, placeholder=self._placeholder),
            unit_price_cents=price_to_cents(_product_field(product, "price") or 0),
            size=size,
            quantity=quantity,
        )
        self._dispatch(action)
        return next(line for line in self._lines if line.line_key == action.line_key)

    def update_quantity(self, line_key: str, quantity: Any) -> None:
        self._dispatch(UpdateQuantity(line_key=line_key, quantity=quantity))

    def remove_from_cart(self, line_key: str) -> None:
        self._dispatch(RemoveItem(line_key=line_key))

    def clear_cart(self) -> None:
        self._dispatch(ClearCart())
