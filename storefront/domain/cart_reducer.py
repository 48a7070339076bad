"""Pure cart state transitions.

``reduce_cart(lines, action)`` returns a new list and never mutates its
input, so the transitions can be exercised without any storage backend.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Union

from storefront.core.constants import MIN_LINE_QUANTITY
from storefront.logging_config import logger

from .cart import CartLine, make_line_key, normalize_size, product_id_from_line_key


@dataclass(frozen=True, slots=True)
class AddItem:
    product_id: int
    name: str
    image_url: str
    unit_price_cents: int
    size: str | None = None
    quantity: int = 1

    @property
    def line_key(self) -> str:
        return make_line_key(self.product_id, self.size)


@dataclass(frozen=True, slots=True)
class UpdateQuantity:
    line_key: str
    quantity: Any


@dataclass(frozen=True, slots=True)
class RemoveItem:
    line_key: str


@dataclass(frozen=True, slots=True)
class ClearCart:
    pass


CartAction = Union[AddItem, UpdateQuantity, RemoveItem, ClearCart]


def coerce_quantity(value: Any) -> int:
    """Parse a requested quantity; non-numeric or < 1 becomes 1."""
    if isinstance(value, bool):
        return MIN_LINE_QUANTITY
    try:
        number = float(value)
    except (TypeError, ValueError):
        return MIN_LINE_QUANTITY
    if not math.isfinite(number) or number < MIN_LINE_QUANTITY:
        return MIN_LINE_QUANTITY
    return int(number)


def _add(lines: list[CartLine], action: AddItem) -> list[CartLine]:
    key = action.line_key
    amount = coerce_quantity(action.quantity)
    for idx, line in enumerate(lines):
        if line.line_key == key:
            updated = list(lines)
            updated[idx] = replace(line, quantity=line.quantity + amount)
            return updated

    new_line = CartLine(
        line_key=key,
        product_id=int(action.product_id),
        name=action.name,
        image_url=action.image_url,
        size=normalize_size(action.size),
        quantity=amount,
        unit_price_cents=int(action.unit_price_cents),
    )
    return [*lines, new_line]


def _update(lines: list[CartLine], action: UpdateQuantity) -> list[CartLine]:
    quantity = coerce_quantity(action.quantity)
    return [
        replace(line, quantity=quantity) if line.line_key == action.line_key else line
        for line in lines
    ]


def reduce_cart(lines: list[CartLine], action: CartAction) -> list[CartLine]:
    current = list(lines)
    if isinstance(action, AddItem):
        return _add(current, action)
    if isinstance(action, UpdateQuantity):
        return _update(current, action)
    if isinstance(action, RemoveItem):
        return [line for line in current if line.line_key != action.line_key]
    if isinstance(action, ClearCart):
        return []
    raise TypeError(f"Unknown cart action: {action!r}")


def migrate_lines(raw: Any) -> list[CartLine]:
    """Rebuild lines from persisted data, filling ``productId`` for old entries.

    Lines saved before ``productId`` was stored explicitly carry it only as the
    first segment of their line key. Entries that cannot be recovered are
    dropped; duplicate keys are merged.
    """
    if not isinstance(raw, list):
        return []

    lines: list[CartLine] = []
    index: dict[str, int] = {}
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        data = dict(entry)
        if data.get("productId") in (None, ""):
            key = data.get("lineKey") or data.get("id")
            product_id = product_id_from_line_key(key) if key else None
            if product_id is None:
                logger.warning("Dropping persisted cart line without product id: %s", key)
                continue
            data["productId"] = product_id
        try:
            line = CartLine.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Dropping unreadable persisted cart line: %s", exc)
            continue

        if line.line_key in index:
            pos = index[line.line_key]
            lines[pos] = replace(lines[pos], quantity=lines[pos].quantity + line.quantity)
            continue
        index[line.line_key] = len(lines)
        lines.append(line)
    return lines
