"""Cart line, totals and checkout payload models."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


def normalize_size(size: Any) -> str | None:
    if size is None:
        return None
    text = str(size).strip()
    return text or None


def make_line_key(product_id: int, size: str | None) -> str:
    """``"<productId>:<size>"``, with an empty size segment for sizeless products."""
    return f"{int(product_id)}:{normalize_size(size) or ''}"


def product_id_from_line_key(line_key: str) -> int | None:
    head = str(line_key).split(":", 1)[0].strip()
    try:
        return int(head)
    except ValueError:
        return None


def size_from_line_key(line_key: str) -> str | None:
    parts = str(line_key).split(":", 1)
    if len(parts) < 2:
        return None
    return normalize_size(parts[1])


@dataclass(frozen=True, slots=True)
class CartLine:
    """Single row in the cart, unique per product and size.

    Lines are immutable; the reducer swaps in new instances.
    """

    line_key: str
    product_id: int
    name: str
    image_url: str
    size: str | None
    quantity: int
    unit_price_cents: int

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {
            "lineKey": self.line_key,
            "productId": int(self.product_id),
            "name": self.name,
            "imageUrl": self.image_url,
            "size": self.size,
            "quantity": int(self.quantity),
            "unitPriceCents": int(self.unit_price_cents),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CartLine:
        """Build from the persisted shape; ``productId`` must already be present.

        A missing ``size`` is read back from the stored key, and the key is
        rebuilt from ``(productId, size)`` so the two always agree.
        """
        product_id = int(data["productId"])
        size = normalize_size(data.get("size"))
        stored_key = data.get("lineKey") or data.get("id")
        if size is None and stored_key:
            size = size_from_line_key(stored_key)
        return cls(
            line_key=make_line_key(product_id, size),
            product_id=product_id,
            name=str(data.get("name") or ""),
            image_url=str(data.get("imageUrl") or ""),
            size=size,
            quantity=max(1, int(data.get("quantity") or 1)),
            unit_price_cents=int(data.get("unitPriceCents") or 0),
        )


@dataclass(frozen=True, slots=True)
class CartTotals:
    subtotal_cents: int
    item_count: int = 0


@dataclass(frozen=True, slots=True)
class CheckoutItem:
    product_id: int
    size: str | None
    quantity: int

    def to_dict(self) -> dict[str, Any]:
        return {"productId": self.product_id, "size": self.size, "quantity": self.quantity}


@dataclass(frozen=True)
class CheckoutPayload:
    """Minimal order-creation body derived from the cart."""

    user_id: int
    amount: Decimal
    items: list[CheckoutItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "items": [item.to_dict() for item in self.items],
            "amount": float(self.amount),
        }
