"""Order records returned by the orders API."""
from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from storefront.core.constants import ORDER_ID_FIELDS


def extract_order_id(record: Any) -> Any:
    """Return the first truthy order id alias, or ``None``.

    ``0`` and ``""`` are not valid ids.
    """
    if not isinstance(record, dict):
        return None
    for name in ORDER_ID_FIELDS:
        value = record.get(name)
        if value:
            return value
    return None


class OrderCartItem(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    product_id: int | None = Field(default=None, validation_alias=AliasChoices("product_id", "productId"))
    quantity: int = 0
    product: dict[str, Any] | None = Field(default=None, validation_alias=AliasChoices("Product", "product"))


class OrderCart(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    items: list[OrderCartItem] = Field(default_factory=list, validation_alias=AliasChoices("CartItem", "items"))

    @field_validator("items", mode="before")
    @classmethod
    def _items_list(cls, v: Any) -> Any:
        return v if isinstance(v, list) else []


class Order(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    order_id: Any = Field(default=None, validation_alias=AliasChoices("order_id", "id"))
    amount: float = 0.0
    cart: OrderCart | None = Field(default=None, validation_alias=AliasChoices("Cart", "cart"))

    @field_validator("amount", mode="before")
    @classmethod
    def _null_amount(cls, v: Any) -> Any:
        return 0 if v is None else v

    @property
    def items(self) -> list[OrderCartItem]:
        return self.cart.items if self.cart else []
