"""
Pydantic models for catalog records returned by the products API.

Records are validated at the API boundary. Unknown fields are kept as extras
so image-field probing keeps working on whatever the backend sends.
"""
from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class SizeRef(BaseModel):
    model_config = ConfigDict(extra="allow")

    size: str = ""

    @field_validator("size", mode="before")
    @classmethod
    def _blank_size(cls, v: Any) -> str:
        return "" if v is None else str(v)


class ProductSizeEntry(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    stock: int = 0
    size_ref: SizeRef | None = Field(default=None, validation_alias=AliasChoices("Size", "size_ref"))

    @field_validator("stock", mode="before")
    @classmethod
    def _null_stock(cls, v: Any) -> int:
        return 0 if v is None else v


class SizeStock(BaseModel):
    size: str
    stock: int


class Product(BaseModel):
    """Catalog product as served by ``/api/products``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int = Field(validation_alias=AliasChoices("id", "product_id", "productId"))
    name: str = ""
    price: float = 0.0
    description: str | None = None
    category: Any = None
    product_sizes: list[ProductSizeEntry] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ProductSize", "product_sizes"),
    )

    @field_validator("product_sizes", mode="before")
    @classmethod
    def _sizes_list(cls, v: Any) -> Any:
        return v if isinstance(v, list) else []

    @property
    def sizes(self) -> list[SizeStock]:
        return [
            SizeStock(size=entry.size_ref.size if entry.size_ref else "", stock=entry.stock)
            for entry in self.product_sizes
        ]

    def first_available_size(self) -> str:
        """First size with stock, else the first size listed, else ``""``."""
        sizes = self.sizes
        if not sizes:
            return ""
        for entry in sizes:
            if entry.stock > 0:
                return entry.size
        return sizes[0].size

    def total_stock(self) -> int:
        return sum(entry.stock for entry in self.sizes if entry.stock > 0)

    def stock_for(self, size: str | None) -> int | None:
        """Stock for ``size``; ``None`` if the product does not list it."""
        for entry in self.sizes:
            if entry.size == (size or ""):
                return entry.stock
        return None
