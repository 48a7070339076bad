"""Product browsing and add-to-cart from catalog records."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from storefront.api.products import ProductGateway
from storefront.core.constants import CATEGORY_ID_TO_NAME
from storefront.core.exceptions import ValidationException
from storefront.core.request_guard import RequestGuard
from storefront.domain.cart import CartLine
from storefront.domain.product import Product

from .cart_store import CartStore


def category_name(category: Any) -> str:
    key = str(category)
    return CATEGORY_ID_TO_NAME.get(key, key)


def listing_title(search: str | None = None, category: Any = None) -> str:
    term = (search or "").strip().lower()
    has_category = category not in (None, "")
    if term:
        title = f'Results for "{term}"'
        if has_category:
            title += f" in {category_name(category)}"
        return title
    if has_category:
        return category_name(category)
    return "All Products"


@dataclass(frozen=True)
class ProductListing:
    title: str
    products: list[Product] = field(default_factory=list)


class CatalogService:
    def __init__(self, products: ProductGateway, cart: CartStore) -> None:
        self.products = products
        self.cart = cart
        self.list_guard = RequestGuard("product-list")
        self.detail_guard = RequestGuard("product-detail")

    async def browse(self, *, category: Any = None, search: str | None = None) -> ProductListing | None:
        """Load a listing; ``None`` if a newer listing request superseded this one."""
        fresh, products = await self.list_guard.run(
            self.products.list_products(category=category, search=search)
        )
        if not fresh:
            return None
        return ProductListing(title=listing_title(search, category), products=products or [])

    async def product_detail(self, product_id: Any) -> Product | None:
        """Load one product; ``None`` if missing or superseded."""
        fresh, product = await self.detail_guard.run(self.products.get_product(product_id))
        if not fresh:
            return None
        return product

    def leave(self) -> None:
        """Drop any in-flight responses; call when the catalog views go away."""
        self.list_guard.invalidate()
        self.detail_guard.invalidate()

    def add_to_cart(self, product: Product, *, size: str | None = None, quantity: Any = 1) -> CartLine:
        """Add a catalog product, picking and checking the size against stock."""
        if product.sizes:
            chosen = size if size else product.first_available_size()
            stock = product.stock_for(chosen)
            if stock is None:
                raise ValidationException(f"Size {chosen!r} is not available for {product.name}.")
            if stock <= 0:
                raise ValidationException(f"Size {chosen} is out of stock.")
            size = chosen
        return self.cart.add_to_cart(product, size=size, quantity=quantity)
