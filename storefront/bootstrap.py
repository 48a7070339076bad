"""Wire settings, storage, cart store, gateways and services together."""
from __future__ import annotations

from dataclasses import dataclass

from storefront.api.orders import OrderGateway
from storefront.api.products import ProductGateway
from storefront.core.config import Settings, load_settings
from storefront.core.images import configure_public_scheme
from storefront.integrations.storage import KeyValueStorage, create_storage
from storefront.logging_config import logger, setup_logging
from storefront.services.cart_store import CartStore
from storefront.services.catalog import CatalogService
from storefront.services.checkout import CheckoutService
from storefront.services.confirmation import ConfirmationService


@dataclass
class Storefront:
    settings: Settings
    cart: CartStore
    orders: OrderGateway
    products: ProductGateway
    checkout: CheckoutService
    catalog: CatalogService
    confirmation: ConfirmationService

    async def close(self) -> None:
        await self.orders.close()
        await self.products.close()

    async def __aenter__(self) -> Storefront:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def build_storefront(
    settings: Settings | None = None,
    *,
    storage: KeyValueStorage | None = None,
) -> Storefront:
    """Create the runtime components from configuration.

    The single ``CartStore`` built here is shared by reference with every
    service that needs it.
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level)
    configure_public_scheme(settings.public_scheme)

    if storage is None:
        storage = create_storage(
            settings.cart_storage,
            path=settings.cart_storage_path,
            redis_url=settings.redis_url,
        )
    logger.info("Cart storage: %s", type(storage).__name__)

    cart = CartStore(storage, placeholder=settings.placeholder_image)
    orders = OrderGateway(settings.api_base_url)
    products = ProductGateway(settings.api_base_url)

    return Storefront(
        settings=settings,
        cart=cart,
        orders=orders,
        products=products,
        checkout=CheckoutService(cart, orders, user_id=settings.user_id, tax_rate=settings.tax_rate),
        catalog=CatalogService(products, cart),
        confirmation=ConfirmationService(orders),
    )
