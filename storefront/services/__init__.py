"""Services orchestrating the cart, checkout and catalog flows."""

from .actions import ActionResult, run_action
from .cart_store import CartStore
from .catalog import CatalogService
from .checkout import CheckoutService, PlacedOrder
from .confirmation import ConfirmationService, OrderSummary, SummaryItem

__all__ = [
    "ActionResult",
    "CartStore",
    "CatalogService",
    "CheckoutService",
    "ConfirmationService",
    "OrderSummary",
    "PlacedOrder",
    "SummaryItem",
    "run_action",
]
