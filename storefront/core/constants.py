"""Storefront-wide constants.

Centralizes magic values shared by the cart, checkout and image helpers.
"""
from decimal import Decimal

# ============== CHECKOUT ==============
TAX_RATE = Decimal("0.13")  # flat rate, not jurisdiction-aware
DEFAULT_USER_ID = 1  # stands in until authentication exists
CENTS_PER_UNIT = 100

# ============== CART ==============
CART_STORAGE_KEY = "cart"
MIN_LINE_QUANTITY = 1

# ============== IMAGES ==============
DEFAULT_PLACEHOLDER_IMAGE = "https://via.placeholder.com/400x400?text=No+Image"
DEFAULT_PUBLIC_SCHEME = "https"

# Upstream records are inconsistent about the image field name; probed in order.
IMAGE_FIELD_CANDIDATES = (
    "imageUrl",
    "image_url",
    "image",
    "img",
    "imagePath",
    "image_path",
)

# ============== ORDERS ==============
# Both aliases have been seen in create-order responses.
ORDER_ID_FIELDS = ("order_id", "id")
CONFIRMATION_PATH = "/confirmation"

# ============== CATALOG ==============
CATEGORY_ID_TO_NAME = {
    "101": "T-Shirts",
    "106": "Shoes",
    "107": "Sweat Shirt",
    "108": "Lowers",
    "109": "Jacket",
    "111": "Accessories",
}
