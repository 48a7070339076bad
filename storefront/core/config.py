"""Environment-driven configuration for the storefront core."""
from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

from .constants import DEFAULT_PLACEHOLDER_IMAGE, DEFAULT_PUBLIC_SCHEME, DEFAULT_USER_ID, TAX_RATE
from .exceptions import ConfigurationException

DEFAULT_API_URL = "http://localhost:3000"
CART_STORAGE_BACKENDS = {"memory", "file", "redis"}


@dataclass(slots=True)
class Settings:
    api_base_url: str
    user_id: int
    tax_rate: Decimal
    cart_storage: str
    cart_storage_path: str
    redis_url: str | None
    public_scheme: str
    placeholder_image: str
    log_level: str


def _parse_tax_rate(raw: str | None) -> Decimal:
    if raw is None or not raw.strip():
        return TAX_RATE
    try:
        rate = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise ConfigurationException(f"STOREFRONT_TAX_RATE is not a number: {raw!r}") from exc
    if not rate.is_finite() or rate < 0:
        raise ConfigurationException(f"STOREFRONT_TAX_RATE must be non-negative: {raw!r}")
    return rate


def _parse_user_id(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_USER_ID
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationException(f"STOREFRONT_USER_ID must be an integer: {raw!r}") from exc


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    api_base_url = (
        os.getenv("STOREFRONT_API_URL") or os.getenv("VITE_API_URL") or DEFAULT_API_URL
    ).rstrip("/")

    cart_storage = os.getenv("STOREFRONT_CART_STORAGE", "file").strip().lower()
    if cart_storage not in CART_STORAGE_BACKENDS:
        raise ConfigurationException(
            f"STOREFRONT_CART_STORAGE must be one of {sorted(CART_STORAGE_BACKENDS)}, got {cart_storage!r}"
        )

    public_scheme = os.getenv("STOREFRONT_PUBLIC_SCHEME", DEFAULT_PUBLIC_SCHEME).strip().rstrip(":")

    return Settings(
        api_base_url=api_base_url,
        user_id=_parse_user_id(os.getenv("STOREFRONT_USER_ID")),
        tax_rate=_parse_tax_rate(os.getenv("STOREFRONT_TAX_RATE")),
        cart_storage=cart_storage,
        cart_storage_path=os.getenv("STOREFRONT_CART_PATH", ".storefront_cart.json"),
        redis_url=os.getenv("REDIS_URL") or None,
        public_scheme=public_scheme or DEFAULT_PUBLIC_SCHEME,
        placeholder_image=os.getenv("STOREFRONT_PLACEHOLDER_IMAGE") or DEFAULT_PLACEHOLDER_IMAGE,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
