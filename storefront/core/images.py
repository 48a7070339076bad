"""Normalize heterogeneous image fields into loadable URLs.

Upstream product and order records are inconsistent: the image may live under
any of several field names and may be an absolute URL, a protocol-relative
URL, a bare asset path or garbage. Everything here maps to a usable string and
never raises.
"""
from __future__ import annotations

import re
from typing import Any

from .constants import DEFAULT_PLACEHOLDER_IMAGE, DEFAULT_PUBLIC_SCHEME, IMAGE_FIELD_CANDIDATES

_ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)
_DOUBLE_SCHEME_RE = re.compile(r"^https?://https?://", re.IGNORECASE)
_PASSTHROUGH_PREFIXES = ("data:", "blob:")

_public_scheme = DEFAULT_PUBLIC_SCHEME


def configure_public_scheme(scheme: str) -> None:
    """Set the scheme used to complete protocol-relative URLs."""
    global _public_scheme
    cleaned = (scheme or "").strip().rstrip(":").lower()
    _public_scheme = cleaned or DEFAULT_PUBLIC_SCHEME


def get_public_scheme() -> str:
    return _public_scheme


def resolve_image_url(
    raw: Any,
    *,
    placeholder: str | None = None,
    scheme: str | None = None,
) -> str:
    """Turn whatever image value we got into a loadable URL."""
    fallback = placeholder or DEFAULT_PLACEHOLDER_IMAGE
    if not raw or not isinstance(raw, str):
        return fallback

    value = raw.strip()
    if not value:
        return fallback

    if value.startswith(_PASSTHROUGH_PREFIXES):
        return value

    # Malformed upstream data like 'https://http://host/a.jpg'
    value = _DOUBLE_SCHEME_RE.sub("http://", value, count=1)

    if _ABSOLUTE_URL_RE.match(value):
        return value

    if value.startswith("//"):
        return f"{(scheme or _public_scheme).rstrip(':')}:{value}"

    if not value.startswith("/"):
        value = "/" + value
    return value


def _get_field(entity: Any, name: str) -> Any:
    if isinstance(entity, dict):
        return entity.get(name)
    return getattr(entity, name, None)


def get_product_image(
    entity: Any,
    *,
    placeholder: str | None = None,
    thumb: bool = False,
) -> str:
    """Pick the first non-empty image field of a product-like record.

    ``thumb`` is accepted for callers that want a thumbnail variant; the
    backend does not serve one yet, so the output is the same either way.
    """
    raw: Any = ""
    if entity is not None:
        for name in IMAGE_FIELD_CANDIDATES:
            candidate = _get_field(entity, name)
            if candidate:
                raw = candidate
                break
    return resolve_image_url(raw, placeholder=placeholder)
