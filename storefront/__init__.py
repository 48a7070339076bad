"""Client-side storefront core: cart, checkout and backend API wrappers."""

__version__ = "0.1.0"
