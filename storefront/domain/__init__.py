"""Domain models for cart lines, catalog products and orders."""
