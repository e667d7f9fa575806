"""
Eats Catalog - Restaurant catalog publishing and keyword search.

This package lets restaurant owners publish restaurants and dishes, and keeps
a per-restaurant keyword index up to date for public free-text browsing.
"""

__version__ = "0.1.0"
