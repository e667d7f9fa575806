"""
Facade services for catalog core modules.

External code (transport layer, scripts, etc.) should ONLY interact with
these services, not with repositories or the keyword extractor directly.

Example:
    from eats_catalog.core.services import CatalogService, SearchService

    catalog = CatalogService()
    result = catalog.add_dish(caller, {"restaurant_id": 1, "name": "Salmon Roll", "price": 9.5})

    search = SearchService()
    page = search.browse_restaurants(query="salmon", limit=10, offset=0)
"""

from eats_catalog.core.services.catalog_service import CatalogService, create_catalog_service
from eats_catalog.core.services.search_service import SearchService, create_search_service

__all__ = [
    # Services
    "CatalogService",
    "SearchService",
    # Factory functions
    "create_catalog_service",
    "create_search_service",
]
