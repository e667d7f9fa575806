"""Core business logic modules for eats catalog.

External code MUST use the service facades:

    from eats_catalog.core.services import CatalogService, SearchService

Result types are exported for type hints and result inspection.
"""

from eats_catalog.core.results import (
    AuthorizationError,
    CatalogError,
    ErrorCode,
    ErrorInfo,
    NotFoundError,
    ServiceResult,
    ValidationError,
)
from eats_catalog.core.services import (
    CatalogService,
    SearchService,
    create_catalog_service,
    create_search_service,
)

__all__ = [
    "CatalogService",
    "SearchService",
    "create_catalog_service",
    "create_search_service",
    "ServiceResult",
    "ErrorInfo",
    "ErrorCode",
    "CatalogError",
    "ValidationError",
    "NotFoundError",
    "AuthorizationError",
]
