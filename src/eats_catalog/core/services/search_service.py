"""
Facade for public restaurant browsing.

A query is tokenized the same way restaurant text is indexed. A restaurant
matches when its keyword index contains at least one query token; counts are
never consulted and results are not ranked. An empty query lists every
restaurant.
"""

from typing import Any, Optional

from sqlalchemy.orm import Session

from eats_catalog.config import get_config
from eats_catalog.core.keyword_extractor import KeywordExtractor
from eats_catalog.core.results import ServiceResult
from eats_catalog.core.services.base import TransactionalService, parse_input
from eats_catalog.models import BrowseRestaurantsInput, RestaurantResponse
from eats_catalog.storage.database import DatabaseManager
from eats_catalog.storage.repositories import RestaurantRepository


class SearchService(TransactionalService):
    """Facade for keyword browsing over published restaurants."""

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        default_limit: Optional[int] = None,
    ):
        """Initialize search service.

        Args:
            db_manager: Database manager (defaults to the configured database)
            default_limit: Page size when the request has none
        """
        super().__init__(db_manager=db_manager)
        self.default_limit = default_limit or get_config().search.default_limit

    def browse_restaurants(self, data: Any = None, **kwargs: Any) -> ServiceResult:
        """Browse restaurants matching a free-text query.

        Args:
            data: BrowseRestaurantsInput or mapping (query, limit, offset)
            **kwargs: Same fields as keywords when data is omitted

        Returns:
            ServiceResult carrying a list of RestaurantResponse, dishes attached

        Example:
            >>> service.browse_restaurants(query="salmon tuna", limit=5, offset=1)
        """
        if data is None:
            data = kwargs
        return self._run("browse_restaurants", self._browse_restaurants, data)

    def _browse_restaurants(self, session: Session, data: Any) -> list[RestaurantResponse]:
        browse_in = parse_input(BrowseRestaurantsInput, data)
        skip, take = self.page_bounds(browse_in.limit, browse_in.offset)
        if take < 1:
            return []
        tokens = KeywordExtractor.query_tokens(browse_in.query)

        restaurants = RestaurantRepository(session).find_with_keyword_predicates(
            tokens, skip=skip, take=take
        )

        self._logger.debug(
            f"Browse tokens={tokens} skip={skip} take={take} -> {len(restaurants)} restaurants"
        )
        return [RestaurantResponse.model_validate(r) for r in restaurants]

    def page_bounds(self, limit: Optional[int], offset: int) -> tuple[int, int]:
        """Translate a page request into (skip, take).

        ``offset`` counts pages, not rows: skip = offset * limit, and a
        negative offset starts from the beginning. A limit below 1 yields an
        empty page.
        """
        if limit is None:
            limit = self.default_limit

        skip = offset * limit if offset >= 0 and limit > 0 else 0
        return skip, limit


def create_search_service(
    db_manager: Optional[DatabaseManager] = None,
    default_limit: Optional[int] = None,
) -> SearchService:
    """Create a SearchService instance.

    Args:
        db_manager: Database manager
        default_limit: Page size when the request has none

    Returns:
        Configured SearchService
    """
    return SearchService(db_manager=db_manager, default_limit=default_limit)
