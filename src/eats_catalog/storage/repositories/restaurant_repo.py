"""
Restaurant repository for database operations.
"""

from typing import Iterable, Optional

from sqlalchemy import asc, or_
from sqlalchemy.orm import Session, selectinload

from eats_catalog.models import RestaurantModel
from eats_catalog.storage.dialects import get_dialect_for_engine
from eats_catalog.storage.repositories.base import BaseRepository


class RestaurantRepository(BaseRepository[RestaurantModel]):
    """Repository for Restaurant CRUD and keyword lookups."""

    def __init__(self, session: Session) -> None:
        """Initialize repository with a database session.

        Args:
            session: SQLAlchemy Session instance
        """
        super().__init__(session, RestaurantModel)

    def create(
        self,
        owner_id: int,
        name: str,
        description: Optional[str] = None,
        keywords: Optional[dict[str, int]] = None,
    ) -> RestaurantModel:
        """Create a new restaurant.

        Args:
            owner_id: Identifier of the owning caller
            name: Restaurant name
            description: Optional description
            keywords: Initial keyword index

        Returns:
            Created RestaurantModel instance
        """
        restaurant = RestaurantModel(
            owner_id=owner_id,
            name=name,
            description=description,
            keywords=dict(keywords or {}),
        )
        return self.save(restaurant)

    def get_by_id(self, id: int, with_dishes: bool = False) -> Optional[RestaurantModel]:
        """Get a restaurant by ID.

        Args:
            id: Restaurant ID
            with_dishes: Eagerly load the dish collection

        Returns:
            RestaurantModel instance or None
        """
        if not with_dishes:
            return super().get_by_id(id)

        return (
            self.session.query(RestaurantModel)
            .options(selectinload(RestaurantModel.dishes))
            .filter(RestaurantModel.id == id)
            .first()
        )

    def find_by_owner(self, owner_id: int) -> list[RestaurantModel]:
        """List every restaurant owned by a caller.

        Args:
            owner_id: Owner identifier

        Returns:
            List of RestaurantModel instances ordered by ID
        """
        return (
            self.session.query(RestaurantModel)
            .options(selectinload(RestaurantModel.dishes))
            .filter(RestaurantModel.owner_id == owner_id)
            .order_by(asc(RestaurantModel.id))
            .all()
        )

    def find_with_keyword_predicates(
        self,
        tokens: Iterable[str],
        skip: int = 0,
        take: int = 10,
    ) -> list[RestaurantModel]:
        """Find restaurants whose keyword index holds at least one token.

        Args:
            tokens: Keyword tokens combined with OR; empty means no filter
            skip: Number of matching restaurants to skip
            take: Maximum number of restaurants to return

        Returns:
            List of RestaurantModel instances with dishes loaded, ordered by ID
        """
        query = self.session.query(RestaurantModel).options(
            selectinload(RestaurantModel.dishes)
        )

        tokens = list(tokens)
        if tokens:
            dialect = get_dialect_for_engine(self.session.get_bind())
            query = query.filter(
                or_(*(dialect.has_key(RestaurantModel.keywords, token) for token in tokens))
            )

        return query.order_by(asc(RestaurantModel.id)).offset(skip).limit(take).all()
