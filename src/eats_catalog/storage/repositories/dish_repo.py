"""
Dish repository for database operations.
"""

from typing import Optional

from sqlalchemy.orm import Session

from eats_catalog.models import DishModel
from eats_catalog.storage.repositories.base import BaseRepository


class DishRepository(BaseRepository[DishModel]):
    """Repository for Dish CRUD operations."""

    def __init__(self, session: Session) -> None:
        """Initialize repository with a database session.

        Args:
            session: SQLAlchemy Session instance
        """
        super().__init__(session, DishModel)

    def create(
        self,
        restaurant_id: int,
        name: str,
        price: float,
        description: Optional[str] = None,
        photo: Optional[str] = None,
    ) -> DishModel:
        """Create a dish bound to a restaurant.

        Args:
            restaurant_id: Parent restaurant ID
            name: Dish name
            price: Dish price
            description: Optional description
            photo: Optional photo URL

        Returns:
            Created DishModel instance
        """
        dish = DishModel(
            restaurant_id=restaurant_id,
            name=name,
            price=price,
            description=description,
            photo=photo,
        )
        return self.save(dish)

    def list_by_restaurant(self, restaurant_id: int) -> list[DishModel]:
        """List the dishes of a restaurant.

        Args:
            restaurant_id: Restaurant ID

        Returns:
            List of DishModel instances ordered by ID
        """
        return self.list(limit=10_000, restaurant_id=restaurant_id)

    def delete_by_id(self, id: int) -> bool:
        """Delete a dish by ID.

        Args:
            id: Dish ID

        Returns:
            True if a dish was deleted
        """
        dish = self.get_by_id(id)
        if dish is None:
            return False

        self.delete(dish)
        return True
