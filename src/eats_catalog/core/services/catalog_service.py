"""
Facade for catalog mutation workflows.

Owners create restaurants and add, update or delete dishes. Every change to
restaurant or dish text is mirrored into the restaurant's keyword index in
the same transaction as the change itself:

    create restaurant   index = add(name, description)
    add dish            index += dish name, description
    update dish         index -= old text, += new text (per supplied field)
    delete dish         index -= dish name, description, then the row goes

Restaurant rows are versioned, so two requests racing on one restaurant's
index cannot silently overwrite each other; the loser is re-run.
"""

from typing import Any, Optional

from sqlalchemy.orm import Session

from eats_catalog.config import get_config
from eats_catalog.core.keyword_extractor import KeywordExtractor
from eats_catalog.core.results import (
    AuthorizationError,
    NotFoundError,
    ServiceResult,
    ValidationError,
)
from eats_catalog.core.services.base import TransactionalService, parse_input
from eats_catalog.models import (
    Caller,
    DishCreate,
    DishDelete,
    DishModel,
    DishResponse,
    DishUpdate,
    RestaurantCreate,
    RestaurantModel,
    RestaurantResponse,
)
from eats_catalog.storage.database import DatabaseManager
from eats_catalog.storage.repositories import DishRepository, RestaurantRepository

RESTAURANT_HIDDEN_MESSAGE = "Restaurant not found or you don't have permission to view it."


class CatalogService(TransactionalService):
    """Facade for ownership-gated catalog mutations."""

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        extractor: Optional[KeywordExtractor] = None,
        max_conflict_retries: Optional[int] = None,
    ):
        """Initialize catalog service.

        Args:
            db_manager: Database manager (defaults to the configured database)
            extractor: Keyword extractor
            max_conflict_retries: Retries after a concurrent index update
        """
        from eats_catalog.core.factories import create_keyword_extractor

        if max_conflict_retries is None:
            max_conflict_retries = get_config().catalog.max_conflict_retries

        super().__init__(db_manager=db_manager, max_conflict_retries=max_conflict_retries)
        self._extractor = extractor or create_keyword_extractor()

    # ------------------------------------------------------------------
    # Restaurants
    # ------------------------------------------------------------------

    def create_restaurant(self, caller: Caller, data: Any) -> ServiceResult:
        """Create a restaurant owned by the caller.

        Args:
            caller: Caller identity, becomes the owner
            data: RestaurantCreate or mapping with name and description

        Returns:
            ServiceResult carrying a RestaurantResponse
        """
        return self._run("create_restaurant", self._create_restaurant, caller, data)

    def my_restaurants(self, caller: Caller) -> ServiceResult:
        """List the caller's restaurants with their dishes."""
        return self._run("my_restaurants", self._my_restaurants, caller)

    def my_restaurant(self, caller: Caller, restaurant_id: Optional[int]) -> ServiceResult:
        """Show one of the caller's restaurants with its dishes.

        A restaurant owned by someone else is reported exactly like a
        missing one.
        """
        return self._run("my_restaurant", self._my_restaurant, caller, restaurant_id)

    def _create_restaurant(self, session: Session, caller: Caller, data: Any) -> RestaurantResponse:
        restaurant_in = parse_input(RestaurantCreate, data)
        if not restaurant_in.name:
            raise ValidationError("Restaurant name is required.")

        keywords = self._extractor.add({}, restaurant_in.name, restaurant_in.description)
        restaurant = RestaurantRepository(session).create(
            owner_id=caller.id,
            name=restaurant_in.name,
            description=restaurant_in.description,
            keywords=keywords,
        )

        self._logger.info(
            f"Restaurant {restaurant.id} created by owner {caller.id} "
            f"with {len(keywords)} keywords"
        )
        return RestaurantResponse.model_validate(restaurant)

    def _my_restaurants(self, session: Session, caller: Caller) -> list[RestaurantResponse]:
        restaurants = RestaurantRepository(session).find_by_owner(caller.id)
        return [RestaurantResponse.model_validate(r) for r in restaurants]

    def _my_restaurant(
        self, session: Session, caller: Caller, restaurant_id: Optional[int]
    ) -> RestaurantResponse:
        if not restaurant_id:
            raise ValidationError("ID not provided")

        restaurant = RestaurantRepository(session).get_by_id(restaurant_id, with_dishes=True)
        if restaurant is None or restaurant.owner_id != caller.id:
            raise NotFoundError(RESTAURANT_HIDDEN_MESSAGE)

        return RestaurantResponse.model_validate(restaurant)

    # ------------------------------------------------------------------
    # Dishes
    # ------------------------------------------------------------------

    def add_dish(self, caller: Caller, data: Any) -> ServiceResult:
        """Add a dish to one of the caller's restaurants.

        Args:
            caller: Caller identity, must own the restaurant
            data: DishCreate or mapping (restaurant_id, name, price required)

        Returns:
            ServiceResult carrying a DishResponse
        """
        return self._run("add_dish", self._add_dish, caller, data)

    def update_dish(self, caller: Caller, data: Any) -> ServiceResult:
        """Update a dish; only supplied fields change.

        Args:
            caller: Caller identity, must own the dish's restaurant
            data: DishUpdate or mapping with id and optional fields

        Returns:
            ServiceResult carrying a DishResponse
        """
        return self._run("update_dish", self._update_dish, caller, data)

    def delete_dish(self, caller: Caller, data: Any) -> ServiceResult:
        """Delete a dish and withdraw its words from the keyword index.

        Args:
            caller: Caller identity, must own the dish's restaurant
            data: DishDelete, mapping with id, or the dish id itself

        Returns:
            ServiceResult carrying the deleted dish as a DishResponse
        """
        if isinstance(data, int):
            data = {"id": data}
        return self._run("delete_dish", self._delete_dish, caller, data)

    def get_dish_by_id(self, caller: Caller, dish_id: int) -> ServiceResult:
        """Show one of the caller's dishes."""
        return self._run("get_dish_by_id", self._get_dish_by_id, caller, dish_id)

    def _add_dish(self, session: Session, caller: Caller, data: Any) -> DishResponse:
        dish_in = parse_input(DishCreate, data)
        if dish_in.restaurant_id is None or not dish_in.name or dish_in.price is None:
            raise ValidationError()

        restaurant_repo = RestaurantRepository(session)
        restaurant = restaurant_repo.get_by_id(dish_in.restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found!")
        self._check_owner(caller, restaurant)

        restaurant.keywords = self._extractor.add(
            restaurant.keywords, dish_in.name, dish_in.description
        )

        dish = DishRepository(session).create(
            restaurant_id=restaurant.id,
            name=dish_in.name,
            price=dish_in.price,
            description=dish_in.description,
            photo=dish_in.photo,
        )
        restaurant_repo.save(restaurant)

        self._logger.info(f"Dish {dish.id} added to restaurant {restaurant.id}")
        return DishResponse.model_validate(dish)

    def _update_dish(self, session: Session, caller: Caller, data: Any) -> DishResponse:
        dish_in = parse_input(DishUpdate, data)

        dish_repo = DishRepository(session)
        restaurant_repo = RestaurantRepository(session)
        dish, restaurant = self._load_owned_dish(dish_repo, restaurant_repo, caller, dish_in.id)

        keywords = restaurant.keywords
        if dish_in.name:
            keywords = self._extractor.replace(keywords, dish.name, dish_in.name)
            dish.name = dish_in.name
        if dish_in.description:
            keywords = self._extractor.replace(keywords, dish.description, dish_in.description)
            dish.description = dish_in.description
        if dish_in.price is not None:
            dish.price = dish_in.price
        if dish_in.photo:
            dish.photo = dish_in.photo

        restaurant.keywords = keywords
        dish_repo.save(dish)
        restaurant_repo.save(restaurant)

        self._logger.info(f"Dish {dish.id} updated in restaurant {restaurant.id}")
        return DishResponse.model_validate(dish)

    def _delete_dish(self, session: Session, caller: Caller, data: Any) -> DishResponse:
        dish_in = parse_input(DishDelete, data)

        dish_repo = DishRepository(session)
        restaurant_repo = RestaurantRepository(session)
        dish, restaurant = self._load_owned_dish(dish_repo, restaurant_repo, caller, dish_in.id)

        # Subtract while the dish text is still at hand
        restaurant.keywords = self._extractor.remove(
            restaurant.keywords, dish.name, dish.description
        )
        restaurant_repo.save(restaurant)

        deleted = DishResponse.model_validate(dish)
        dish_repo.delete(dish)

        self._logger.info(f"Dish {deleted.id} deleted from restaurant {restaurant.id}")
        return deleted

    def _get_dish_by_id(self, session: Session, caller: Caller, dish_id: int) -> DishResponse:
        dish, _ = self._load_owned_dish(
            DishRepository(session), RestaurantRepository(session), caller, dish_id
        )
        return DishResponse.model_validate(dish)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_owner(caller: Caller, restaurant: RestaurantModel) -> None:
        if restaurant.owner_id != caller.id:
            raise AuthorizationError()

    def _load_owned_dish(
        self,
        dish_repo: DishRepository,
        restaurant_repo: RestaurantRepository,
        caller: Caller,
        dish_id: Optional[int],
    ) -> tuple[DishModel, RestaurantModel]:
        """Load a dish and its restaurant, enforcing ownership."""
        if not dish_id:
            raise ValidationError("ID not provided")

        dish = dish_repo.get_by_id(dish_id)
        if dish is None:
            raise NotFoundError("Dish not found!")

        restaurant = restaurant_repo.get_by_id(dish.restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found!")
        self._check_owner(caller, restaurant)

        return dish, restaurant


def create_catalog_service(
    db_manager: Optional[DatabaseManager] = None,
    max_conflict_retries: Optional[int] = None,
) -> CatalogService:
    """Create a CatalogService instance.

    Args:
        db_manager: Database manager
        max_conflict_retries: Retries after a concurrent index update

    Returns:
        Configured CatalogService
    """
    return CatalogService(db_manager=db_manager, max_conflict_retries=max_conflict_retries)
