"""Repository pattern implementations for data access."""

from eats_catalog.storage.repositories.dish_repo import DishRepository
from eats_catalog.storage.repositories.restaurant_repo import RestaurantRepository

__all__ = [
    "DishRepository",
    "RestaurantRepository",
]
