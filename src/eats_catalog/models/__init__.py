"""Data models for eats catalog."""

from eats_catalog.models.base import Base
from eats_catalog.models.caller import Caller
from eats_catalog.models.dish import (
    DishCreate,
    DishDelete,
    DishModel,
    DishResponse,
    DishUpdate,
)
from eats_catalog.models.restaurant import (
    BrowseRestaurantsInput,
    RestaurantCreate,
    RestaurantModel,
    RestaurantResponse,
)

__all__ = [
    "Base",
    "Caller",
    "RestaurantModel",
    "RestaurantCreate",
    "RestaurantResponse",
    "BrowseRestaurantsInput",
    "DishModel",
    "DishCreate",
    "DishUpdate",
    "DishDelete",
    "DishResponse",
]
