#!/usr/bin/env python3
"""
Seed the database with sample restaurants and dishes.

Everything goes through CatalogService so keyword indexes are built the same
way as for real owners.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from eats_catalog.core.services import CatalogService, SearchService
from eats_catalog.logger import setup_logger
from eats_catalog.models import Caller


SAMPLE_CATALOG = [
    {
        "owner_id": 1,
        "name": "Sushi House",
        "description": "Fresh sushi and sashimi every day",
        "dishes": [
            {"name": "Salmon Roll", "description": "Salmon, rice and nori", "price": 8.5},
            {"name": "Tuna Nigiri", "description": "Two pieces of bluefin tuna", "price": 6.0},
        ],
    },
    {
        "owner_id": 1,
        "name": "Noodle Bar",
        "description": "Hand pulled noodles",
        "dishes": [
            {"name": "Beef Noodle Soup", "description": "Slow braised beef", "price": 12.0},
        ],
    },
    {
        "owner_id": 2,
        "name": "Taco Stand",
        "description": None,
        "dishes": [
            {"name": "Fish Taco", "description": "Grilled fish, lime and cabbage", "price": 4.5},
            {"name": "Al Pastor Taco", "price": 4.0},
        ],
    },
]


def main() -> None:
    """Seed the database with sample restaurants."""
    import argparse

    parser = argparse.ArgumentParser(description="Seed database with sample restaurants")
    parser.add_argument("--query", help="Run a browse query after seeding")
    args = parser.parse_args()

    setup_logger()
    catalog = CatalogService()

    for restaurant_data in SAMPLE_CATALOG:
        caller = Caller(id=restaurant_data["owner_id"])
        result = catalog.create_restaurant(
            caller,
            {"name": restaurant_data["name"], "description": restaurant_data["description"]},
        )
        if not result.ok:
            print(f"Failed to add restaurant {restaurant_data['name']}: {result.error.message}")
            continue

        restaurant = result.data
        print(f"Added restaurant: {restaurant.name}")

        for dish_data in restaurant_data["dishes"]:
            dish_result = catalog.add_dish(caller, {"restaurant_id": restaurant.id, **dish_data})
            if dish_result.ok:
                print(f"  Added dish: {dish_data['name']}")
            else:
                print(f"  Failed to add dish {dish_data['name']}: {dish_result.error.message}")

    if args.query is not None:
        page = SearchService().browse_restaurants(query=args.query)
        if page.ok:
            print(f"\nRestaurants matching {args.query!r}:")
            for restaurant in page.data:
                print(f"  {restaurant.id}: {restaurant.name}")


if __name__ == "__main__":
    main()
