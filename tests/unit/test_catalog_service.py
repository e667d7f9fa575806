"""Tests for CatalogService workflows and keyword index maintenance."""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from eats_catalog.core.keyword_extractor import KeywordExtractor
from eats_catalog.core.results import INTERNAL_SERVER_ERROR_MESSAGE, ErrorCode
from eats_catalog.core.services import CatalogService
from eats_catalog.models import Caller, DishModel, DishUpdate, RestaurantCreate, RestaurantModel
from eats_catalog.storage.database import DatabaseManager
from eats_catalog.storage.repositories import DishRepository, RestaurantRepository


@pytest.fixture
def restaurant(catalog_service: CatalogService, owner: Caller):
    """Restaurant "Sushi House" owned by the default owner."""
    result = catalog_service.create_restaurant(owner, {"name": "Sushi House"})
    assert result.ok
    return result.data


def keywords_of(catalog_service: CatalogService, caller: Caller, restaurant_id: int) -> dict:
    result = catalog_service.my_restaurant(caller, restaurant_id)
    assert result.ok
    return result.data.keywords


def dish_count(db_manager) -> int:
    with db_manager.session() as session:
        return session.query(DishModel).count()


class TestCreateRestaurant:
    """Tests for create_restaurant."""

    def test_seeds_keywords_from_name_and_description(self, catalog_service, owner):
        """Test keyword seeding."""
        result = catalog_service.create_restaurant(
            owner, RestaurantCreate(name="Sushi House", description="Best sushi in town")
        )

        assert result.ok is True
        assert result.error is None
        assert result.data.owner_id == owner.id
        assert result.data.keywords == {"sushi": 2, "house": 1, "best": 1, "in": 1, "town": 1}
        assert result.data.dishes == []

    def test_description_is_optional(self, catalog_service, owner):
        """Test creating without description."""
        result = catalog_service.create_restaurant(owner, {"name": "Taco Stand"})

        assert result.ok
        assert result.data.description is None
        assert result.data.keywords == {"taco": 1, "stand": 1}

    def test_missing_name_is_bad_request(self, catalog_service, owner, search_service):
        """Test validation of the name."""
        result = catalog_service.create_restaurant(owner, {"description": "No name"})

        assert result.ok is False
        assert result.error.code == ErrorCode.BAD_REQUEST
        assert search_service.browse_restaurants().data == []

    def test_persistence_failure_is_internal_error(self, catalog_service, owner, monkeypatch):
        """Storage faults surface as a generic internal error."""

        def broken_save(self, instance):
            raise OperationalError("INSERT", {}, Exception("disk full"))

        monkeypatch.setattr(RestaurantRepository, "save", broken_save)

        result = catalog_service.create_restaurant(owner, {"name": "Sushi House"})

        assert result.ok is False
        assert result.error.code == ErrorCode.INTERNAL_SERVER_ERROR
        assert result.error.message == INTERNAL_SERVER_ERROR_MESSAGE
        assert "disk full" not in result.error.message


class TestMyRestaurants:
    """Tests for owner-only restaurant views."""

    def test_my_restaurants_lists_only_own(self, catalog_service, owner, other_owner):
        """Test listing by owner."""
        catalog_service.create_restaurant(owner, {"name": "One"})
        catalog_service.create_restaurant(other_owner, {"name": "Two"})
        catalog_service.create_restaurant(owner, {"name": "Three"})

        result = catalog_service.my_restaurants(owner)

        assert result.ok
        assert [r.name for r in result.data] == ["One", "Three"]

    def test_my_restaurant_includes_dishes(self, catalog_service, owner, restaurant):
        """Test the owner view."""
        catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Salmon Roll", "price": 9}
        )

        result = catalog_service.my_restaurant(owner, restaurant.id)

        assert result.ok
        assert [d.name for d in result.data.dishes] == ["Salmon Roll"]

    def test_my_restaurant_hides_foreign_restaurant(self, catalog_service, other_owner, restaurant):
        """A non-owner sees the same error as for a missing restaurant."""
        foreign = catalog_service.my_restaurant(other_owner, restaurant.id)
        missing = catalog_service.my_restaurant(other_owner, 9999)

        assert foreign.error.code == ErrorCode.NOT_FOUND
        assert foreign.error == missing.error

    def test_my_restaurant_requires_id(self, catalog_service, owner):
        """Test missing id."""
        result = catalog_service.my_restaurant(owner, None)
        assert result.error.code == ErrorCode.BAD_REQUEST


class TestAddDish:
    """Tests for add_dish."""

    def test_adds_dish_and_keywords(self, catalog_service, owner, restaurant):
        """Index reflects the new dish."""
        result = catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Salmon Roll", "price": 8.5}
        )

        assert result.ok
        assert result.data.name == "Salmon Roll"
        assert result.data.restaurant_id == restaurant.id
        assert result.data.price == pytest.approx(8.5)
        assert keywords_of(catalog_service, owner, restaurant.id) == {
            "sushi": 1,
            "house": 1,
            "salmon": 1,
            "roll": 1,
        }

    def test_description_words_are_indexed(self, catalog_service, owner, restaurant):
        """Test description indexing."""
        catalog_service.add_dish(
            owner,
            {
                "restaurant_id": restaurant.id,
                "name": "Salmon Roll",
                "description": "Salmon with avocado",
                "price": 8.5,
                "photo": "https://example.com/roll.jpg",
            },
        )

        assert keywords_of(catalog_service, owner, restaurant.id) == {
            "sushi": 1,
            "house": 1,
            "salmon": 2,
            "roll": 1,
            "with": 1,
            "avocado": 1,
        }

    @pytest.mark.parametrize("missing", ["restaurant_id", "name", "price"])
    def test_missing_field_is_bad_request(self, catalog_service, owner, restaurant, db_manager, missing):
        """Nothing is persisted when a required field is absent."""
        data = {"restaurant_id": restaurant.id, "name": "Salmon Roll", "price": 8.5}
        del data[missing]

        result = catalog_service.add_dish(owner, data)

        assert result.ok is False
        assert result.error.code == ErrorCode.BAD_REQUEST
        assert dish_count(db_manager) == 0
        assert keywords_of(catalog_service, owner, restaurant.id) == {"sushi": 1, "house": 1}

    def test_invalid_price_is_bad_request(self, catalog_service, owner, restaurant):
        """Test schema validation."""
        result = catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Roll", "price": "cheap"}
        )

        assert result.error.code == ErrorCode.BAD_REQUEST
        assert "price" in result.error.message

    def test_unknown_restaurant_is_not_found(self, catalog_service, owner):
        """Test missing restaurant."""
        result = catalog_service.add_dish(owner, {"restaurant_id": 42, "name": "Roll", "price": 3})

        assert result.error.code == ErrorCode.NOT_FOUND

    def test_non_owner_is_unauthorized(self, catalog_service, owner, other_owner, restaurant, db_manager):
        """Another owner cannot add dishes, and the index is untouched."""
        result = catalog_service.add_dish(
            other_owner, {"restaurant_id": restaurant.id, "name": "Salmon Roll", "price": 8.5}
        )

        assert result.ok is False
        assert result.error.code == ErrorCode.UNAUTHORIZED
        assert dish_count(db_manager) == 0
        assert keywords_of(catalog_service, owner, restaurant.id) == {"sushi": 1, "house": 1}

    def test_dish_and_index_roll_back_together(self, catalog_service, owner, restaurant, db_manager, monkeypatch):
        """A failed restaurant write leaves no orphan dish behind."""

        def broken_save(self, instance):
            raise OperationalError("UPDATE", {}, Exception("connection lost"))

        monkeypatch.setattr(RestaurantRepository, "save", broken_save)

        result = catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Salmon Roll", "price": 8.5}
        )
        monkeypatch.undo()

        assert result.error.code == ErrorCode.INTERNAL_SERVER_ERROR
        assert dish_count(db_manager) == 0
        assert keywords_of(catalog_service, owner, restaurant.id) == {"sushi": 1, "house": 1}


class TestUpdateDish:
    """Tests for update_dish."""

    @pytest.fixture
    def dish(self, catalog_service, owner, restaurant):
        result = catalog_service.add_dish(
            owner,
            {
                "restaurant_id": restaurant.id,
                "name": "Salmon Roll",
                "description": "Fresh salmon",
                "price": 8.5,
            },
        )
        assert result.ok
        return result.data

    def test_rename_swaps_keywords(self, catalog_service, owner, restaurant, dish):
        """Old name words leave the index, new ones enter it."""
        result = catalog_service.update_dish(owner, {"id": dish.id, "name": "Tuna Roll"})

        assert result.ok
        assert result.data.name == "Tuna Roll"
        assert keywords_of(catalog_service, owner, restaurant.id) == {
            "sushi": 1,
            "house": 1,
            "salmon": 1,
            "fresh": 1,
            "roll": 1,
            "tuna": 1,
        }

    def test_new_description_replaces_old(self, catalog_service, owner, restaurant, dish):
        """Test description swap."""
        catalog_service.update_dish(owner, DishUpdate(id=dish.id, description="Spicy mayo"))

        assert keywords_of(catalog_service, owner, restaurant.id) == {
            "sushi": 1,
            "house": 1,
            "salmon": 1,
            "roll": 1,
            "spicy": 1,
            "mayo": 1,
        }

    def test_first_description_only_adds(self, catalog_service, owner, restaurant):
        """A dish without description has nothing to subtract."""
        added = catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Miso", "price": 2}
        )

        catalog_service.update_dish(owner, {"id": added.data.id, "description": "Soup"})

        assert keywords_of(catalog_service, owner, restaurant.id) == {
            "sushi": 1,
            "house": 1,
            "miso": 1,
            "soup": 1,
        }

    def test_price_and_photo_do_not_touch_keywords(self, catalog_service, owner, restaurant, dish):
        """Price and photo are not indexed."""
        before = keywords_of(catalog_service, owner, restaurant.id)

        result = catalog_service.update_dish(
            owner, {"id": dish.id, "price": 0, "photo": "https://example.com/new.jpg"}
        )

        assert result.ok
        assert result.data.price == 0
        assert result.data.photo == "https://example.com/new.jpg"
        assert result.data.name == "Salmon Roll"
        assert keywords_of(catalog_service, owner, restaurant.id) == before

    def test_update_is_persisted(self, catalog_service, owner, dish, db_manager):
        """The dish row itself is updated."""
        catalog_service.update_dish(owner, {"id": dish.id, "name": "Tuna Roll", "price": 11})

        with db_manager.session() as session:
            stored = DishRepository(session).get_by_id(dish.id)
            assert stored.name == "Tuna Roll"
            assert stored.price == pytest.approx(11)
            assert stored.description == "Fresh salmon"

    def test_non_owner_is_unauthorized(self, catalog_service, owner, other_owner, restaurant, dish):
        """Test ownership check."""
        before = keywords_of(catalog_service, owner, restaurant.id)

        result = catalog_service.update_dish(other_owner, {"id": dish.id, "name": "Stolen"})

        assert result.error.code == ErrorCode.UNAUTHORIZED
        assert keywords_of(catalog_service, owner, restaurant.id) == before

    def test_unknown_dish_is_not_found(self, catalog_service, owner):
        """Test missing dish."""
        result = catalog_service.update_dish(owner, {"id": 404, "name": "Ghost"})
        assert result.error.code == ErrorCode.NOT_FOUND

    def test_missing_id_is_bad_request(self, catalog_service, owner):
        """Test missing id."""
        result = catalog_service.update_dish(owner, {"name": "Ghost"})
        assert result.error.code == ErrorCode.BAD_REQUEST


class TestDeleteDish:
    """Tests for delete_dish."""

    def test_delete_restores_restaurant_keywords(self, catalog_service, owner, restaurant, db_manager):
        """Deleting the only dish returns the index to the restaurant's own words."""
        added = catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Salmon Roll", "price": 8.5}
        )

        result = catalog_service.delete_dish(owner, {"id": added.data.id})

        assert result.ok
        assert result.data.name == "Salmon Roll"
        assert dish_count(db_manager) == 0
        assert keywords_of(catalog_service, owner, restaurant.id) == {"sushi": 1, "house": 1}

    def test_shared_words_keep_remaining_count(self, catalog_service, owner, restaurant):
        """Words still used by another dish stay indexed."""
        first = catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Salmon Roll", "price": 8}
        )
        catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Tuna Roll", "price": 9}
        )

        catalog_service.delete_dish(owner, first.data.id)

        assert keywords_of(catalog_service, owner, restaurant.id) == {
            "sushi": 1,
            "house": 1,
            "tuna": 1,
            "roll": 1,
        }

    def test_non_owner_is_unauthorized(self, catalog_service, owner, other_owner, restaurant, db_manager):
        """Test ownership check."""
        added = catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Salmon Roll", "price": 8.5}
        )

        result = catalog_service.delete_dish(other_owner, {"id": added.data.id})

        assert result.error.code == ErrorCode.UNAUTHORIZED
        assert dish_count(db_manager) == 1

    def test_unknown_dish_is_not_found(self, catalog_service, owner):
        """Test missing dish."""
        result = catalog_service.delete_dish(owner, {"id": 404})
        assert result.error.code == ErrorCode.NOT_FOUND
        assert result.error.message == "Dish not found!"


class TestGetDishById:
    """Tests for get_dish_by_id."""

    def test_owner_can_view(self, catalog_service, owner, restaurant):
        added = catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Miso", "price": 2}
        )

        result = catalog_service.get_dish_by_id(owner, added.data.id)

        assert result.ok
        assert result.data.name == "Miso"

    def test_non_owner_is_unauthorized(self, catalog_service, owner, other_owner, restaurant):
        added = catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Miso", "price": 2}
        )

        result = catalog_service.get_dish_by_id(other_owner, added.data.id)

        assert result.error.code == ErrorCode.UNAUTHORIZED


class TestIndexConsistency:
    """The index always equals a rebuild from the live catalog."""

    def test_index_matches_rebuild_after_mixed_operations(self, catalog_service, owner, db_manager):
        created = catalog_service.create_restaurant(
            owner, {"name": "Harbor Grill", "description": "Grill and fish by the harbor"}
        )
        restaurant_id = created.data.id

        def add(name, description=None):
            data = {"restaurant_id": restaurant_id, "name": name, "price": 10}
            if description:
                data["description"] = description
            return catalog_service.add_dish(owner, data).data.id

        fish = add("Grilled Fish", "Fish of the day")
        burger = add("Harbor Burger")
        chips = add("Chips", "Salted chips")
        catalog_service.update_dish(owner, {"id": fish, "name": "Fish Tacos", "description": "Two tacos"})
        catalog_service.update_dish(owner, {"id": burger, "description": "Beef and cheese"})
        catalog_service.delete_dish(owner, {"id": chips})
        add("Chips", "Crispy")

        with db_manager.session() as session:
            restaurant = RestaurantRepository(session).get_by_id(restaurant_id, with_dishes=True)
            texts = [restaurant.name, restaurant.description]
            for dish in restaurant.dishes:
                texts.extend([dish.name, dish.description])
            expected = KeywordExtractor.build_index(texts)
            actual = dict(restaurant.keywords)

        assert actual == expected
        assert all(count >= 1 for count in actual.values())


class TestConcurrentIndexUpdates:
    """Optimistic locking against real concurrent sessions."""

    @pytest.fixture
    def file_db(self, tmp_path):
        manager = DatabaseManager(str(tmp_path / "catalog.db"))
        manager.init_db()
        yield manager
        manager.close()

    def test_stale_index_write_is_rejected(self, file_db, owner):
        """The second of two writers based on the same read fails."""
        service = CatalogService(db_manager=file_db, max_conflict_retries=0)
        restaurant_id = service.create_restaurant(owner, {"name": "Sushi House"}).data.id

        factory = sessionmaker(bind=file_db.engine, autoflush=False)
        first, second = factory(), factory()
        try:
            stale = first.get(RestaurantModel, restaurant_id)
            fresh = second.get(RestaurantModel, restaurant_id)

            fresh.keywords = {**fresh.keywords, "tuna": 1}
            second.commit()

            stale.keywords = {**stale.keywords, "salmon": 1}
            with pytest.raises(StaleDataError):
                first.commit()
        finally:
            first.rollback()
            first.close()
            second.close()

        assert keywords_of(service, owner, restaurant_id) == {"sushi": 1, "house": 1, "tuna": 1}

    def test_racing_add_dish_keeps_both_changes(self, file_db, owner, monkeypatch):
        """A dish added while another request is mid-flight is not lost."""
        service = CatalogService(db_manager=file_db, max_conflict_retries=2)
        restaurant_id = service.create_restaurant(owner, {"name": "Sushi House"}).data.id

        original_create = DishRepository.create
        raced = {"done": False}

        def racing_create(self, *args, **kwargs):
            # Another request commits after this one has read the restaurant
            if not raced["done"]:
                raced["done"] = True
                rival = service.add_dish(
                    owner, {"restaurant_id": restaurant_id, "name": "Tuna Nigiri", "price": 6}
                )
                assert rival.ok
            return original_create(self, *args, **kwargs)

        monkeypatch.setattr(DishRepository, "create", racing_create)

        result = service.add_dish(
            owner, {"restaurant_id": restaurant_id, "name": "Salmon Roll", "price": 8.5}
        )
        monkeypatch.undo()

        assert result.ok
        assert dish_count(file_db) == 2
        assert keywords_of(service, owner, restaurant_id) == {
            "sushi": 1,
            "house": 1,
            "tuna": 1,
            "nigiri": 1,
            "salmon": 1,
            "roll": 1,
        }


class TestConflictRetry:
    """Tests for optimistic-lock retries."""

    def test_retries_after_concurrent_update(self, catalog_service, owner, restaurant, db_manager, monkeypatch):
        """The losing attempt is rolled back and replayed once."""
        original_save = RestaurantRepository.save
        calls = {"count": 0}

        def flaky_save(self, instance):
            calls["count"] += 1
            if calls["count"] == 1:
                raise StaleDataError("restaurant row changed underneath")
            return original_save(self, instance)

        monkeypatch.setattr(RestaurantRepository, "save", flaky_save)

        result = catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Salmon Roll", "price": 8.5}
        )
        monkeypatch.undo()

        assert result.ok
        assert calls["count"] == 2
        assert dish_count(db_manager) == 1
        assert keywords_of(catalog_service, owner, restaurant.id) == {
            "sushi": 1,
            "house": 1,
            "salmon": 1,
            "roll": 1,
        }

    def test_gives_up_after_max_retries(self, catalog_service, owner, restaurant, db_manager, monkeypatch):
        """Persistent conflicts end in an internal error with nothing written."""

        def always_stale(self, instance):
            raise StaleDataError("restaurant row changed underneath")

        monkeypatch.setattr(RestaurantRepository, "save", always_stale)

        result = catalog_service.add_dish(
            owner, {"restaurant_id": restaurant.id, "name": "Salmon Roll", "price": 8.5}
        )
        monkeypatch.undo()

        assert result.error.code == ErrorCode.INTERNAL_SERVER_ERROR
        assert dish_count(db_manager) == 0


class TestServiceResult:
    """Tests for result serialization."""

    def test_success_to_dict(self, catalog_service, owner):
        result = catalog_service.create_restaurant(owner, {"name": "Taco Stand"})

        payload = result.to_dict()

        assert payload["ok"] is True
        assert payload["data"]["name"] == "Taco Stand"
        assert payload["data"]["keywords"] == {"taco": 1, "stand": 1}

    def test_error_to_dict(self, catalog_service, owner):
        result = catalog_service.add_dish(owner, {"name": "Roll"})

        assert result.to_dict() == {
            "ok": False,
            "error": {"code": "BAD_REQUEST", "message": "Bad request, required fields are missing."},
        }
