"""Shared pytest fixtures."""

import pytest
from sqlalchemy.orm import Session

from eats_catalog.core.services import CatalogService, SearchService
from eats_catalog.models import Caller
from eats_catalog.storage.database import DatabaseManager


@pytest.fixture
def db_manager():
    """Create a test database manager on an in-memory SQLite database."""
    manager = DatabaseManager(":memory:")
    manager.init_db()
    yield manager
    manager.close()


@pytest.fixture
def db_session(db_manager: DatabaseManager) -> Session:
    """Create a test database session."""
    with db_manager.session() as session:
        yield session


@pytest.fixture
def catalog_service(db_manager: DatabaseManager) -> CatalogService:
    """Catalog service bound to the test database."""
    return CatalogService(db_manager=db_manager, max_conflict_retries=2)


@pytest.fixture
def search_service(db_manager: DatabaseManager) -> SearchService:
    """Search service bound to the test database."""
    return SearchService(db_manager=db_manager, default_limit=10)


@pytest.fixture
def owner() -> Caller:
    return Caller(id=1)


@pytest.fixture
def other_owner() -> Caller:
    return Caller(id=2)
