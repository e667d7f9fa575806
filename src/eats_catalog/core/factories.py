"""
Factory functions for creating core components from configuration.

Usage:
    from eats_catalog.core.factories import (
        create_database_manager,
        create_keyword_extractor,
    )
"""

from typing import Optional

from eats_catalog.config import DatabaseConfig, get_config
from eats_catalog.core.keyword_extractor import KeywordExtractor
from eats_catalog.storage.database import DatabaseManager


def create_keyword_extractor() -> KeywordExtractor:
    """Create a KeywordExtractor instance.

    Returns:
        KeywordExtractor instance
    """
    return KeywordExtractor()


def create_database_manager(db_config: Optional[DatabaseConfig] = None) -> DatabaseManager:
    """Create a DatabaseManager for the configured (or given) database.

    Args:
        db_config: Override the global database configuration

    Returns:
        DatabaseManager instance
    """
    return DatabaseManager(db_config=db_config or get_config().database)
