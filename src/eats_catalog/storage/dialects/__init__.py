"""Database dialect system for eats catalog.

Lets the catalog run on SQLite, PostgreSQL or MySQL, and hides the JSON
key lookup syntax of each backend behind ``BaseDialect.has_key``.
"""

from sqlalchemy import Engine

from eats_catalog.storage.dialects.base import BaseDialect
from eats_catalog.storage.dialects.mysql import MySQLDialect
from eats_catalog.storage.dialects.postgresql import PostgreSQLDialect
from eats_catalog.storage.dialects.sqlite import SQLiteDialect

# Dialect registry
_DIALECT_REGISTRY: dict[str, type[BaseDialect]] = {
    "sqlite": SQLiteDialect,
    "postgresql": PostgreSQLDialect,
    "postgres": PostgreSQLDialect,  # Alias
    "mysql": MySQLDialect,
}


def get_dialect(name: str) -> BaseDialect:
    """Get a dialect instance by name.

    Args:
        name: Dialect name (sqlite, postgresql, mysql).
               "postgres" is accepted as an alias for "postgresql".

    Returns:
        Dialect instance

    Raises:
        ValueError: If dialect name is not supported
    """
    name_lower = name.lower()
    if name_lower not in _DIALECT_REGISTRY:
        supported = ", ".join(get_supported_dialects())
        raise ValueError(
            f"Unsupported database dialect: {name!r}. "
            f"Supported dialects: {supported}"
        )

    return _DIALECT_REGISTRY[name_lower]()


def get_dialect_for_engine(engine: Engine) -> BaseDialect:
    """Get the dialect matching a live engine (or connection bind).

    Args:
        engine: SQLAlchemy engine or connection

    Returns:
        Dialect instance for the engine's backend
    """
    return get_dialect(engine.dialect.name)


def register_dialect(name: str, dialect_class: type[BaseDialect]) -> None:
    """Register a custom dialect.

    Args:
        name: Dialect name
        dialect_class: Dialect class to register
    """
    _DIALECT_REGISTRY[name.lower()] = dialect_class


def get_supported_dialects() -> list[str]:
    """Get list of supported dialect names.

    Returns:
        List of dialect names
    """
    return sorted(set(_DIALECT_REGISTRY.keys()))


__all__ = [
    "BaseDialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "MySQLDialect",
    "get_dialect",
    "get_dialect_for_engine",
    "register_dialect",
    "get_supported_dialects",
]
