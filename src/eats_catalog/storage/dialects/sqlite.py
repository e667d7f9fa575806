"""SQLite dialect implementation."""

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import Engine, event, func
from sqlalchemy.pool import QueuePool, StaticPool

from eats_catalog.storage.dialects.base import BaseDialect

if TYPE_CHECKING:
    from eats_catalog.config import DatabaseConfig

MEMORY_PATH = ":memory:"


class SQLiteDialect(BaseDialect):
    """SQLite database dialect.

    SQLite is the default database. It requires no external database server
    and is suitable for single-node deployments, development and tests.

    Features:
    - Embedded database (no server required)
    - WAL mode for better concurrent read access
    - Foreign key constraints enabled
    - StaticPool for in-memory databases, QueuePool otherwise
    - JSON1 functions for keyword lookups
    """

    @property
    def name(self) -> str:
        """Get dialect name."""
        return "sqlite"

    def build_url(self, config: "DatabaseConfig") -> str:
        """Build SQLite database URL.

        Args:
            config: Database configuration

        Returns:
            SQLAlchemy URL string

        Note:
            - path: "data/eats_catalog.db" -> "sqlite:///data/eats_catalog.db"
            - path: ":memory:" -> "sqlite:///:memory:"
            - path: "sqlite:///data/eats_catalog.db" -> unchanged
        """
        db_path = config.path

        if db_path.startswith("sqlite://"):
            return db_path

        if db_path != MEMORY_PATH:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        return f"sqlite:///{db_path}"

    def get_engine_kwargs(self, config: "DatabaseConfig") -> dict:
        """Get SQLite-specific engine kwargs.

        Args:
            config: Database configuration

        Returns:
            Dictionary of engine kwargs

        Note:
            An in-memory database lives inside a single connection, so it
            must be shared through StaticPool.
            JSON is stored unescaped so key paths match non-ASCII keywords.
        """
        connect_args = {
            "check_same_thread": False,  # Needed for SQLite
            "timeout": 30,  # 30 second timeout for locks
        }

        if self._is_memory(config):
            return {
                "echo": config.echo,
                "connect_args": connect_args,
                "json_serializer": self.json_serializer,
                "poolclass": StaticPool,
            }

        return {
            "echo": config.echo,
            "connect_args": connect_args,
            "json_serializer": self.json_serializer,
            "poolclass": QueuePool,
            "pool_size": config.pool_size,
            "max_overflow": config.max_overflow,
        }

    def has_key(self, column, key: str):
        """JSON1 ``json_type`` yields NULL when the path is missing."""
        return func.json_type(column, self.json_key_path(key)).is_not(None)

    def setup_engine_events(self, engine: Engine) -> None:
        """Set up SQLite PRAGMA statements.

        Args:
            engine: SQLAlchemy engine
        """
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    def get_migration_kwargs(self) -> dict:
        """Get Alembic migration kwargs.

        Returns:
            Dictionary with render_as_batch=True for SQLite
        """
        return {
            "render_as_batch": True,  # Required for SQLite ALTER TABLE
        }

    def validate_config(self, config: "DatabaseConfig") -> list[str]:
        """Validate SQLite configuration.

        Args:
            config: Database configuration

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self._is_memory(config):
            return errors

        db_path = Path(config.path)
        if db_path.exists() and not db_path.is_file():
            errors.append(f"Database path exists but is not a file: {config.path}")

        return errors

    @staticmethod
    def _is_memory(config: "DatabaseConfig") -> bool:
        return config.path in (MEMORY_PATH, f"sqlite:///{MEMORY_PATH}", "sqlite://")
