"""
Database connection and session management.

A session opened through ``get_db()`` or ``DatabaseManager.session()`` is one
transaction: it commits when the block exits normally and rolls back on any
exception, so catalog workflows that touch both a dish and its restaurant
either persist both changes or neither.
"""

from contextlib import contextmanager
from typing import TYPE_CHECKING, Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from eats_catalog.config import get_config
from eats_catalog.logger import get_logger
from eats_catalog.models import Base

if TYPE_CHECKING:
    from eats_catalog.config import DatabaseConfig

logger = get_logger(__name__)

# Global engine and session factory
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def _create_engine(db_config: "DatabaseConfig") -> Engine:
    """Create an engine for a database configuration via its dialect."""
    from eats_catalog.storage.dialects import get_dialect

    dialect = get_dialect(db_config.type)

    for problem in dialect.validate_config(db_config):
        logger.warning(f"Database configuration problem: {problem}")

    url = dialect.build_url(db_config)
    engine = create_engine(url, **dialect.get_engine_kwargs(db_config))

    # Dialect-specific events (e.g., SQLite PRAGMA)
    dialect.setup_engine_events(engine)
    return engine


def get_engine() -> Engine:
    """Get or create the database engine.

    Returns:
        SQLAlchemy Engine instance
    """
    global _engine

    if _engine is None:
        _engine = _create_engine(get_config().database)

    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create the session factory.

    Returns:
        SQLAlchemy sessionmaker instance
    """
    global _session_factory

    if _session_factory is None:
        _session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=get_engine(),
        )

    return _session_factory


@contextmanager
def get_db() -> Generator[Session, None, None]:
    """Get a database session.

    Yields:
        SQLAlchemy Session instance

    Example:
        >>> with get_db() as session:
        ...     restaurants = session.query(RestaurantModel).all()
    """
    session = get_session_factory()()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(drop_all: bool = False, use_migrations: bool = True) -> None:
    """Initialize the configured database.

    Args:
        drop_all: If True, drop all tables before creating them (DANGEROUS!)
        use_migrations: If True, run Alembic migrations instead of create_all().
                        Set to False for testing only.
    """
    engine = get_engine()

    if drop_all:
        logger.warning("Dropping all tables - data will be lost!")
        Base.metadata.drop_all(bind=engine)

    if not use_migrations:
        logger.warning("Using direct table creation (not recommended for production)")
        Base.metadata.create_all(bind=engine)
        return

    from alembic import command
    from alembic.config import Config

    logger.info("Running database migrations")
    try:
        command.upgrade(Config("alembic.ini"), "head")
        logger.info("Database migrations completed")
    except Exception as e:
        logger.warning(f"Could not run migrations: {e}, falling back to create_all")
        Base.metadata.create_all(bind=engine)


def close_db() -> None:
    """Close the database connection and dispose of the engine."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
        _engine = None

    _session_factory = None


class DatabaseManager:
    """Database manager for context-managed database operations."""

    def __init__(self, db_path: Optional[str] = None, db_config: Optional["DatabaseConfig"] = None):
        """Initialize database manager.

        Args:
            db_path: Optional SQLite database path (":memory:" for tests).
            db_config: Optional custom database configuration.

        Note:
            If neither db_path nor db_config is provided, uses the global config.
        """
        self._custom_db_path = db_path
        self._custom_db_config = db_config
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        """Get the database engine."""
        if self._engine is None:
            if self._custom_db_path:
                from eats_catalog.config import DatabaseConfig

                self._engine = _create_engine(
                    DatabaseConfig(type="sqlite", path=self._custom_db_path, echo=False)
                )
            elif self._custom_db_config:
                self._engine = _create_engine(self._custom_db_config)
            else:
                self._engine = get_engine()

        return self._engine

    def init_db(self, drop_all: bool = False) -> None:
        """Initialize database tables.

        Args:
            drop_all: If True, drop existing tables first
        """
        if drop_all:
            Base.metadata.drop_all(bind=self.engine)

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Get a transactional database session.

        Yields:
            SQLAlchemy Session instance
        """
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
                bind=self.engine,
            )
        session = self._session_factory()

        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Close database connections."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
        self._session_factory = None

    def __enter__(self) -> "DatabaseManager":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
