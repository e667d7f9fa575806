"""Alembic migration environment configuration for eats catalog.

Uses the application's pydantic-settings configuration and dialect system,
so migrations always target the same database as the application.
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config

from alembic import context

from eats_catalog.config import get_config
from eats_catalog.models import Base
from eats_catalog.storage.dialects import get_dialect

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

db_config = get_config().database
dialect = get_dialect(db_config.type)
db_url = dialect.build_url(db_config)

config.set_main_option("sqlalchemy.url", db_url)

# restaurants, dishes
target_metadata = Base.metadata

migration_kwargs = dialect.get_migration_kwargs()


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL to the script output."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **migration_kwargs,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live connection."""
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = db_url

    engine_kwargs = dialect.get_engine_kwargs(db_config)
    # Alembic has its own logging
    engine_kwargs.pop("echo", None)

    connectable = engine_from_config(configuration, prefix="sqlalchemy.", **engine_kwargs)
    dialect.setup_engine_events(connectable)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
            **migration_kwargs,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
