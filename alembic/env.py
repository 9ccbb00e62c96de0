"""Alembic environment file."""
import asyncio
from pathlib import Path

from alembic import context
from oes.skating.config import load_config
from oes.skating.entities.base import import_entities
from oes.skating.entities.base import metadata as target_metadata
from oes.skating.log import setup_logging
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

setup_logging()
import_entities()

config = context.config


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Emits the SQL to the script output instead of connecting to a database.
    """
    url = get_db_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    url = get_db_url()
    engine = create_async_engine(url, poolclass=pool.NullPool)
    asyncio.run(run_async_migrations(engine))


async def run_async_migrations(engine):
    """Async migration runner."""
    async with engine.connect() as connection:
        await connection.run_sync(run_migrations)
    await engine.dispose()


def run_migrations(connection):
    """Run migrations synchronously."""
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


def get_db_url():
    """Get the DB url from the server config file."""
    config_base_dir = Path(config.config_file_name).parent
    config_path_str = config.get_section_option("oes.skating", "config_file")

    server_config = load_config(config_base_dir / Path(config_path_str))
    return server_config.database.url


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
