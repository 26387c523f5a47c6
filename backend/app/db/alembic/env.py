"""Alembic environment for the flex_doc / doc_version / share schema.

The database URL comes from app settings; ``alembic -x db_url=...`` overrides
it for one-off runs against another database.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool

from backend.app.config import get_settings
from backend.app.db.engine import create_engine_from_settings
from backend.app.db.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _settings():
    settings = get_settings()
    override = context.get_x_argument(as_dictionary=True).get("db_url")
    if override:
        settings = settings.model_copy(update={"database_url": override})
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL must be set to run migrations")
    return settings


def run_migrations_offline() -> None:
    """Emit migration SQL to the script output without connecting."""
    context.configure(
        url=_settings().database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations on a connection from the app's own engine factory."""
    engine = create_engine_from_settings(_settings(), poolclass=pool.NullPool)

    with engine.connect() as connection:
        # sqlite needs batch mode to alter tables
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()

    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
