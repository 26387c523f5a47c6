"""Database engine and session factory."""

from functools import lru_cache
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from backend.app.config import Settings, get_settings


def create_engine_from_settings(settings: Settings, **engine_kwargs: Any) -> Engine:
    """Create a sync SQLAlchemy engine from settings.

    Args:
        settings: Application settings carrying ``database_url``
        **engine_kwargs: Extra ``create_engine`` options (e.g. ``poolclass``)

    Raises:
        ValueError: If DATABASE_URL is unset or empty.
    """
    if not settings.database_url:
        raise ValueError(
            "DATABASE_URL must be set to a valid connection string. "
            "Unset it entirely to run on the in-memory store."
        )

    engine_kwargs.setdefault("pool_pre_ping", True)
    return create_engine(settings.database_url, **engine_kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Sessions keep loaded attributes after commit so records can be built from them."""
    return sessionmaker(bind=engine, expire_on_commit=False)


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    """Process-wide session factory built from settings."""
    return create_session_factory(create_engine_from_settings(get_settings()))
