# app/database.py
from functools import lru_cache

from sqlalchemy import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from app.core.config import get_settings
from app.repositories.sweet_repo import (
    InMemorySweetRepository,
    SqlSweetRepository,
    SweetRepository,
)
from app.repositories.user_repo import (
    InMemoryUserRepository,
    SqlUserRepository,
    UserRepository,
)

settings = get_settings()

# ---------------------------------------------------------
# Storage backends
#
# - memory   : volatile dicts, lost on restart (default)
# - database : SQLModel tables behind DATABASE_URL
#
# Both implement the same repository contract, routers only ever
# see UserRepository / SweetRepository through the providers below.
# ---------------------------------------------------------


def make_engine(db_url: str) -> Engine:
    """
    Build an engine for `db_url`.

    SQLite needs check_same_thread=False because FastAPI serves sync
    endpoints from a thread pool; in-memory SQLite also needs a single
    shared connection or every checkout would see an empty database.
    """
    if db_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(db_url, echo=False, **kwargs)

    return create_engine(db_url, echo=False, pool_pre_ping=True)


@lru_cache
def get_engine() -> Engine:
    return make_engine(settings.DATABASE_URL)


def create_db_and_tables(engine: Engine) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    Only relevant for the database backend; called once on startup.
    """
    SQLModel.metadata.create_all(engine)


@lru_cache
def get_user_repo() -> UserRepository:
    """
    FastAPI dependency returning the process-wide credential store.

    Tests swap it with `app.dependency_overrides[get_user_repo]`.
    """
    if settings.STORAGE_BACKEND == "database":
        return SqlUserRepository(get_engine())
    return InMemoryUserRepository()


@lru_cache
def get_sweet_repo() -> SweetRepository:
    """FastAPI dependency returning the process-wide inventory store."""
    if settings.STORAGE_BACKEND == "database":
        return SqlSweetRepository(get_engine())
    return InMemorySweetRepository()
