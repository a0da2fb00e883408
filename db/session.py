"""
db/session.py

SQLAlchemy engine and session factory for the district cache database.

Each request holds one session. The district service ends its read
transaction before calling the provider, so the pool only needs to cover
concurrent cache reads and writes, not concurrent provider scans.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import resolve_database_url


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, ""))
    except ValueError:
        return default


def _pool_options() -> dict[str, Any]:
    """Pool sizing from DB_POOL_SIZE, DB_MAX_OVERFLOW and DB_POOL_RECYCLE."""
    return {
        "pool_pre_ping": True,
        "pool_size": _env_int("DB_POOL_SIZE", 5),
        "max_overflow": _env_int("DB_MAX_OVERFLOW", 10),
        "pool_recycle": _env_int("DB_POOL_RECYCLE", 1800),
    }


def create_db_engine() -> Engine:
    """
    Build the engine for the district cache.

    The cache relies on JSONB and ``INSERT ... ON CONFLICT``; only PostgreSQL
    URLs are accepted.
    """

    database_url = resolve_database_url()
    if not database_url.startswith("postgresql"):
        raise RuntimeError("Only PostgreSQL URLs are supported for the district cache.")
    return create_engine(database_url, echo=_env_flag("SQL_ECHO"), **_pool_options())


_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def get_engine() -> Engine:
    """Return the shared engine, creating it on first call."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def SessionLocal() -> Session:
    """Open a session on the shared engine; snapshots stay readable after commit."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_factory()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency: one session per district request, closed afterwards.

    Commit and rollback belong to the district service; closing here only
    returns the connection to the pool.
    """

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
