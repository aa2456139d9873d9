"""Database engine and session helpers for EcoLog.

This module supports both:
- Local SQLite (default for dev)
- PostgreSQL in production via `DATABASE_URL`

Nothing here is created at import time; the storage factory builds an
engine when the process starts.
"""

import os
from typing import Optional
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv

load_dotenv()

# Database URL - SQLite by default (local dev)
DEFAULT_DATABASE_URL = "sqlite:///./ecolog.db"

# Base class for declarative models
Base = declarative_base()


def _is_sqlite_url(database_url: str) -> bool:
    return "sqlite" in (database_url or "")


def get_engine_kwargs(database_url: str) -> dict:
    """Return deterministic create_engine kwargs for a DB URL.

    This is separated to allow deterministic unit testing without connecting.
    """
    engine_kwargs: dict = {
        "echo": os.getenv("DEBUG", "False").lower() == "true",
        "pool_pre_ping": True,
    }

    if _is_sqlite_url(database_url):
        # SQLite-specific setting required for FastAPI concurrency in a single process.
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        return engine_kwargs

    # Postgres / other DBs: keep pooling conservative.
    engine_kwargs["pool_size"] = int(os.getenv("DB_POOL_SIZE", "5"))
    engine_kwargs["max_overflow"] = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    engine_kwargs["pool_timeout"] = int(os.getenv("DB_POOL_TIMEOUT_SEC", "30"))
    return engine_kwargs


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    """Enable foreign keys (required for cascade deletes) on every SQLite connection."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, **overrides) -> Engine:
    """Create an engine for `database_url`; `overrides` replace computed kwargs."""
    engine_kwargs = get_engine_kwargs(database_url)
    engine_kwargs.update(overrides)
    engine = create_engine(database_url, **engine_kwargs)
    if _is_sqlite_url(database_url):
        event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to `engine`."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine, database_url: Optional[str] = None) -> None:
    """Initialize database schema.

    - SQLite (default dev): use `create_all()`.
    - PostgreSQL: prefer Alembic migrations. Enable by setting
      `RUN_MIGRATIONS=true` in the environment.
    """
    # Register mapped classes on Base.metadata
    from ecolog.database import models  # noqa: F401

    database_url = database_url or str(engine.url)
    run_migrations = os.getenv("RUN_MIGRATIONS", "False").lower() == "true"
    if run_migrations and not _is_sqlite_url(database_url):
        from alembic import command
        from alembic.config import Config

        alembic_cfg = Config(os.getenv("ALEMBIC_INI", "alembic.ini"))
        # Ensure Alembic uses the same runtime DB URL.
        alembic_cfg.set_main_option("sqlalchemy.url", database_url)
        command.upgrade(alembic_cfg, "head")
        return

    Base.metadata.create_all(bind=engine)
