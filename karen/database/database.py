"""Database connection and session management for karen.

This module supports both:
- Local SQLite (default for dev/tests)
- MySQL or PostgreSQL via `DATABASE_URL`, or MySQL built from the `KAREN_DB_*` variables
"""

import os
from urllib.parse import quote_plus
from typing import Optional
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.ext.declarative import declarative_base
from dotenv import load_dotenv

load_dotenv()


def build_database_url(environ: Optional[dict] = None) -> str:
    """Resolve the database URL from the environment.

    `DATABASE_URL` wins. Otherwise, if `KAREN_DB_LOCATION` is set, a MySQL URL is
    assembled from the `KAREN_DB_*` variables. Falls back to a local SQLite file.
    """
    env = os.environ if environ is None else environ
    url = env.get("DATABASE_URL")
    if url:
        return url

    location = env.get("KAREN_DB_LOCATION")
    if location:
        username = env.get("KAREN_DB_USERNAME", "")
        password = env.get("KAREN_DB_PASSWORD", "")
        name = env.get("KAREN_DB_NAME", "karen")
        credentials = f"{quote_plus(username)}:{quote_plus(password)}@" if username else ""
        return f"mysql+pymysql://{credentials}{location}/{name}"

    return "sqlite:///./karen.db"


DATABASE_URL = build_database_url()


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
        # Request handlers run in a threadpool; one process shares the SQLite file.
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        return engine_kwargs

    engine_kwargs["pool_size"] = int(os.getenv("DB_POOL_SIZE", "5"))
    engine_kwargs["max_overflow"] = int(os.getenv("DB_MAX_OVERFLOW", "5"))
    engine_kwargs["pool_timeout"] = int(os.getenv("DB_POOL_TIMEOUT_SEC", "30"))
    return engine_kwargs


def build_engine(database_url: str) -> Engine:
    return create_engine(database_url, **get_engine_kwargs(database_url))


# Create engine (module-level singleton)
engine = build_engine(DATABASE_URL)


@event.listens_for(Engine, "connect")
def set_sqlite_pragmas(dbapi_conn, connection_record):
    """Enable foreign keys and WAL on SQLite connections."""
    if _is_sqlite_url(DATABASE_URL):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for declarative models
Base = declarative_base()


def get_db() -> Session:
    """Get database session (dependency for FastAPI)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database schema.

    - SQLite (default dev): use `create_all()`.
    - MySQL/PostgreSQL: run Alembic migrations when `RUN_MIGRATIONS=true`,
      otherwise fall back to `create_all()`.
    """
    # Register models on Base.metadata before create_all().
    from karen.database import models  # noqa: F401

    run_migrations = os.getenv("RUN_MIGRATIONS", "False").lower() == "true"
    if run_migrations and not _is_sqlite_url(DATABASE_URL):
        from alembic import command
        from alembic.config import Config

        alembic_cfg = Config(os.getenv("ALEMBIC_INI", "alembic.ini"))
        alembic_cfg.set_main_option("sqlalchemy.url", DATABASE_URL)
        command.upgrade(alembic_cfg, "head")
        return

    Base.metadata.create_all(bind=engine)
