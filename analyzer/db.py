"""Database engine and session management for the local analysis store."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import Column, Integer, String, Text, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from dotenv import load_dotenv

# Load environment from .env if available so database configuration is discoverable.
load_dotenv()

LOGGER = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base declarative class used by all ORM models."""


class LocalStorageEntry(Base):
    """One key of the local key-value store; values are serialized strings."""

    __tablename__ = "local_storage"

    id = Column(Integer, primary_key=True)
    key = Column(String(128), nullable=False, unique=True)
    value = Column(Text, nullable=False)


def _build_sqlite_url() -> str:
    """Construct the default SQLite connection string."""
    sqlite_path_env = os.getenv("ANALYZER_SQLITE_PATH", "data/chat_analyzer.db")
    if sqlite_path_env == ":memory:":
        return "sqlite:///:memory:"

    project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    sqlite_path = os.path.expanduser(sqlite_path_env)
    if not os.path.isabs(sqlite_path):
        sqlite_path = os.path.normpath(os.path.join(project_root, sqlite_path))

    directory = os.path.dirname(sqlite_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    return f"sqlite:///{sqlite_path}"


def build_database_url() -> str:
    """Return the configured database URL, defaulting to a local SQLite file."""
    url = os.getenv("ANALYZER_DB_URL", "").strip()
    if url.startswith("sqlite://"):
        return url
    return _build_sqlite_url()


def build_engine(url: Optional[str] = None) -> Engine:
    """Create an engine for ``url`` and make sure the storage table exists."""
    url = url or build_database_url()
    engine_kwargs = {"future": True}
    if url.startswith("sqlite"):
        # Streamlit reruns scripts on worker threads.
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url == "sqlite://":
            engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(url, **engine_kwargs)
    Base.metadata.create_all(engine)
    safe_url = url if url.startswith("sqlite") else "redacted"
    LOGGER.info("Local storage ready (database_url=%s)", safe_url)
    return engine


@contextmanager
def session_scope(engine: Engine) -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""
    session = sessionmaker(bind=engine, expire_on_commit=False, future=True)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
