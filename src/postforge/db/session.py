"""Database handle and session management.

The application never reaches for a process-wide connection: a
``Database`` is constructed explicitly, opened, handed to whoever needs
it (the API app factory, scripts, tests), and closed when done.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from postforge.db.defaults import seed_default_settings
from postforge.db.schema import Base

logger = logging.getLogger(__name__)

# Default database path
DEFAULT_DB_PATH = Path("data/postforge.db")

IN_MEMORY_URL = "sqlite://"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """Turn on FK enforcement so ON DELETE CASCADE/SET NULL apply."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Explicitly managed storage handle.

    Wraps a SQLAlchemy engine and session factory with an open/close
    lifecycle. Usable as a context manager::

        with Database.from_path(path) as db:
            db.create_schema()
            with db.session_scope() as session:
                ...
    """

    def __init__(self, url: str = IN_MEMORY_URL, *, echo: bool = False):
        """Initialize handle (does not connect).

        Args:
            url: SQLAlchemy database URL. Defaults to an in-memory SQLite DB.
            echo: Log emitted SQL.
        """
        self.url = url
        self.echo = echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @classmethod
    def from_path(cls, db_path: Path | str | None = None, *, echo: bool = False) -> Database:
        """Build a handle for a SQLite database file.

        Args:
            db_path: Path to SQLite database file. Defaults to data/postforge.db.
            echo: Log emitted SQL.

        Returns:
            Unopened Database handle.
        """
        path = Path(db_path) if db_path is not None else DEFAULT_DB_PATH
        return cls(f"sqlite:///{path}", echo=echo)

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> Database:
        """Create the engine and session factory.

        Opening an already-open handle is a no-op.

        Returns:
            self, for chaining.
        """
        if self._engine is not None:
            return self

        if self.url.startswith("sqlite"):
            database = self.url.split("///", 1)[1] if "///" in self.url else ""
            if database and database != ":memory:":
                # Create parent directories only for file databases
                Path(database).parent.mkdir(parents=True, exist_ok=True)

            # SQLite thread-safety config for FastAPI concurrency:
            # - check_same_thread=False: Allow multi-threaded access
            # - StaticPool: Single connection shared across threads
            engine = create_engine(
                self.url,
                echo=self.echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        else:
            engine = create_engine(self.url, echo=self.echo)

        self._engine = engine
        self._session_factory = sessionmaker(bind=engine)
        logger.info("Opened database %s", engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        """Dispose of the engine. Closing a closed handle is a no-op."""
        if self._engine is None:
            return
        self._engine.dispose()
        logger.info("Closed database %s", self._engine.url.render_as_string(hide_password=True))
        self._engine = None
        self._session_factory = None

    def create_schema(self) -> None:
        """Create tables and seed default settings.

        Idempotent: existing tables and setting values are left untouched.
        """
        Base.metadata.create_all(self.engine)
        with self.session_scope() as session:
            seed_default_settings(session)

    def session(self) -> Session:
        """Get a new SQLAlchemy session.

        Note: Caller is responsible for closing the session. For automatic
        resource management, use session_scope() instead.
        """
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Context manager for sessions with automatic cleanup.

        Commits on successful exit, rolls back on exception, and always
        closes the session.
        """
        session = self.session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def __enter__(self) -> Database:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
