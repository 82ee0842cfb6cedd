"""
database.py — Database Handle & Session Management

Purpose:
- Own the SQLAlchemy Engine + Session factory behind one explicit handle (Database).
- Give callers a scoped session: commit on success, rollback on failure, always close.
- Expose the shared declarative Base so every model lands in one metadata.

Key Characteristics:
- Synchronous SQLAlchemy engine; FastAPI runs sync endpoints in its threadpool.
- The handle is constructed by the application factory (or a test fixture) and
  passed to the repository. Nothing here is a module-level singleton.
- SQLite URLs (used by the test suite) get a single shared connection and
  enforced foreign keys, so ON DELETE CASCADE behaves as it does in Postgres.

This module does NOT:
- Define ORM models (see app/models/*).
- Perform any queries or business logic.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import normalize_database_url
from app.core.logging import get_logger

logger = get_logger(__name__)

# Base class for models
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseNotOpenError(RuntimeError):
    """Raised when a session is requested from a handle that is not open."""


class Database:
    """
    Explicit storage-client handle.

    Usage:
        db = Database(settings.database_uri).open()
        with db.session() as session:
            session.execute(...)
        db.close()

    or as a context manager:
        with Database("sqlite://") as db:
            ...
    """

    def __init__(self, url: str, **engine_kwargs: Any) -> None:
        self.url = normalize_database_url(url)
        self._engine_kwargs = engine_kwargs
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    # ------------------------------------------------------------------ #
    # Lifecycle
    def open(self) -> "Database":
        if self.engine is not None:
            return self

        kwargs: Dict[str, Any] = dict(self._engine_kwargs)
        if self.is_sqlite:
            kwargs.setdefault("connect_args", {"check_same_thread": False})
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                # one connection, otherwise every checkout sees an empty database
                kwargs.setdefault("poolclass", StaticPool)
        else:
            kwargs.setdefault("pool_pre_ping", True)  # Ensures connections are valid before use

        self.engine = create_engine(self.url, **kwargs)
        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self._session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )
        logger.info("Opened database engine (%s)", self.engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        logger.info("Closed database engine")
        self.engine = None
        self._session_factory = None

    def __enter__(self) -> "Database":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Sessions
    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Yield a session scoped to one unit of work.

        Raises:
            DatabaseNotOpenError: If the handle has not been opened.
        """
        if self._session_factory is None:
            raise DatabaseNotOpenError("Database is not open. Call Database.open() first.")

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ------------------------------------------------------------------ #
    # Schema helpers (use migrations in production)
    def create_all(self) -> None:
        # models must be imported so their tables register on Base.metadata
        import app.models.user  # noqa: F401

        Base.metadata.create_all(bind=self.open().engine)

    def drop_all(self) -> None:
        import app.models.user  # noqa: F401

        Base.metadata.drop_all(bind=self.open().engine)
