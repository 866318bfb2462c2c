"""Catalog store handle: engine, connection pragmas, and scoped transactions.

A ``CatalogDatabase`` is created explicitly by the caller and passed to every
repository function; there is no module-level engine. Closing the handle
disposes its connection pool.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from pathlib import Path
from types import TracebackType
from typing import Self

from sqlalchemy import Engine, event, exc as sa_exc, make_url
from sqlalchemy.pool import QueuePool, StaticPool
from sqlmodel import Session, create_engine

from game_save_catalog.config import Settings
from game_save_catalog.config import settings as default_settings
from game_save_catalog.errors import CatalogConnectionError, CatalogStorageError
from game_save_catalog.migrations import current_version, run_pending_migrations

logger = logging.getLogger(__name__)

_MEMORY_LOCATIONS = {"", ":memory:"}


def database_url(location: str | Path) -> str:
    """Turn a storage location into a SQLite URL, creating parent directories."""
    location = str(location)
    if location in _MEMORY_LOCATIONS:
        return "sqlite://"
    if "://" in location:
        if make_url(location).get_backend_name() != "sqlite":
            raise ValueError(f"Only SQLite stores are supported, got {location!r}")
        return location
    path = Path(location)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CatalogConnectionError(
            f"Cannot create storage location {path.parent}: {exc}"
        ) from exc
    return f"sqlite:///{path}"


def _install_sqlite_hooks(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        # pysqlite's implicit BEGIN is disabled; _begin below emits our own
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn):
        mode = conn.get_execution_options().get("sqlite_begin", "DEFERRED")
        conn.exec_driver_sql(f"BEGIN {mode}")


def build_engine(url: str, settings: Settings) -> Engine:
    connect_args = {"timeout": settings.busy_timeout, "check_same_thread": False}
    if make_url(url).database in (None, "", ":memory:"):
        engine = create_engine(
            url,
            echo=settings.echo_sql,
            connect_args=connect_args,
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(
            url,
            echo=settings.echo_sql,
            connect_args=connect_args,
            poolclass=QueuePool,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_timeout=settings.pool_timeout,
        )
    _install_sqlite_hooks(engine)
    return engine


class CatalogDatabase:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        # in-memory stores share one connection; callers take turns on it
        self._shared_connection_lock = (
            threading.RLock() if isinstance(engine.pool, StaticPool) else None
        )

    @classmethod
    def open(cls, location: str | Path, settings: Settings | None = None) -> Self:
        """Open or create the store at ``location`` and apply pending migrations.

        ``location`` may be a file path, ``":memory:"``, or a ``sqlite://`` URL.

        Raises:
            CatalogConnectionError: If the store cannot be reached or created.
            CatalogStorageError: If a migration fails.
        """
        settings = settings or default_settings
        url = database_url(location)
        engine = build_engine(url, settings)
        try:
            engine.connect().close()
        except (sa_exc.TimeoutError, sa_exc.DBAPIError) as exc:
            engine.dispose()
            raise CatalogConnectionError(f"Cannot open catalog at {location}: {exc}") from exc
        try:
            applied = run_pending_migrations(engine)
        except sa_exc.SQLAlchemyError as exc:
            engine.dispose()
            raise CatalogStorageError(f"Migration failed for {location}: {exc}") from exc
        logger.info(
            "Catalog opened at %s (%d migration(s) applied)",
            engine.url.render_as_string(hide_password=True),
            len(applied),
        )
        return cls(engine)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> Self:
        settings = settings or default_settings
        return cls.open(settings.db_path, settings)

    @property
    def schema_version(self) -> int:
        return current_version(self.engine)

    @contextmanager
    def transaction(self, *, immediate: bool = False) -> Iterator[Session]:
        """Borrow a connection and run one transaction on it.

        ``immediate`` takes the write lock up front (``BEGIN IMMEDIATE``) so
        concurrent writers cannot interleave. The transaction commits when
        the block exits normally and rolls back on any exception; the
        connection goes back to the pool either way. In-memory stores have a
        single connection, so their transactions run one at a time.
        """
        with self._shared_connection_lock or nullcontext():
            try:
                conn = self.engine.connect()
            except sa_exc.TimeoutError as exc:
                raise CatalogConnectionError("Connection pool exhausted") from exc
            except sa_exc.DBAPIError as exc:
                raise CatalogConnectionError(f"Catalog store unreachable: {exc}") from exc

            with conn:
                conn.execution_options(sqlite_begin="IMMEDIATE" if immediate else "DEFERRED")
                try:
                    with Session(bind=conn, expire_on_commit=False) as session, session.begin():
                        yield session
                except sa_exc.SQLAlchemyError as exc:
                    logger.debug("Transaction rolled back: %s", exc)
                    raise CatalogStorageError(str(exc)) from exc

    def close(self) -> None:
        self.engine.dispose()
        logger.info("Catalog closed")

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
