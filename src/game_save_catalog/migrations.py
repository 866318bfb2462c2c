"""Versioned schema migrations, applied when a catalog is opened.

Applied versions are recorded in ``schema_migrations`` so reopening an
existing store skips them. All pending migrations run in a single
``BEGIN IMMEDIATE`` transaction; two processes opening the same file at once
serialize on it and the second sees the first's work as already applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import Engine, text
from sqlalchemy.engine import Connection

from game_save_catalog.models.types import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    statements: tuple[str, ...]


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version=1,
        name="create_catalog",
        statements=(
            """
            CREATE TABLE game_metadata (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                steam_appid TEXT,
                default_name TEXT NOT NULL
            )
            """,
            "CREATE INDEX ix_game_metadata_default_name ON game_metadata (default_name)",
            """
            CREATE TABLE game_alt_name (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                game_metadata_id INTEGER NOT NULL
                    REFERENCES game_metadata (id) ON DELETE CASCADE
            )
            """,
            """
            CREATE TABLE game_path (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                path TEXT NOT NULL,
                operating_system INTEGER NOT NULL,
                game_metadata_id INTEGER NOT NULL
                    REFERENCES game_metadata (id) ON DELETE CASCADE
            )
            """,
            """
            CREATE TABLE game_executable (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                executable TEXT NOT NULL,
                operating_system INTEGER NOT NULL,
                game_metadata_id INTEGER NOT NULL
                    REFERENCES game_metadata (id) ON DELETE CASCADE
            )
            """,
            """
            CREATE TABLE game_save (
                uuid TEXT NOT NULL PRIMARY KEY,
                path_id INTEGER NOT NULL
                    REFERENCES game_path (id) ON DELETE CASCADE,
                time DATETIME NOT NULL
            )
            """,
            """
            CREATE TABLE file_hash (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                relative_path TEXT NOT NULL,
                hash TEXT NOT NULL,
                game_save_uuid TEXT NOT NULL
                    REFERENCES game_save (uuid) ON DELETE CASCADE
            )
            """,
        ),
    ),
    Migration(
        version=2,
        name="foreign_key_indexes",
        statements=(
            "CREATE INDEX ix_game_alt_name_game_metadata_id ON game_alt_name (game_metadata_id)",
            "CREATE INDEX ix_game_path_game_metadata_id ON game_path "
            "(game_metadata_id, operating_system)",
            "CREATE INDEX ix_game_executable_game_metadata_id ON game_executable "
            "(game_metadata_id, operating_system)",
            "CREATE INDEX ix_game_save_path_id ON game_save (path_id)",
            "CREATE INDEX ix_file_hash_game_save_uuid ON file_hash (game_save_uuid)",
        ),
    ),
)

LATEST_VERSION = MIGRATIONS[-1].version


def _ensure_bookkeeping(conn: Connection) -> None:
    conn.execute(
        text(
            "CREATE TABLE IF NOT EXISTS schema_migrations ("
            "version INTEGER PRIMARY KEY, name TEXT NOT NULL, applied_at DATETIME NOT NULL)"
        )
    )


def applied_versions(conn: Connection) -> set[int]:
    _ensure_bookkeeping(conn)
    rows = conn.execute(text("SELECT version FROM schema_migrations")).all()
    return {r[0] for r in rows}


def run_pending_migrations(engine: Engine) -> list[int]:
    """Apply every migration not yet recorded; return the versions applied."""
    applied: list[int] = []
    with engine.connect() as conn:
        conn.execution_options(sqlite_begin="IMMEDIATE")
        with conn.begin():
            done = applied_versions(conn)
            for migration in MIGRATIONS:
                if migration.version in done:
                    continue
                logger.info("Migrating: applying %03d_%s", migration.version, migration.name)
                for ddl in migration.statements:
                    conn.execute(text(ddl))
                conn.execute(
                    text(
                        "INSERT INTO schema_migrations (version, name, applied_at) "
                        "VALUES (:version, :name, :applied_at)"
                    ),
                    {
                        "version": migration.version,
                        "name": migration.name,
                        "applied_at": utcnow().replace(tzinfo=None).isoformat(sep=" "),
                    },
                )
                applied.append(migration.version)
    if not applied:
        logger.debug("Schema up to date at version %d", LATEST_VERSION)
    return applied


def current_version(engine: Engine) -> int:
    with engine.connect() as conn, conn.begin():
        versions = applied_versions(conn)
    return max(versions, default=0)
