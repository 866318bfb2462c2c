"""Catalog operations: game metadata, paths, executables and save history.

Every function takes the ``CatalogDatabase`` handle as its first argument and
runs as one unit of work. Writes spanning several rows (a game with its
aliases, a save with its file hashes) take the write lock up front so no
other writer can observe a partial group; multi-step reads share one
transaction so they see a consistent snapshot.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from uuid import UUID

from sqlmodel import Session, select

from game_save_catalog.database import CatalogDatabase
from game_save_catalog.errors import CatalogIntegrityError
from game_save_catalog.mapper import (
    alt_names_to_rows,
    executable_to_row,
    file_hashes_to_rows,
    game_to_row,
    path_to_row,
    row_to_executable,
    row_to_game,
    row_to_path,
    row_to_save_reference,
)
from game_save_catalog.models.game import Game, GameAltName, GameExecutable, GamePath
from game_save_catalog.models.save import GameSave, SaveFileHash
from game_save_catalog.models.types import OperatingSystem, utcnow
from game_save_catalog.schemas.game import (
    Executable,
    ExecutableCreate,
    GameMetadata,
    GameMetadataCreate,
    SavePath,
    SavePathCreate,
)
from game_save_catalog.schemas.save import FileHash, SaveReference

logger = logging.getLogger(__name__)


def _alt_names_by_game(session: Session, game_ids: list[int]) -> dict[int, list[str]]:
    grouped: dict[int, list[str]] = defaultdict(list)
    if not game_ids:
        return grouped
    rows = session.exec(
        select(GameAltName)
        .where(GameAltName.game_metadata_id.in_(game_ids))  # type: ignore[attr-defined]
        .order_by(GameAltName.id)  # type: ignore[arg-type]
    ).all()
    for row in rows:
        grouped[row.game_metadata_id].append(row.name)
    return grouped


def _hydrate(session: Session, games: Sequence[Game]) -> list[GameMetadata]:
    # rows without an id cannot own aliases and are not valid catalog entries
    valid = [g for g in games if g.id is not None]
    names = _alt_names_by_game(session, [g.id for g in valid])  # type: ignore[misc]
    return [row_to_game(g, names.get(g.id, [])) for g in valid]  # type: ignore[arg-type]


# -- game metadata -----------------------------------------------------------


def add_game_metadata(db: CatalogDatabase, record: GameMetadataCreate) -> int:
    """Insert a game and all of its alternative names; return the new game id.

    Either every row is written or none is.

    Raises:
        CatalogStorageError: If any insert is rejected by the store.
        CatalogIntegrityError: If the inserted game row has no id.
    """
    with db.transaction(immediate=True) as session:
        game = game_to_row(record)
        session.add(game)
        session.flush()
        if game.id is None:
            raise CatalogIntegrityError(f"Inserted game '{record.default_name}' has no id")
        session.add_all(alt_names_to_rows(game.id, record.known_name))
        session.flush()
        game_id = game.id
    logger.debug(
        "Added game %d '%s' with %d alt name(s)",
        game_id,
        record.default_name,
        len(record.known_name),
    )
    return game_id


def get_game_metadata_by_name(db: CatalogDatabase, name: str) -> list[GameMetadata]:
    """Return every game whose default name is exactly ``name``."""
    with db.transaction() as session:
        games = session.exec(select(Game).where(Game.default_name == name)).all()
        return _hydrate(session, games)


def get_game_metadata_by_id(db: CatalogDatabase, game_id: int) -> GameMetadata | None:
    with db.transaction() as session:
        game = session.get(Game, game_id)
        if game is None or game.id is None:
            return None
        return _hydrate(session, [game])[0]


def get_all_game_metadata(db: CatalogDatabase) -> list[GameMetadata]:
    with db.transaction() as session:
        games = session.exec(select(Game)).all()
        return _hydrate(session, games)


# -- save paths and executables ---------------------------------------------


def add_game_path(db: CatalogDatabase, game_id: int, path: SavePathCreate) -> int:
    """Register a save directory for ``game_id``; return the new path id."""
    with db.transaction(immediate=True) as session:
        row = path_to_row(game_id, path)
        session.add(row)
        session.flush()
        if row.id is None:
            raise CatalogIntegrityError(f"Inserted path '{path.path}' has no id")
        path_id = row.id
    logger.debug("Added %s save path %d for game %d", path.operating_system, path_id, game_id)
    return path_id


def get_paths_by_game_id_and_os(
    db: CatalogDatabase, game_id: int, os: OperatingSystem | str
) -> list[str]:
    with db.transaction() as session:
        return list(
            session.exec(
                select(GamePath.path).where(
                    GamePath.game_metadata_id == game_id,
                    GamePath.operating_system == OperatingSystem(os),
                )
            ).all()
        )


def get_paths_by_game_id(db: CatalogDatabase, game_id: int) -> list[SavePath]:
    with db.transaction() as session:
        rows = session.exec(select(GamePath).where(GamePath.game_metadata_id == game_id)).all()
        return [row_to_path(r) for r in rows]


def add_game_executable(
    db: CatalogDatabase, game_id: int, executable: ExecutableCreate
) -> int:
    """Register an executable location for ``game_id``; return the new id."""
    with db.transaction(immediate=True) as session:
        row = executable_to_row(game_id, executable)
        session.add(row)
        session.flush()
        if row.id is None:
            raise CatalogIntegrityError(f"Inserted executable '{executable.executable}' has no id")
        executable_id = row.id
    logger.debug(
        "Added %s executable %d for game %d",
        executable.operating_system,
        executable_id,
        game_id,
    )
    return executable_id


def get_executable_by_game_id_and_os(
    db: CatalogDatabase, game_id: int, os: OperatingSystem | str
) -> list[str]:
    with db.transaction() as session:
        return list(
            session.exec(
                select(GameExecutable.executable).where(
                    GameExecutable.game_metadata_id == game_id,
                    GameExecutable.operating_system == OperatingSystem(os),
                )
            ).all()
        )


def get_executable_by_game_id(db: CatalogDatabase, game_id: int) -> list[Executable]:
    with db.transaction() as session:
        rows = session.exec(
            select(GameExecutable).where(GameExecutable.game_metadata_id == game_id)
        ).all()
        return [row_to_executable(r) for r in rows]


# -- save history ------------------------------------------------------------


def add_reference_to_save(
    db: CatalogDatabase,
    uuid: UUID | str,
    path_id: int,
    files_hash: Sequence[FileHash],
) -> SaveReference:
    """Record one backup of ``path_id`` together with its file manifest.

    The save is timestamped with the current UTC time. An empty
    ``files_hash`` records an empty snapshot. The uuid is supplied by the
    caller and must be unique.

    Raises:
        CatalogStorageError: If the uuid is already recorded, the path does
            not exist, or any file hash insert fails. Nothing is written.
    """
    save_uuid = str(uuid)
    with db.transaction(immediate=True) as session:
        save = GameSave(uuid=save_uuid, path_id=path_id, time=utcnow())
        session.add(save)
        session.flush()
        files = file_hashes_to_rows(save_uuid, files_hash)
        session.add_all(files)
        session.flush()
        reference = row_to_save_reference(save, files)
    logger.debug("Recorded save %s for path %d (%d file(s))", save_uuid, path_id, len(files))
    return reference


def get_reference_to_save_by_path_id(
    db: CatalogDatabase, path_id: int
) -> list[SaveReference] | None:
    """Return every save recorded for ``path_id``, each with its own files.

    Returns ``None`` when the path has no saves at all.
    """
    with db.transaction() as session:
        saves = session.exec(
            select(GameSave)
            .where(GameSave.path_id == path_id)
            .order_by(GameSave.time, GameSave.uuid)  # type: ignore[arg-type]
        ).all()
        if not saves:
            return None

        references: list[SaveReference] = []
        for save in saves:
            files = session.exec(
                select(SaveFileHash)
                .where(SaveFileHash.game_save_uuid == save.uuid)
                .order_by(SaveFileHash.id)  # type: ignore[arg-type]
            ).all()
            references.append(row_to_save_reference(save, files))
        return references
