"""Conversions between table rows and the records handed to callers."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from game_save_catalog.models.game import Game, GameAltName, GameExecutable, GamePath
from game_save_catalog.models.save import GameSave, SaveFileHash
from game_save_catalog.schemas.game import (
    Executable,
    ExecutableCreate,
    GameMetadata,
    GameMetadataCreate,
    SavePath,
    SavePathCreate,
)
from game_save_catalog.schemas.save import FileHash, SaveReference


def game_to_row(record: GameMetadataCreate) -> Game:
    return Game(steam_appid=record.steam_appid, default_name=record.default_name)


def alt_names_to_rows(game_id: int, names: Iterable[str]) -> list[GameAltName]:
    return [GameAltName(name=name, game_metadata_id=game_id) for name in names]


def row_to_game(row: Game, alt_names: Iterable[str]) -> GameMetadata:
    return GameMetadata(
        id=row.id,
        metadata=GameMetadataCreate(
            known_name=list(alt_names),
            steam_appid=row.steam_appid,
            default_name=row.default_name,
        ),
    )


def path_to_row(game_id: int, record: SavePathCreate) -> GamePath:
    return GamePath(
        path=record.path,
        operating_system=record.operating_system,
        game_metadata_id=game_id,
    )


def row_to_path(row: GamePath) -> SavePath:
    return SavePath(
        id=row.id,
        path=SavePathCreate(path=row.path, operating_system=row.operating_system),
    )


def executable_to_row(game_id: int, record: ExecutableCreate) -> GameExecutable:
    return GameExecutable(
        executable=record.executable,
        operating_system=record.operating_system,
        game_metadata_id=game_id,
    )


def row_to_executable(row: GameExecutable) -> Executable:
    return Executable(
        id=row.id,
        executable=ExecutableCreate(
            executable=row.executable, operating_system=row.operating_system
        ),
    )


def file_hashes_to_rows(save_uuid: str, files: Iterable[FileHash]) -> list[SaveFileHash]:
    return [
        SaveFileHash(relative_path=f.relative_path, hash=f.hash, game_save_uuid=save_uuid)
        for f in files
    ]


def unix_seconds(moment: datetime) -> int:
    """Whole seconds since the epoch; naive values are taken to be UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return int(moment.timestamp())


def row_to_save_reference(row: GameSave, files: Iterable[SaveFileHash]) -> SaveReference:
    return SaveReference(
        uuid=row.uuid,
        path_id=row.path_id,
        time=unix_seconds(row.time),
        files_hash=[FileHash(relative_path=f.relative_path, hash=f.hash) for f in files],
    )
