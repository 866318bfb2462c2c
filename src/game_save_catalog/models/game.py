from sqlalchemy import Index
from sqlmodel import Column, Field, SQLModel

from game_save_catalog.models.types import OperatingSystem, OperatingSystemType


class Game(SQLModel, table=True):
    __tablename__ = "game_metadata"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    steam_appid: str | None = None
    default_name: str = Field(index=True)


class GameAltName(SQLModel, table=True):
    __tablename__ = "game_alt_name"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    name: str
    game_metadata_id: int = Field(foreign_key="game_metadata.id", ondelete="CASCADE", index=True)


class GamePath(SQLModel, table=True):
    __tablename__ = "game_path"
    __table_args__ = (
        Index("ix_game_path_game_metadata_id", "game_metadata_id", "operating_system"),
        {"sqlite_autoincrement": True},
    )

    id: int | None = Field(default=None, primary_key=True)
    path: str
    operating_system: OperatingSystem = Field(
        sa_column=Column(OperatingSystemType, nullable=False)
    )
    game_metadata_id: int = Field(foreign_key="game_metadata.id", ondelete="CASCADE")


class GameExecutable(SQLModel, table=True):
    __tablename__ = "game_executable"
    __table_args__ = (
        Index("ix_game_executable_game_metadata_id", "game_metadata_id", "operating_system"),
        {"sqlite_autoincrement": True},
    )

    id: int | None = Field(default=None, primary_key=True)
    executable: str
    operating_system: OperatingSystem = Field(
        sa_column=Column(OperatingSystemType, nullable=False)
    )
    game_metadata_id: int = Field(foreign_key="game_metadata.id", ondelete="CASCADE")
