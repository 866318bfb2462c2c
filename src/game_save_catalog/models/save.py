from datetime import datetime

from sqlmodel import Column, Field, SQLModel

from game_save_catalog.models.types import UTCDateTime, utcnow


class GameSave(SQLModel, table=True):
    __tablename__ = "game_save"

    uuid: str = Field(primary_key=True)
    path_id: int = Field(foreign_key="game_path.id", ondelete="CASCADE", index=True)
    time: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(UTCDateTime, nullable=False),
    )


class SaveFileHash(SQLModel, table=True):
    __tablename__ = "file_hash"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    relative_path: str
    hash: str
    game_save_uuid: str = Field(foreign_key="game_save.uuid", ondelete="CASCADE", index=True)
