from game_save_catalog.models.types import OperatingSystem
from game_save_catalog.schemas.base import CatalogRecord


class GameMetadataCreate(CatalogRecord):
    known_name: list[str] = []
    steam_appid: str | None = None
    default_name: str


class GameMetadata(CatalogRecord):
    id: int | None = None
    metadata: GameMetadataCreate


class SavePathCreate(CatalogRecord):
    path: str
    operating_system: OperatingSystem


class SavePath(CatalogRecord):
    id: int | None = None
    path: SavePathCreate


class ExecutableCreate(CatalogRecord):
    executable: str
    operating_system: OperatingSystem


class Executable(CatalogRecord):
    id: int | None = None
    executable: ExecutableCreate
