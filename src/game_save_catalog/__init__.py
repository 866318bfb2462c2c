from game_save_catalog.database import CatalogDatabase
from game_save_catalog.errors import (
    CatalogConnectionError,
    CatalogError,
    CatalogIntegrityError,
    CatalogStorageError,
)
from game_save_catalog.models.types import OperatingSystem
from game_save_catalog.schemas import (
    Executable,
    ExecutableCreate,
    FileHash,
    GameMetadata,
    GameMetadataCreate,
    SavePath,
    SavePathCreate,
    SaveReference,
)

__all__ = [
    "CatalogConnectionError",
    "CatalogDatabase",
    "CatalogError",
    "CatalogIntegrityError",
    "CatalogStorageError",
    "Executable",
    "ExecutableCreate",
    "FileHash",
    "GameMetadata",
    "GameMetadataCreate",
    "OperatingSystem",
    "SavePath",
    "SavePathCreate",
    "SaveReference",
]
