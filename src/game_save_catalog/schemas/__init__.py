from game_save_catalog.schemas.game import (
    Executable,
    ExecutableCreate,
    GameMetadata,
    GameMetadataCreate,
    SavePath,
    SavePathCreate,
)
from game_save_catalog.schemas.save import FileHash, SaveReference

__all__ = [
    "Executable",
    "ExecutableCreate",
    "FileHash",
    "GameMetadata",
    "GameMetadataCreate",
    "SavePath",
    "SavePathCreate",
    "SaveReference",
]
