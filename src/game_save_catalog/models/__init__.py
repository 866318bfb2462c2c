from game_save_catalog.models.game import Game, GameAltName, GameExecutable, GamePath
from game_save_catalog.models.save import GameSave, SaveFileHash
from game_save_catalog.models.types import OperatingSystem

__all__ = [
    "Game",
    "GameAltName",
    "GameExecutable",
    "GamePath",
    "GameSave",
    "OperatingSystem",
    "SaveFileHash",
]
