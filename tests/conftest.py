import pytest

from game_save_catalog.config import Settings
from game_save_catalog.database import CatalogDatabase
from game_save_catalog.models.types import OperatingSystem
from game_save_catalog.repository import add_game_metadata, add_game_path
from game_save_catalog.schemas.game import GameMetadataCreate, SavePathCreate


@pytest.fixture
def catalog_settings(tmp_path):
    return Settings(data_dir=tmp_path / "data", pool_timeout=0.2, busy_timeout=0.2)


@pytest.fixture
def db(catalog_settings):
    database = CatalogDatabase.open(":memory:", catalog_settings)
    yield database
    database.close()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "store" / "catalog.db"


@pytest.fixture
def make_game(db):
    def _make(
        default_name: str = "Hollow Knight",
        known_name: list[str] | None = None,
        steam_appid: str | None = "367520",
    ) -> int:
        return add_game_metadata(
            db,
            GameMetadataCreate(
                default_name=default_name,
                known_name=known_name if known_name is not None else ["HK"],
                steam_appid=steam_appid,
            ),
        )

    return _make


@pytest.fixture
def make_path(db):
    def _make(
        game_id: int,
        path: str = "/home/user/.config/unity3d/Team Cherry/Hollow Knight",
        operating_system: OperatingSystem = OperatingSystem.linux,
    ) -> int:
        return add_game_path(
            db, game_id, SavePathCreate(path=path, operating_system=operating_system)
        )

    return _make
