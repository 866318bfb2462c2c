import uuid
from datetime import UTC, datetime

import pytest
from sqlalchemy import text

from game_save_catalog.errors import CatalogStorageError
from game_save_catalog.models.types import OperatingSystem
from game_save_catalog.repository import (
    add_game_metadata,
    add_game_path,
    add_reference_to_save,
    get_reference_to_save_by_path_id,
)
from game_save_catalog.schemas.game import GameMetadataCreate, SavePathCreate
from game_save_catalog.schemas.save import FileHash


@pytest.fixture
def path_id(make_game, make_path):
    return make_path(make_game())


class TestAddReferenceToSave:
    def test_records_files(self, db, path_id):
        files = [
            FileHash(relative_path="user1.dat", hash="aa11"),
            FileHash(relative_path="user1.dat.bak", hash="bb22"),
        ]
        ref = add_reference_to_save(db, uuid.uuid4(), path_id, files)

        assert ref.path_id == path_id
        assert ref.files_hash == files

    def test_accepts_uuid_object(self, db, path_id):
        save_id = uuid.uuid4()
        add_reference_to_save(db, save_id, path_id, [])

        [ref] = get_reference_to_save_by_path_id(db, path_id)
        assert ref.uuid == str(save_id)

    def test_timestamp_is_call_time_utc(self, db, path_id, monkeypatch):
        fixed = datetime(2024, 3, 1, 12, 30, 15, tzinfo=UTC)
        monkeypatch.setattr("game_save_catalog.repository.utcnow", lambda: fixed)

        ref = add_reference_to_save(db, "t1", path_id, [])
        [stored] = get_reference_to_save_by_path_id(db, path_id)

        assert ref.time == int(fixed.timestamp())
        assert stored.time == int(fixed.timestamp())

    def test_empty_snapshot_is_valid(self, db, path_id):
        add_reference_to_save(db, "empty", path_id, [])

        refs = get_reference_to_save_by_path_id(db, path_id)
        assert refs is not None
        assert len(refs) == 1
        assert refs[0].uuid == "empty"
        assert refs[0].files_hash == []

    def test_duplicate_uuid_rejected(self, db, path_id):
        add_reference_to_save(db, "dup", path_id, [FileHash(relative_path="a", hash="1")])

        with pytest.raises(CatalogStorageError):
            add_reference_to_save(db, "dup", path_id, [FileHash(relative_path="b", hash="2")])

        [ref] = get_reference_to_save_by_path_id(db, path_id)
        assert ref.files_hash == [FileHash(relative_path="a", hash="1")]

    def test_unknown_path_rejected(self, db):
        with pytest.raises(CatalogStorageError):
            add_reference_to_save(db, "orphan", 404, [])
        assert get_reference_to_save_by_path_id(db, 404) is None

    def test_failed_file_hash_rolls_back_save(self, db, path_id):
        with db.engine.begin() as conn:
            conn.execute(
                text(
                    "CREATE TRIGGER reject_hash BEFORE INSERT ON file_hash "
                    "WHEN NEW.hash = 'bad' "
                    "BEGIN SELECT RAISE(ABORT, 'hash rejected'); END"
                )
            )

        files = [
            FileHash(relative_path="ok.dat", hash="good"),
            FileHash(relative_path="broken.dat", hash="bad"),
        ]
        with pytest.raises(CatalogStorageError, match="hash rejected"):
            add_reference_to_save(db, "partial", path_id, files)

        assert get_reference_to_save_by_path_id(db, path_id) is None
        with db.engine.connect() as conn:
            count = conn.execute(text("SELECT COUNT(*) FROM file_hash")).scalar_one()
        assert count == 0


class TestGetReferenceToSaveByPathId:
    def test_none_when_no_saves(self, db, path_id):
        assert get_reference_to_save_by_path_id(db, path_id) is None

    def test_saves_are_not_merged(self, db, path_id):
        add_reference_to_save(
            db,
            "first",
            path_id,
            [
                FileHash(relative_path="a.sav", hash="h1"),
                FileHash(relative_path="b.sav", hash="h2"),
            ],
        )
        add_reference_to_save(db, "second", path_id, [FileHash(relative_path="a.sav", hash="h3")])

        refs = {r.uuid: r for r in get_reference_to_save_by_path_id(db, path_id)}
        assert set(refs) == {"first", "second"}
        assert {(f.relative_path, f.hash) for f in refs["first"].files_hash} == {
            ("a.sav", "h1"),
            ("b.sav", "h2"),
        }
        assert refs["second"].files_hash == [FileHash(relative_path="a.sav", hash="h3")]

    def test_scoped_to_path(self, db, make_game, make_path):
        game_id = make_game()
        linux = make_path(game_id, "/saves/linux", OperatingSystem.linux)
        windows = make_path(game_id, r"C:\saves", OperatingSystem.windows)
        add_reference_to_save(db, "l1", linux, [FileHash(relative_path="x", hash="1")])

        assert get_reference_to_save_by_path_id(db, windows) is None
        assert [r.uuid for r in get_reference_to_save_by_path_id(db, linux)] == ["l1"]


class TestBackupScenario:
    def test_game_path_save_round_trip(self, db):
        game_id = add_game_metadata(
            db, GameMetadataCreate(default_name="Foo", known_name=["F", "Foo Deluxe"])
        )
        path_id = add_game_path(
            db, game_id, SavePathCreate(path="/save/foo", operating_system=OperatingSystem.linux)
        )
        add_reference_to_save(db, "abc", path_id, [FileHash(relative_path="s1.dat", hash="h1")])

        [ref] = get_reference_to_save_by_path_id(db, path_id)
        assert ref.uuid == "abc"
        assert ref.path_id == path_id
        assert ref.files_hash == [FileHash(relative_path="s1.dat", hash="h1")]
