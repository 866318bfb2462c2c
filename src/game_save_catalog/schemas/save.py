from game_save_catalog.schemas.base import CatalogRecord


class FileHash(CatalogRecord):
    relative_path: str
    hash: str


class SaveReference(CatalogRecord):
    uuid: str
    path_id: int
    time: int
    files_hash: list[FileHash] = []
