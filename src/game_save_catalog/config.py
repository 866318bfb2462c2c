import os
import sys
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_data_dir() -> Path:
    if env := os.environ.get("GSC_DATA_DIR"):
        return Path(env)
    if sys.platform == "win32":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
    return base / "game-save-catalog"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GSC_",
        extra="ignore",
    )

    data_dir: Path = Path("")
    db_path: Path = Path("")
    pool_size: int = 5
    max_overflow: int = 0
    pool_timeout: float = 30.0
    busy_timeout: float = 30.0
    echo_sql: bool = False
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _resolve_data_paths(self) -> "Settings":
        if self.data_dir == Path(""):
            self.data_dir = _default_data_dir()
        if self.db_path == Path(""):
            self.db_path = self.data_dir / "catalog.db"
        return self


settings = Settings()
