import logging
import sys

from game_save_catalog.config import settings


def configure_logging(level: int | str | None = None) -> None:
    """Install the catalog's log format on the root logger.

    Host applications call this once at startup; the library itself only
    emits through module loggers. ``level`` defaults to ``settings.log_level``.
    """
    logging.basicConfig(
        level=level if level is not None else settings.log_level.upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    for name in ("sqlalchemy.engine", "sqlalchemy.pool"):
        logging.getLogger(name).setLevel(logging.WARNING)
