"""Column types with a fixed on-disk encoding.

``OperatingSystem`` is persisted as an integer code rather than its string
value. Codes are append-only: a new OS gets a new code in a new table
version, and existing codes keep their meaning forever.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import DateTime, Integer
from sqlalchemy.types import TypeDecorator

from game_save_catalog.errors import CatalogIntegrityError


class OperatingSystem(StrEnum):
    """Operating systems a path or executable can be registered for."""

    windows = "windows"
    linux = "linux"
    macos = "macos"


OS_STORAGE_CODES_V1: dict[OperatingSystem, int] = {
    OperatingSystem.windows: 0,
    OperatingSystem.linux: 1,
    OperatingSystem.macos: 2,
}

OS_STORAGE_CODES = OS_STORAGE_CODES_V1
_OS_BY_CODE: dict[int, OperatingSystem] = {code: os_ for os_, code in OS_STORAGE_CODES.items()}


def encode_os(value: OperatingSystem | str) -> int:
    return OS_STORAGE_CODES[OperatingSystem(value)]


def decode_os(code: int) -> OperatingSystem:
    try:
        return _OS_BY_CODE[code]
    except KeyError:
        raise CatalogIntegrityError(f"Unknown operating system code in store: {code!r}") from None


class OperatingSystemType(TypeDecorator):
    """Stores ``OperatingSystem`` members as their integer storage code."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):  # type: ignore[override]
        if value is None:
            return None
        return encode_os(value)

    def process_result_value(self, value, dialect):  # type: ignore[override]
        if value is None:
            return None
        return decode_os(value)


class UTCDateTime(TypeDecorator):
    """Stores datetimes as naive UTC and hands them back UTC-aware."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):  # type: ignore[override]
        if value is not None and value.tzinfo is not None:
            return value.astimezone(UTC).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):  # type: ignore[override]
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


def utcnow() -> datetime:
    return datetime.now(UTC)
