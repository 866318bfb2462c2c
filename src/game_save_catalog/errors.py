"""Exceptions raised by the catalog.

Lookups that find nothing return ``None`` or an empty list; only failures of
the store itself, or of an invariant the catalog relies on, raise.
"""


class CatalogError(Exception):
    pass


class CatalogConnectionError(CatalogError):
    """No connection could be obtained: pool exhausted or store unreachable."""


class CatalogStorageError(CatalogError):
    """The storage engine rejected a statement (constraint, I/O, locking)."""


class CatalogIntegrityError(CatalogError):
    """Data read back from the store breaks an assumption the catalog relies on."""
