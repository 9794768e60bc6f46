"""
Storage factory: switch storage backend from config (lazy env version)
======================================================================

This module centralizes selection of the storage backend (in-memory vs DB)
so the rest of the app can stay ignorant of where data lives.

- Reads environment **at call time** to avoid stale values in tests.
- Imports the DB backend **only if** the selected backend is "postgres".

Environment variables
---------------------
- CATALOG_STORAGE_BACKEND: "memory" (default) or "postgres"
- CATALOG_DB_DSN:          DSN string if backend=="postgres"
"""

import os
from typing import NamedTuple, Optional

from .base import BaseCatalogStore, BaseCredentialStore
from .storage import CredentialStorage, Storage


class Stores(NamedTuple):
    """The pair of stores an app instance runs on."""
    backend: str
    catalog: BaseCatalogStore
    credentials: BaseCredentialStore


def _resolve_backend(backend: Optional[str]) -> str:
    return (backend or os.getenv("CATALOG_STORAGE_BACKEND", "memory")).strip().lower()


def _resolve_dsn(dsn: Optional[str]) -> str:
    resolved = dsn or os.getenv("CATALOG_DB_DSN", "")
    if not resolved:
        raise ValueError("DB_DSN is required for postgres backend (env CATALOG_DB_DSN)")
    return resolved


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseCatalogStore:
    """
    Return a product store based on configuration.

    Parameters
    ----------
    backend : str, optional
        "memory" (default) or "postgres". If omitted, reads CATALOG_STORAGE_BACKEND.
    kwargs : dict
        Extra args for the backend constructor. For postgres, use dsn="...".
    """
    be = _resolve_backend(backend)
    if be == "memory":
        return Storage()
    if be == "postgres":
        # Local import to avoid a hard psycopg dependency when not using postgres
        from .db_storage import DBStorage
        return DBStorage(dsn=_resolve_dsn(kwargs.get("dsn")))
    raise ValueError(f"Unknown storage backend: {be!r}")


def get_credential_storage(backend: Optional[str] = None, **kwargs) -> BaseCredentialStore:
    """Return a user credential store; same selection rules as `get_storage`."""
    be = _resolve_backend(backend)
    if be == "memory":
        return CredentialStorage()
    if be == "postgres":
        from .db_storage import DBCredentialStorage
        return DBCredentialStorage(dsn=_resolve_dsn(kwargs.get("dsn")))
    raise ValueError(f"Unknown storage backend: {be!r}")


def get_stores(backend: Optional[str] = None, **kwargs) -> Stores:
    """Build both stores for one backend."""
    be = _resolve_backend(backend)
    return Stores(
        backend=be,
        catalog=get_storage(be, **kwargs),
        credentials=get_credential_storage(be, **kwargs),
    )
