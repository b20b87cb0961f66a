"""
Storage factory – switch storage backend from config (lazy env version)
======================================================================

This module centralizes selection of the storage backend (in-memory vs DB)
so the rest of the app can stay ignorant of where data lives.

- Reads backend and DSN from `settings` **at call time** to avoid stale values in tests.
- Imports the DB backend **only if** the selected backend is "postgres".

Environment variables
---------------------
- SHORTLINK_STORAGE_BACKEND    : "memory" (default) or "postgres"
- SHORTLINK_DB_DSN             : DSN string if backend=="postgres"
- SHORTLINK_DB_CONNECT_TIMEOUT : connect timeout in seconds (default 5; read once via settings)
"""

import logging
from typing import Optional

from shortlink.config import settings
from shortlink.storage.base import BaseStorage
from shortlink.storage.storage import Storage

log = logging.getLogger("shortlink.storage")


def selected_backend(backend: Optional[str] = None) -> str:
    """Name of the backend `get_storage` would build."""
    return (backend or settings.STORAGE_BACKEND).strip().lower()


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseStorage:
    """
    Return a storage backend based on configuration.

    Parameters
    ----------
    backend : str, optional
        "memory" (default) or "postgres". If omitted, reads SHORTLINK_STORAGE_BACKEND.
    kwargs : dict
        Extra args for the backend. For postgres: dsn="...", connect_timeout=5,
        ensure_schema=True to create the table on startup.

    Raises
    ------
    ValueError
        Unknown backend, or postgres without a DSN.
    """
    be = selected_backend(backend)
    log.debug("Selected storage backend: %r", be)

    if be == "memory":
        return Storage()

    if be == "postgres":
        dsn = kwargs.get("dsn") or settings.DB_DSN
        if not dsn:
            raise ValueError("DB_DSN is required for postgres backend (env SHORTLINK_DB_DSN)")
        timeout = int(kwargs.get("connect_timeout") or settings.DB_CONNECT_TIMEOUT)
        # Local import to avoid hard dependency when not using postgres
        from shortlink.storage.db_storage import DBStorage

        storage = DBStorage(dsn=dsn, connect_timeout=timeout)
        if kwargs.get("ensure_schema"):
            storage.ensure_schema()
        return storage

    raise ValueError(f"Unknown storage backend: {be!r}")
