"""
Storage factory – pick the storage backend from settings
========================================================

Centralizes backend selection (in-memory vs PostgreSQL) so the rest of the
app stays ignorant of where records live.

- Takes an explicit `Settings` object; it never reads the environment itself.
- Imports the DB backend only if the selected backend is "postgres".
"""

import logging
from typing import Optional

from shortener.config import Settings
from shortener.storage.base import BaseStorage
from shortener.storage.storage import Storage

log = logging.getLogger("shortener.storage")


def get_storage(settings: Optional[Settings] = None, backend: Optional[str] = None) -> BaseStorage:
    """
    Return a BaseStorage implementation based on configuration.

    Parameters
    ----------
    settings : Settings, optional
        Explicit configuration; defaults to `Settings()` (in-memory).
    backend : str, optional
        Overrides `settings.storage_backend`.

    Raises
    ------
    ValueError
        Unknown backend, or "postgres" without a DSN.
    """
    settings = settings or Settings()
    be = (backend or settings.storage_backend or "memory").strip().lower()

    log.info("Selected storage backend: %r", be)

    if be == "memory":
        return Storage()

    if be == "postgres":
        if not settings.db_dsn:
            raise ValueError("DB DSN is required for postgres backend (env SHORTENER_DB_DSN)")
        # Local import to avoid a hard dependency when not using postgres
        from shortener.storage.db_storage import DBStorage

        storage = DBStorage(
            dsn=settings.db_dsn,
            connect_timeout=settings.db_connect_timeout,
            statement_timeout_ms=settings.db_statement_timeout_ms,
        )
        if settings.db_create_schema:
            storage.create_schema()
        return storage

    raise ValueError(f"Unknown storage backend: {be!r}")
