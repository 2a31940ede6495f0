"""
Storage module for the shortener service (in-memory implementation).

Responsibilities:
    - Save url records keyed by alias
    - Resolve and delete by alias
    - Enforce alias uniqueness atomically

Design:
    - Reference implementation of the BaseStorage contract, used by tests and
      local runs. Swap it for DBStorage without touching the allocator or API.
    - Request handlers run in a threadpool, so the check-and-insert happens
      under a lock. The lock only wraps dict operations; no I/O runs under it.

LLM Prompt Example:
    "Explain how a lock-guarded check-and-insert gives an in-memory map the
     same atomic uniqueness guarantee that a UNIQUE constraint gives a table."
"""

import itertools
import logging
import threading
from typing import Dict

from ..errors import AliasExistsError, PersistenceError, URLNotFoundError
from .base import BaseStorage, URLRecord

log = logging.getLogger("shortener.storage.memory")


class Storage(BaseStorage):
    def __init__(self):
        """
        Initialize empty storage.

        Internal schema:
            self.records = {alias: URLRecord(id, url, alias)}
        """
        self.records: Dict[str, URLRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def save_url(self, url: str, alias: str) -> int:
        """
        Insert a record unless the alias is already taken.

        Rules:
            - Empty url or alias is rejected (NOT NULL columns in the relational schema).
            - An existing alias is never overwritten.

        Returns:
            int: The new record id.
        """
        if not url or not alias:
            raise PersistenceError("url and alias must be non-empty")

        with self._lock:
            if alias in self.records:
                raise AliasExistsError(alias)
            record = URLRecord(id=next(self._ids), url=url, alias=alias)
            self.records[alias] = record

        log.debug("storage.memory.save_url: alias=%s id=%d", alias, record.id)
        return record.id

    def get_record(self, alias: str) -> URLRecord:
        record = self.records.get(alias)
        if record is None:
            raise URLNotFoundError(alias)
        return record

    def delete_url(self, alias: str) -> None:
        """Remove the record if present; a missing alias is a no-op."""
        with self._lock:
            removed = self.records.pop(alias, None)
        if removed is not None:
            log.debug("storage.memory.delete_url: alias=%s id=%d", alias, removed.id)

    def __len__(self) -> int:
        return len(self.records)
