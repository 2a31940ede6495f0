"""
AliasAllocator module for the shortener service.

Responsibilities:
    - Reserve a caller-supplied alias with exactly one store write
    - Otherwise generate random candidates and retry until one is reserved
    - Translate store conflicts into caller-visible allocation errors

Design notes:
    - Stateless between calls: every allocation is one decision driven by the
      store. Nothing is cached or locked in-process, so concurrent requests
      can race for the same candidate and the store's atomic insert decides.
    - The retry loop is an explicit loop that ends only on success, on a
      non-conflict error, or when an optional attempt cap is spent.
    - Conflicting attempts leave nothing behind; each is a single rejected insert.

LLM Prompt Example:
    "Explain why an optimistic insert-and-retry loop on a UNIQUE constraint is
    safer under concurrency than checking for existence before inserting."
"""

import logging
from typing import Optional

from ..errors import (
    AliasExistsError,
    AliasTakenError,
    AllocationExhaustedError,
    PersistenceError,
)
from ..storage.base import BaseStorage
from .strategies import DEFAULT_ALIAS_LENGTH, BaseStrategy, RandomStrategy


class AliasAllocator:
    """Assigns a unique alias to a url by driving a BaseStorage backend."""

    def __init__(
        self,
        storage: BaseStorage,
        alias_length: int = DEFAULT_ALIAS_LENGTH,
        strategy: Optional[BaseStrategy] = None,
        max_attempts: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            storage (BaseStorage): Backend that enforces alias uniqueness.
            alias_length (int): Length of generated aliases (default 6).
            strategy (Optional[BaseStrategy]): Candidate generator; defaults to
                RandomStrategy(alias_length).
            max_attempts (Optional[int]): Cap on generated candidates per call.
                None means unbounded.
            logger (Optional[logging.Logger]): Defaults to "shortener.allocator".
        """
        if max_attempts is not None and max_attempts <= 0:
            raise ValueError("max_attempts must be positive or None")
        self.storage = storage
        self.alias_length = alias_length
        self.strategy = strategy or RandomStrategy(length=alias_length)
        self.max_attempts = max_attempts
        self.log = logger or logging.getLogger("shortener.allocator")

    def allocate(self, url: str, requested_alias: Optional[str] = None) -> str:
        """
        Store `url` under a unique alias and return that alias.

        Rules:
            - requested_alias given: one save attempt. A conflict raises
              AliasTakenError and is not retried.
            - no requested_alias: generate, save, and on conflict discard the
              candidate and generate again.
            - PersistenceError from the store is re-raised unchanged on both paths.

        Raises:
            AliasTakenError: The requested alias is already stored.
            AllocationExhaustedError: max_attempts candidates all collided.
            PersistenceError: The store failed for a reason other than a conflict.
        """
        if requested_alias:
            return self._reserve_requested(url, requested_alias)
        return self._reserve_generated(url)

    def _reserve_requested(self, url: str, alias: str) -> str:
        op = "allocator.reserve_requested"
        try:
            record_id = self.storage.save_url(url, alias)
        except AliasExistsError as exc:
            self.log.info("%s: alias already exists alias=%s url=%s", op, alias, url)
            raise AliasTakenError(alias) from exc
        except PersistenceError:
            self.log.error("%s: failed to add url alias=%s url=%s", op, alias, url)
            raise

        self.log.info("%s: url added id=%d alias=%s", op, record_id, alias)
        return alias

    def _reserve_generated(self, url: str) -> str:
        op = "allocator.reserve_generated"
        attempts = 0
        while self.max_attempts is None or attempts < self.max_attempts:
            attempts += 1
            candidate = self.strategy.generate()
            try:
                record_id = self.storage.save_url(url, candidate)
            except AliasExistsError:
                self.log.debug("%s: candidate collided alias=%s attempt=%d", op, candidate, attempts)
                continue
            except PersistenceError:
                self.log.error("%s: failed to add url url=%s attempt=%d", op, url, attempts)
                raise

            self.log.info("%s: url added id=%d alias=%s attempts=%d", op, record_id, candidate, attempts)
            return candidate

        self.log.error("%s: no free alias after %d attempts url=%s", op, attempts, url)
        raise AllocationExhaustedError(attempts)
