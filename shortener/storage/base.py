"""
Base storage interface for the shortener service.

Purpose:
    Define the small Create/Read/Delete contract that every backend
    (in-memory, PostgreSQL, a key-value store) implements, so the alias
    allocator and the HTTP layer never depend on a concrete database.

Error contract:
    - save_url   -> AliasExistsError on alias conflict, PersistenceError otherwise
    - get_url    -> URLNotFoundError when absent, PersistenceError otherwise
    - delete_url -> PersistenceError only; a missing alias is a successful no-op

    AliasExistsError must stay distinguishable from every other failure: the
    allocator's retry loop branches on it.

Testing & Coverage:
    Abstract methods are annotated with `# pragma: no cover` since they are
    never executed directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class URLRecord:
    """A persisted alias -> url mapping. Immutable once stored."""

    id: int
    url: str
    alias: str


class BaseStorage(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod  # pragma: no cover
    def save_url(self, url: str, alias: str) -> int:
        """
        Insert a new record atomically.

        Returns:
            int: The store-assigned record id.

        Raises:
            AliasExistsError: The alias is already present.
            PersistenceError: Any other write failure.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_record(self, alias: str) -> URLRecord:
        """
        Return the full record for an alias.

        Raises:
            URLNotFoundError: No record has this alias.
            PersistenceError: Any other read failure.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def delete_url(self, alias: str) -> None:
        """
        Remove the record for an alias. Deleting a missing alias succeeds.

        Raises:
            PersistenceError: The delete could not be performed.
        """
        raise NotImplementedError

    def get_url(self, alias: str) -> str:
        """
        Resolve an alias to its stored URL.

        Raises:
            URLNotFoundError: No record has this alias.
            PersistenceError: Any other read failure.
        """
        return self.get_record(alias).url

    def close(self) -> None:
        """Release backend resources. Backends without any keep the no-op."""
