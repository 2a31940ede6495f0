"""
Error taxonomy for the shortener service.

Storage backends raise `StorageError` subclasses so callers can branch on the
failure kind without knowing which database sits underneath. The allocator
adds its own `AllocationError` kinds on top. The HTTP layer maps each of them
to a status envelope (see `main.py`).

    ShortenerError
    ├── StorageError
    │   ├── AliasExistsError
    │   ├── URLNotFoundError
    │   └── PersistenceError
    └── AllocationError
        ├── AliasTakenError
        └── AllocationExhaustedError
"""


class ShortenerError(Exception):
    """Base exception for all shortener errors."""


class StorageError(ShortenerError):
    """Base exception for storage-layer errors."""


class AliasExistsError(StorageError):
    """A record with this alias is already stored."""

    def __init__(self, alias: str):
        super().__init__(f"alias already exists: {alias}")
        self.alias = alias


class URLNotFoundError(StorageError):
    """No record has the requested alias."""

    def __init__(self, alias: str):
        super().__init__(f"url not found for alias: {alias}")
        self.alias = alias


class PersistenceError(StorageError):
    """Any other storage failure (connectivity, constraints, driver errors)."""


class AllocationError(ShortenerError):
    """Base exception for alias allocation errors."""


class AliasTakenError(AllocationError):
    """The caller-supplied alias is already in use."""

    def __init__(self, alias: str):
        super().__init__(f"alias is taken: {alias}")
        self.alias = alias


class AllocationExhaustedError(AllocationError):
    """Every generated candidate collided within the configured attempt budget."""

    def __init__(self, attempts: int):
        super().__init__(f"no free alias after {attempts} attempts")
        self.attempts = attempts
