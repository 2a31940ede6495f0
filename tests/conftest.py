"""
Global pytest fixtures for the shortener test suite.

Responsibilities:
    - Provide a fresh FastAPI TestClient via the app factory for integration tests
    - Provide isolated in-memory Storage fixtures for direct testing
    - Provide an AliasAllocator fixture wired to the Storage fixture
    - Provide a scripted alias strategy so collision paths are deterministic

Why an app factory?
    `create_app()` builds a new storage/allocator pair per call, so every test
    gets clean in-memory state.
"""

from typing import Iterable, List

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortener.config import Settings
from shortener.errors import PersistenceError
from shortener.manager.alias_allocator import AliasAllocator
from shortener.manager.strategies import BaseStrategy
from shortener.storage.storage import Storage


class ScriptedStrategy(BaseStrategy):
    """Returns preset candidates in order; fails loudly when it runs out."""

    def __init__(self, candidates: Iterable[str]):
        self.candidates: List[str] = list(candidates)
        self.calls = 0

    def generate(self) -> str:
        if self.calls >= len(self.candidates):
            raise AssertionError("scripted strategy ran out of candidates")
        candidate = self.candidates[self.calls]
        self.calls += 1
        return candidate


class CountingStorage(Storage):
    """In-memory Storage that counts save_url attempts (successful or not)."""

    def __init__(self):
        super().__init__()
        self.save_calls = 0

    def save_url(self, url: str, alias: str) -> int:
        self.save_calls += 1
        return super().save_url(url, alias)


class BrokenStorage(Storage):
    """Storage whose every operation fails like an unreachable database."""

    def save_url(self, url: str, alias: str) -> int:
        raise PersistenceError("connection refused")

    def get_record(self, alias: str):
        raise PersistenceError("connection refused")

    def delete_url(self, alias: str) -> None:
        raise PersistenceError("connection refused")


@pytest.fixture
def storage() -> CountingStorage:
    """Fresh in-memory storage that also records how many saves were attempted."""
    return CountingStorage()


@pytest.fixture
def allocator(storage: CountingStorage) -> AliasAllocator:
    return AliasAllocator(storage=storage)


@pytest.fixture
def scripted():
    """Factory for ScriptedStrategy: scripted("abc123", "xyz789")."""
    return lambda *candidates: ScriptedStrategy(candidates)


@pytest.fixture
def broken_storage() -> BrokenStorage:
    return BrokenStorage()


@pytest.fixture
def settings() -> Settings:
    """In-memory settings, independent of the caller's environment."""
    return Settings()


@pytest.fixture
def client(settings: Settings, storage: CountingStorage) -> TestClient:
    """
    Provide a fresh TestClient over an app wired to the `storage` fixture.

    Redirects are not followed so tests can assert on the 302 itself.
    """
    app = create_app(settings=settings, storage=storage)
    return TestClient(app, follow_redirects=False)
