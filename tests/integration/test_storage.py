"""
Integration tests for Storage backends (in-memory and Postgres).

These tests parameterize over available backends:
- Always "memory"
- "postgres" only if SHORTENER_DB_DSN is set

Every backend must honor the same BaseStorage contract. Aliases are made
unique per test so a shared database can be reused between runs.
"""

import os
import threading
import uuid

import pytest

from shortener.config import Settings
from shortener.errors import AliasExistsError, URLNotFoundError
from shortener.storage.storage_factory import get_storage


def available_backends():
    backends = ["memory"]
    if os.getenv("SHORTENER_DB_DSN"):
        backends.append(pytest.param("postgres", marks=pytest.mark.postgres))
    return backends


@pytest.fixture(params=available_backends())
def storage(request):
    if request.param == "postgres":
        settings = Settings(
            storage_backend="postgres",
            db_dsn=os.environ["SHORTENER_DB_DSN"],
            db_create_schema=True,
        )
    else:
        settings = Settings()
    backend = get_storage(settings)
    yield backend
    backend.close()


@pytest.fixture
def alias():
    return "t" + uuid.uuid4().hex[:12]


def test_save_and_get(storage, alias):
    record_id = storage.save_url("https://example.com", alias)
    assert isinstance(record_id, int)
    assert storage.get_url(alias) == "https://example.com"
    record = storage.get_record(alias)
    assert (record.id, record.url, record.alias) == (record_id, "https://example.com", alias)


def test_collision_on_save(storage, alias):
    storage.save_url("https://first.example", alias)
    with pytest.raises(AliasExistsError):
        storage.save_url("https://second.example", alias)
    assert storage.get_url(alias) == "https://first.example"


def test_not_found(storage, alias):
    with pytest.raises(URLNotFoundError):
        storage.get_url(alias)


def test_delete_is_idempotent(storage, alias):
    storage.save_url("https://example.com", alias)
    storage.delete_url(alias)
    storage.delete_url(alias)
    with pytest.raises(URLNotFoundError):
        storage.get_url(alias)


def test_concurrent_inserts_of_one_alias(storage, alias):
    n = 8
    barrier = threading.Barrier(n)
    results = []
    lock = threading.Lock()

    def worker(i):
        barrier.wait()
        try:
            storage.save_url(f"https://example.com/{i}", alias)
            outcome = "won"
        except AliasExistsError:
            outcome = "conflict"
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("won") == 1
    assert results.count("conflict") == n - 1
