"""Blocking work (PBKDF2, SQLite I/O) runs outside the event loop thread."""

import threading

from assistant_marketplace_api.app.core import security
from assistant_marketplace_api.app.schemas.user import UserCreate
from assistant_marketplace_api.app.services import user_service
from assistant_marketplace_api.app.services.user_service import UserService
from assistant_marketplace_api.app.storage import MemoryStorage, SqliteStorage


def recording(func, threads):
    def wrapper(*args, **kwargs):
        threads.append(threading.get_ident())
        return func(*args, **kwargs)

    return wrapper


async def test_password_hashing_runs_in_worker_thread(monkeypatch):
    threads = []
    monkeypatch.setattr(user_service, "hash_password", recording(security.hash_password, threads))
    monkeypatch.setattr(user_service, "verify_password", recording(security.verify_password, threads))
    storage = MemoryStorage()

    await UserService.register(
        storage,
        UserCreate(username="alice", email="alice@mail.com", password="secret123", full_name="Alice"),
    )
    assert await UserService.authenticate(storage, "alice", "secret123") is not None

    assert len(threads) == 2
    assert threading.get_ident() not in threads


async def test_sqlite_queries_run_in_worker_thread(tmp_path, monkeypatch):
    storage = SqliteStorage(str(tmp_path / "threads.db"))
    threads = []
    monkeypatch.setattr(storage, "_fetch_all", recording(storage._fetch_all, threads))
    monkeypatch.setattr(storage, "_create", recording(storage._create, threads))

    category = await storage.create_service_category({"name": "Florist", "icon": "ri-flower-line"})
    assert category.name in [c.name for c in await storage.list_service_categories()]

    assert len(threads) == 2
    assert threading.get_ident() not in threads
