"""Shared fixtures for tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from scholarverse.config import AppConfig
from scholarverse.library.state import AppState
from scholarverse.library.store import KeyValueStore


@pytest.fixture
def store(tmp_path: Path) -> KeyValueStore:
    kv = KeyValueStore(tmp_path / "test.db")
    yield kv
    kv.close()


@pytest.fixture
def state(store: KeyValueStore) -> AppState:
    app_state = AppState(store)
    app_state.hydrate()
    return app_state


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        data_dir=tmp_path / "data",
        config_dir=tmp_path / "config",
        static_dir=tmp_path / "public",
    )


def write_pages(config: AppConfig, book_id: str, count: int) -> Path:
    book_dir = config.pages_dir / book_id
    book_dir.mkdir(parents=True, exist_ok=True)
    for page in range(1, count + 1):
        (book_dir / f"{page}.jpg").write_bytes(b"\xff\xd8jpeg-" + str(page).encode())
    return book_dir
