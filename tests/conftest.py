from __future__ import annotations

from pathlib import Path

import pytest

from core.settings import get_settings
from core.storage.client import DrawingStorage
from core.storage.local import LocalStorage
from tests.utils_storage import FAST_RETRY, FlakyBackend


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def local_backend(tmp_path: Path) -> LocalStorage:
    return LocalStorage(tmp_path / "bucket")


@pytest.fixture()
def flaky_backend(local_backend: LocalStorage) -> FlakyBackend:
    return FlakyBackend(local_backend)


@pytest.fixture()
def storage(flaky_backend: FlakyBackend) -> DrawingStorage:
    return DrawingStorage(flaky_backend, policy=FAST_RETRY)
