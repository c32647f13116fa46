from __future__ import annotations

from pathlib import Path
import sys
from typing import Any

import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from errors import StorageUnavailable  # noqa: E402
from persistence import DiskAppDocumentStore, InMemoryAppDocumentStore  # noqa: E402
from settings import DEFAULT_MAX_BODY_BYTES, Settings  # noqa: E402

SETTINGS_ENV_VARS = (
    "DOCSTORE_URI",
    "HOST",
    "PORT",
    "PUBLIC_BASE_URL",
    "RENDER_EXTERNAL_URL",
    "KEEPALIVE_ENABLED",
    "KEEPALIVE_INTERVAL_SECONDS",
    "MAX_BODY_BYTES",
    "CORS_ALLOW_ORIGINS",
    "DEBUG_LOG_REQUESTS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """
    Tests never see the developer's environment or a local.env in the cwd.
    """
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_settings():
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "docstore_uri": "memory://",
            "host": "127.0.0.1",
            "port": 3000,
            "public_base_url": "",
            "local_base_url": "http://localhost:3000",
            "keepalive_enabled": False,
            "keepalive_interval_seconds": 840,
            "max_body_bytes": DEFAULT_MAX_BODY_BYTES,
            "cors_allow_origins": ("*",),
            "debug_log_requests": False,
            "log_level": "INFO",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def disk_store(tmp_path: Path) -> DiskAppDocumentStore:
    store = DiskAppDocumentStore(tmp_path / "docs")
    store.open()
    return store


@pytest.fixture
def memory_store() -> InMemoryAppDocumentStore:
    return InMemoryAppDocumentStore()


class FailingStore:
    """Every data operation fails as if the backend were down."""

    def __init__(self) -> None:
        self.calls = 0

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    def _fail(self, *args: Any) -> Any:
        self.calls += 1
        raise StorageUnavailable("backend down")

    find_one = _fail
    insert = _fail
    upsert = _fail


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def client(make_settings, disk_store):
    from fastapi.testclient import TestClient

    import app as app_module

    application = app_module.create_app(make_settings(docstore_uri=str(disk_store.root)), store=disk_store)
    with TestClient(application) as c:
        yield c
