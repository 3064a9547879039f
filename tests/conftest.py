from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Top-level modules (app, settings, persistence) live at the repo root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def sandbox_store(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Point the profile store at a temp directory so tests never touch real ./data.
    """
    data = tmp_path / "data"
    monkeypatch.setenv("PROFILE_STORE_URL", f"file:{data}")
    monkeypatch.setenv("PROFILE_STORE_TIMEOUT_MS", "2000")
    monkeypatch.delenv("PROFILE_USER_ID", raising=False)
    return data


@pytest.fixture
def unreachable_store(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Point the profile store below a regular file so the directory can never be created.
    """
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    monkeypatch.setenv("PROFILE_STORE_URL", f"file:{blocker / 'data'}")
    monkeypatch.setenv("PROFILE_STORE_TIMEOUT_MS", "2000")
    return blocker


@pytest.fixture
def client(sandbox_store: Path):
    from fastapi.testclient import TestClient

    import app as app_module

    # Entering the context runs the lifespan, which connects the store.
    with TestClient(app_module.create_app()) as c:
        yield c


@pytest.fixture
def broken_client(unreachable_store: Path):
    from fastapi.testclient import TestClient

    import app as app_module

    with TestClient(app_module.create_app()) as c:
        yield c
