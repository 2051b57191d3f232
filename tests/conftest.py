from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

# Make the crud_api package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from crud_api.app import create_app  # noqa: E402
from crud_api.core import config as core_config  # noqa: E402
from crud_api.db.session import Database  # noqa: E402
from crud_api.repositories import ChocolateStorage, UserStorage  # noqa: E402


@pytest.fixture()
def database(tmp_path):
    """A temporary SQLite database with the schema created and torn down."""
    db_file = tmp_path / "test.db"
    db = Database(f"sqlite:///{db_file}")
    db.create_all()

    yield db

    db.drop_all()
    db.dispose()


@pytest.fixture()
def user_storage(database):
    return UserStorage(database)


@pytest.fixture()
def chocolate_storage(database):
    return ChocolateStorage(database)


@pytest.fixture()
def settings(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.delenv("BASE_URL", raising=False)
    monkeypatch.delenv("API_PREFIX", raising=False)
    core_config.get_settings.cache_clear()
    yield core_config.get_settings()
    core_config.get_settings.cache_clear()


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture()
def static_client(settings):
    app = create_app(replace(settings, base_url="https://sweets.example.com"))
    with TestClient(app) as test_client:
        yield test_client
