"""
Shared test fixtures.
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

import main
from archive import Archive
from db import SqlStore
from filestore import FileStore

MAR01 = datetime(2024, 3, 1)
MAR10 = datetime(2024, 3, 10)

WEB01 = {
    MAR10: "hostname web01\nntp server 10.0.0.2\n",
    MAR01: "hostname web01\nntp server 10.0.0.1\n",
}


def seed(store):
    # inserted oldest-last so nothing relies on insertion order
    for stamp, content in WEB01.items():
        store.put("web01", stamp, content)
    store.put("db01", datetime(2024, 1, 5, 12, 30, 0), "hostname db01\n")
    store.add_host("empty01")


@pytest.fixture
def sql_store():
    store = SqlStore("sqlite://")
    store.init_db()
    return store


@pytest.fixture
def file_store(tmp_path):
    return FileStore(tmp_path / "data")


@pytest.fixture(params=["sql", "file"])
def store(request):
    """Each test using this runs against both backends."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def archive(store):
    seed(store)
    return Archive(store)


@pytest.fixture
def client(sql_store, tmp_path):
    seed(sql_store)
    app = main.create_app(Archive(sql_store), static_dir=str(tmp_path / "no-static"))
    return TestClient(app)


@pytest.fixture
def json_headers():
    return {"Accept": "application/json"}
