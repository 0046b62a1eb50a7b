"""
Shared test fixtures: temporary order stores, upload dir, test client.
"""

import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# Keep module-level config away from the working tree before importing app modules
_TMP = tempfile.mkdtemp(prefix="copisteria-tests-")
os.environ["DATA_DIR"] = _TMP
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["PUBLIC_DIR"] = os.path.join(_TMP, "public")
os.environ["ORDER_WEBHOOK_URL"] = ""

from copisteria import config
from copisteria.db.json_store import JsonFileOrderStore
from copisteria.db.store import SQLOrderStore, get_order_store
from copisteria.main import app
from copisteria.services.notifier import OrderNotifier, get_notifier


@pytest.fixture
def sql_store(tmp_path):
    store = SQLOrderStore(f"sqlite:///{tmp_path / 'orders.db'}")
    store.create_tables()
    return store


@pytest.fixture
def json_store(tmp_path):
    return JsonFileOrderStore(str(tmp_path / "data" / "orders.json"))


@pytest.fixture(params=["sql", "json"])
def store(request, sql_store, json_store):
    """Each API test runs against both store implementations."""
    return sql_store if request.param == "sql" else json_store


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(config, "UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def client(store, upload_dir):
    app.dependency_overrides[get_order_store] = lambda: store
    app.dependency_overrides[get_notifier] = lambda: OrderNotifier(webhook_url="")
    yield TestClient(app)
    app.dependency_overrides.clear()
