"""
Pytest configuration and shared fixtures for the purchase order test suite.
"""
import json
import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
os.chdir(PROJECT_ROOT)
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files."""
    tmp_path = tempfile.mkdtemp(prefix="purchase_orders_test_")
    yield Path(tmp_path)
    shutil.rmtree(tmp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path, monkeypatch) -> "Config":
    """Provide a configuration pointing at an isolated database file."""
    from config import Config

    # Keep a developer's config/service_settings.json out of the tests
    monkeypatch.setenv("CONFIG_DIR", str(temp_dir / "config"))
    config = Config()
    config.db_path = temp_dir / "data" / "db.json"
    return config


@pytest.fixture
def db_path(test_config) -> Path:
    return test_config.db_path


@pytest.fixture
def store(db_path: Path) -> "RecordStore":
    """Provide a record store over an empty (not yet created) file."""
    from orders.store import RecordStore
    return RecordStore(db_path)


@pytest.fixture
def service(store) -> "OrderService":
    """Provide an order service with predictable ids: po-1, po-2, ..."""
    from orders.identifiers import SequenceIdGenerator
    from orders.service import OrderService
    return OrderService(store, id_generator=SequenceIdGenerator())


@pytest.fixture
def sample_orders() -> list[dict]:
    """Return purchase orders in their on-disk (camelCase) form."""
    return [
        {"id": "a1", "itemName": "Bolt", "category": "Hardware",
         "quantity": 100, "supplier": "Acme", "status": "Pending"},
        {"id": "b2", "itemName": "Copy Paper A4", "category": "Stationery",
         "quantity": 20, "supplier": "OfficeWorks", "status": "Approved"},
        {"id": "c3", "itemName": "Hex Bolt M8", "category": "Hardware",
         "quantity": 500, "supplier": "Acme Industrial", "status": "Delivered"},
        {"id": "d4", "itemName": "Laptop Stand", "category": "Office Equipment",
         "quantity": 5, "supplier": "Globex", "status": "Rejected"},
    ]


@pytest.fixture
def populated_db(db_path: Path, sample_orders: list[dict]) -> Path:
    """Write the sample orders to the test database file."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    db_path.write_text(json.dumps({"purchaseOrders": sample_orders}, indent=2), encoding="utf-8")
    return db_path


# Configure pytest markers
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "api: API tests")
