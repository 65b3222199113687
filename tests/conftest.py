"""Shared pytest fixtures.

Every test gets its own in-memory slot storage, and the package logger is put
back to its unconfigured state afterwards so entrypoints that call
``configure_logging`` do not leak handlers into later tests.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path

import pytest

from api.app import create_app
from common.config import Settings
from common.models import ExpenseItem
from common.services import ExpenseStore
from common.storage import MemoryStorage


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "EXPENSE_TRACKER_DATA_DIR",
        "EXPENSE_TRACKER_STORAGE_KEY",
        "EXPENSE_TRACKER_CURRENCY",
        "EXPENSE_TRACKER_ENV",
        "EXPENSE_TRACKER_ALLOWED_ORIGINS",
        "EXPENSE_TRACKER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    logger = logging.getLogger("expense_tracker")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> ExpenseStore:
    return ExpenseStore(storage)


@pytest.fixture
def coffee() -> ExpenseItem:
    return ExpenseItem.create("Coffee", "Personal", Decimal("3.50"))


@pytest.fixture
def rent() -> ExpenseItem:
    return ExpenseItem.create("Rent", "Business", Decimal("1200.00"))


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def app(data_dir: Path):
    app = create_app(data_dir, settings=Settings())
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()
