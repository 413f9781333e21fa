"""Shared fixtures: a throwaway SQLite store and a CSV source directory."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict

import pytest

from shopseed.core.config import ImportConfig
from shopseed.db import Base, Store
import shopseed.models  # noqa: F401  registers every table on Base.metadata

FIXED_NOW = datetime(2026, 1, 15, 8, 30, tzinfo=timezone.utc)

DEFAULT_SOURCES: Dict[str, str] = {
    "products.csv": (
        "id,name,price\n"
        "1,Wireless Mouse,24.99\n"
        "2,Mechanical Keyboard,89.50\n"
        "3,USB-C Hub,39.00\n"
    ),
    "users.csv": (
        "id,name,email,password\n"
        "1,Alice Johnson,alice@example.com,pw1\n"
        "2,Bob Smith,bob@example.com,pw2\n"
        "3,Carol White,carol@example.com,pw3\n"
    ),
    "addresses.csv": (
        "id,user_id,address\n"
        '1,1,"123 Main St, Apt 4, Springfield, IL 62704"\n'
        '2,2,"42 Oak Ave, Portland, OR 97205"\n'
    ),
    "carts.csv": (
        "id,user_id,product_id,quantity,created_at\n"
        "1,1,2,1,2024-03-01 09:15:00\n"
        "2,2,1,2,\n"
    ),
    "orders.csv": (
        "id,user_id,created\n"
        "1,1,2024-02-10 12:00:00\n"
        "2,3,2024-02-11 16:45:00\n"
    ),
    "order_products.csv": (
        "id,order_id,product_id,amount\n"
        "1,1,1,2\n"
        "2,1,3,1\n"
        "3,2,2,1\n"
    ),
}


@pytest.fixture
def store(tmp_path):
    """File-backed SQLite store with all six tables created."""
    db_store = Store.from_url(f"sqlite:///{tmp_path / 'shopseed.sqlite'}")
    Base.metadata.create_all(db_store.engine)
    yield db_store
    db_store.close()


@pytest.fixture
def csv_dir(tmp_path) -> Path:
    """Directory pre-filled with a small, fully valid dataset."""
    directory = tmp_path / "csv"
    directory.mkdir()
    for name, content in DEFAULT_SOURCES.items():
        (directory / name).write_text(content, encoding="utf-8")
    return directory


@pytest.fixture
def write_source(csv_dir):
    """Overwrite one source file: write_source("carts.csv", text)."""
    def _write(name: str, content: str) -> Path:
        path = csv_dir / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def settings(csv_dir) -> ImportConfig:
    return ImportConfig(csv_dir=csv_dir)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW
