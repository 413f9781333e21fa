"""
shopseed.importer.reset - Clear all six tables before an import.

Children go first so that foreign keys never point at a deleted parent.
"""

from __future__ import annotations

import logging
from typing import Dict

from shopseed.models import Address, Cart, Order, OrderLineItem, Product, User
from shopseed.repositories.table_repository import TableRepository

logger = logging.getLogger(__name__)

# Reverse dependency order
RESET_ORDER = (Cart, Address, OrderLineItem, Order, Product, User)


def reset_tables(repository: TableRepository) -> Dict[str, int]:
    """Delete every row of every table; returns deleted counts by table."""
    logger.info("Clearing existing data...")
    deleted: Dict[str, int] = {}
    for model in RESET_ORDER:
        deleted[model.__tablename__] = repository.delete_all(model)
    logger.info("Existing data cleared")
    return deleted
