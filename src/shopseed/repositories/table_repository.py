from typing import Any, Dict, List, Type

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shopseed.core.exceptions import DatabaseError
from shopseed.db import Base, Store
import logging

logger = logging.getLogger(__name__)


class TableRepository:
    """
    Table-scoped write access for the importer.

    The pipeline only ever needs three things from the store: wipe a
    table, bulk-insert validated rows, and count what ended up there.
    Each call runs in its own transaction unless the store has an atomic
    run transaction open, in which case it joins that one.
    """

    def __init__(self, store: Store):
        self.store = store

    def delete_all(self, model: Type[Base]) -> int:
        """
        Delete every row of model's table

        Returns:
            Number of deleted rows (as reported by the driver)
        """
        table = model.__tablename__
        try:
            with self.store.connection() as conn:
                result = conn.execute(delete(model.__table__))
                return result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"Delete failed on {table}: {str(e)}")
            raise DatabaseError(f"Delete failed: {str(e)}", "DELETE", table)

    def insert_many(self, model: Type[Base], rows: List[Dict[str, Any]]) -> int:
        """
        Insert all rows in one executemany round trip

        Returns:
            Number of rows written; an empty list is a no-op
        """
        if not rows:
            return 0

        table = model.__tablename__
        try:
            with self.store.connection() as conn:
                conn.execute(insert(model.__table__), rows)
                return len(rows)
        except IntegrityError as e:
            logger.error(f"Integrity constraint violation on {table}: {str(e)}")
            raise DatabaseError(f"Data integrity violation: {str(e)}", "INSERT", table)
        except SQLAlchemyError as e:
            logger.error(f"Insert failed on {table}: {str(e)}")
            raise DatabaseError(f"Insert failed: {str(e)}", "INSERT", table)

    def count(self, model: Type[Base]) -> int:
        table = model.__tablename__
        try:
            with self.store.connection() as conn:
                return conn.execute(select(func.count()).select_from(model.__table__)).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Count failed on {table}: {str(e)}")
            raise DatabaseError(f"Count failed: {str(e)}", "SELECT", table)
