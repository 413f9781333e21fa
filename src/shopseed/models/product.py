from decimal import Decimal

from sqlalchemy import BigInteger, Column, Numeric, String, Text
from sqlalchemy.types import TypeDecorator

from shopseed.db import Base


class Price(TypeDecorator):
    """
    NUMERIC(10, 2) on PostgreSQL, which stores Decimal('NaN') natively.

    SQLite has no NaN-capable numeric column (a float NaN is stored as
    NULL), so there the value is kept as its decimal string.
    """

    impl = Numeric(10, 2)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(32))
        return dialect.type_descriptor(Numeric(10, 2))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return str(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None or dialect.name != "sqlite":
            return value
        return Decimal(value)


class Product(Base):
    """
    A product in the catalog.

    Source prices that are not numbers arrive as Decimal('NaN') and are
    written as-is.
    """

    __tablename__ = "products"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    name = Column(Text, nullable=False)
    price = Column(Price, nullable=False)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r}>"
