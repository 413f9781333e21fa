from datetime import datetime, timezone

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Integer, Text
from sqlalchemy import ForeignKey

from shopseed.db import Base


class Address(Base):
    """
    A US postal address belonging to a user.

    Seeded addresses always have country 'USA' and is_default false; the
    source files carry no information about either.
    """

    __tablename__ = "addresses"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    user_id = Column(BigInteger, nullable=False)
    street = Column(Text, nullable=False)
    city = Column(Text, nullable=False)
    state = Column(Text, nullable=False)
    zip_code = Column(Text, nullable=False)
    country = Column(Text, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Address id={self.id} city={self.city!r}>"


class Order(Base):
    """A purchase by a user."""

    __tablename__ = "orders"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    user_id = Column(BigInteger, ForeignKey("users.id"), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id} user_id={self.user_id}>"


class OrderLineItem(Base):
    """
    A single line item within an order.

    Stored in the order_products table. product_id is not a foreign key;
    the importer only checks it when strict product references are enabled.
    """

    __tablename__ = "order_products"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    order_id = Column(BigInteger, ForeignKey("orders.id"), nullable=False)
    product_id = Column(BigInteger, nullable=False)
    quantity = Column(Integer, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<OrderLineItem id={self.id} order_id={self.order_id} "
            f"qty={self.quantity}>"
        )
