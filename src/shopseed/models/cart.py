from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, Integer

from shopseed.db import Base


class Cart(Base):
    """
    One product + quantity held in a user's cart.

    product_id is deliberately not a foreign key: the source data may
    reference products that were never imported.
    """

    __tablename__ = "carts"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    user_id = Column(BigInteger, nullable=False)
    product_id = Column(BigInteger, nullable=False)
    quantity = Column(Integer, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return (
            f"<Cart id={self.id} user_id={self.user_id} "
            f"product_id={self.product_id} qty={self.quantity}>"
        )
