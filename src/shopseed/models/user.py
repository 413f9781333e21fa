from sqlalchemy import BigInteger, Column, Text

from shopseed.db import Base


class User(Base):
    """
    A registered customer.

    id is taken verbatim from the source file, never generated by the
    database, so the seeded dataset is identical on every run.
    """

    __tablename__ = "users"

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    password = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
