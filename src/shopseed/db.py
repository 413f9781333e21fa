"""
Store handle -- owns the SQLAlchemy engine for one import run.

The handle is created explicitly by the entry point and passed into the
pipeline; nothing in the package holds a module-level engine:

    with Store.from_url(config.database.url) as store:
        ImportPipeline(store).run()
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import DeclarativeBase

from shopseed.core.config import DatabaseConfig

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class Store:
    """
    Process-wide database resource with explicit init/teardown.

    connection() hands out a connection for one unit of work. In atomic
    mode the pipeline calls transaction() instead, and every connection()
    request inside it reuses the same open transaction.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._shared: Optional[Connection] = None

    @classmethod
    def from_url(cls, url: str, db_config: Optional[DatabaseConfig] = None) -> "Store":
        kwargs = {"echo": db_config.echo if db_config else False, "future": True}
        if db_config and not url.startswith("sqlite"):
            kwargs.update(
                pool_size=db_config.pool_size,
                max_overflow=db_config.max_overflow,
                pool_timeout=db_config.pool_timeout,
                pool_recycle=db_config.pool_recycle,
            )
        logger.info("Opening store at %s", _redact(url))
        return cls(create_engine(url, **kwargs))

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        """Connection for one statement; commits on exit unless shared."""
        if self._shared is not None:
            yield self._shared
            return
        with self.engine.begin() as conn:
            yield conn

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Single transaction spanning every connection() call inside it."""
        with self.engine.begin() as conn:
            self._shared = conn
            try:
                yield conn
            finally:
                self._shared = None

    def close(self) -> None:
        self.engine.dispose()

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _redact(url: str) -> str:
    """Hide the password part of a database URL for logging."""
    if "@" not in url or "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    creds, host = rest.rsplit("@", 1)
    user = creds.split(":", 1)[0]
    return f"{scheme}://{user}:***@{host}"
