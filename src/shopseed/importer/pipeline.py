"""
shopseed.importer.pipeline - Top-level orchestrator.

Runs reset → products → users → addresses → carts → orders → order
products, strictly in that order, because each dependent entity is
filtered against the ids accepted for its parent earlier in the run.

Row problems are logged and skipped.  Anything worse (unreadable source,
empty dependent entity, store failure) stops the run and is recorded in
the returned ImportReport; run() itself does not raise for those.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Callable, List, Optional, Sequence, Type

from shopseed.core.config import ImportConfig
from shopseed.core.exceptions import (
    EmptyResultError,
    SeedError,
    UnexpectedFailure,
    ValidationRejection,
)
from shopseed.db import Base, Store
from shopseed.importer import coercion
from shopseed.importer.integrity import ReferenceFilter, UniqueGuard, normalize_email
from shopseed.importer.reader import read_source
from shopseed.importer.report import ImportReport, RunState
from shopseed.importer.reset import reset_tables
from shopseed.models import Address, Cart, Order, OrderLineItem, Product, User
from shopseed.repositories.table_repository import TableRepository
from shopseed.utils.date_utils import DateUtils

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntitySource:
    """Fixed contract for one entity: file, columns, table, run state."""
    name: str
    label: str
    filename: str
    required: Sequence[str]
    model: Type[Base]
    state: RunState
    empty_guard: bool


PRODUCTS = EntitySource(
    "products", "Products", "products.csv",
    ("id", "name", "price"), Product, RunState.IMPORTING_PRODUCTS, False,
)
USERS = EntitySource(
    "users", "Users", "users.csv",
    ("id", "name", "email", "password"), User, RunState.IMPORTING_USERS, False,
)
ADDRESSES = EntitySource(
    "addresses", "Addresses", "addresses.csv",
    ("id", "user_id", "address"), Address, RunState.IMPORTING_ADDRESSES, True,
)
CARTS = EntitySource(
    "carts", "Carts", "carts.csv",
    ("id", "user_id", "product_id", "quantity"), Cart, RunState.IMPORTING_CARTS, True,
)
ORDERS = EntitySource(
    "orders", "Orders", "orders.csv",
    ("id", "user_id"), Order, RunState.IMPORTING_ORDERS, True,
)
ORDER_PRODUCTS = EntitySource(
    "order_products", "Order products", "order_products.csv",
    ("id", "order_id", "product_id", "amount"), OrderLineItem,
    RunState.IMPORTING_ORDER_LINE_ITEMS, True,
)

# Dependency order
ENTITY_SOURCES = (PRODUCTS, USERS, ADDRESSES, CARTS, ORDERS, ORDER_PRODUCTS)


class ImportPipeline:
    """
    One full-replace import run against an explicit store handle.

    Best-effort mode (default) commits the reset and every entity as it
    goes, so a failure leaves earlier tables populated; the report lists
    them in committed_entities.  Atomic mode wraps the whole run in one
    transaction and rolls everything back on failure.
    """

    def __init__(
        self,
        store: Store,
        settings: Optional[ImportConfig] = None,
        clock: Callable[[], datetime] = DateUtils.now_utc,
    ):
        self.store = store
        self.settings = settings or ImportConfig()
        self.repository = TableRepository(store)
        self._clock = clock

    def run(self) -> ImportReport:
        report = ImportReport(atomic=self.settings.atomic)
        logger.info(
            "Starting import from %s (%s mode)",
            self.settings.csv_dir, "atomic" if self.settings.atomic else "best-effort",
        )

        try:
            if self.settings.atomic:
                with self.store.transaction():
                    self._run_steps(report)
            else:
                self._run_steps(report)
        except SeedError as exc:
            self._fail(report, exc)
        except Exception as exc:
            logger.exception("Unexpected failure while %s", report.state.value)
            self._fail(report, UnexpectedFailure(str(exc), {"type": type(exc).__name__}))

        if report.succeeded:
            logger.info("Import completed successfully")
        return report

    # ── Steps ──────────────────────────────────────────────────────────

    def _run_steps(self, report: ImportReport) -> None:
        report.advance(RunState.RESETTING)
        reset_tables(self.repository)
        report.tables_reset = True

        now = self._clock()
        tz = self.settings.timezone

        self._import_entity(report, PRODUCTS, coercion.coerce_product)

        self._import_entity(
            report, USERS, coercion.coerce_user,
            unique=[UniqueGuard("email", normalize_email)],
        )
        user_ids = report.accepted_ids(USERS.name)

        self._import_entity(
            report, ADDRESSES, coercion.coerce_address,
            filters=[ReferenceFilter("address", "user_id", "user", user_ids)],
        )

        self._import_entity(
            report, CARTS, partial(coercion.coerce_cart, now=now, source_timezone=tz),
            filters=[ReferenceFilter("cart", "user_id", "user", user_ids)]
            + self._product_filters(report, "cart"),
        )

        self._import_entity(
            report, ORDERS, partial(coercion.coerce_order, now=now, source_timezone=tz),
            filters=[ReferenceFilter("order", "user_id", "user", user_ids)],
        )
        order_ids = report.accepted_ids(ORDERS.name)

        self._import_entity(
            report, ORDER_PRODUCTS, coercion.coerce_order_line_item,
            filters=[ReferenceFilter("order product", "order_id", "order", order_ids)]
            + self._product_filters(report, "order product"),
        )

        report.advance(RunState.DONE)

    def _product_filters(self, report: ImportReport, entity: str) -> List[ReferenceFilter]:
        # product_id is stored unchecked unless strict references are on
        if not self.settings.strict_product_refs:
            return []
        return [ReferenceFilter(entity, "product_id", "product", report.accepted_ids(PRODUCTS.name))]

    def _import_entity(
        self,
        report: ImportReport,
        source: EntitySource,
        coerce: Callable,
        filters: Sequence[ReferenceFilter] = (),
        unique: Sequence[UniqueGuard] = (),
    ) -> None:
        report.advance(source.state)
        result = report.entity(source.name)

        # a blank products/users file is zero rows; dependents still need a header
        records = read_source(
            self.settings.csv_dir / source.filename, source.required,
            allow_empty=not source.empty_guard,
        )
        result.read = len(records)

        guards = [UniqueGuard("id"), *unique]
        rows = []
        for row_num, record in enumerate(records, start=1):
            try:
                row = coerce(record)
                for check in filters:
                    check.check(row)
                for guard in guards:
                    guard.check(row)
            except ValidationRejection as exc:
                logger.warning("%s row %d: %s", source.filename, row_num, exc.message)
                result.add_rejection(row_num, exc.error_code, exc.message)
                continue

            for guard in guards:
                guard.accept(row)
            rows.append(row)

        if source.empty_guard and not rows:
            raise EmptyResultError(source.label.lower())

        result.written = self.repository.insert_many(source.model, [r.to_dict() for r in rows])
        result.accepted_ids = {r.id for r in rows}
        result.defaulted_timestamps = sum(
            1 for r in rows if getattr(r, "created_at_defaulted", False)
        )
        if result.defaulted_timestamps:
            logger.debug(
                "%s: %d timestamps defaulted to import time",
                source.label, result.defaulted_timestamps,
            )

        report.committed_entities.append(source.name)
        logger.info("%s imported successfully", source.label)

    # ── Failure ────────────────────────────────────────────────────────

    def _fail(self, report: ImportReport, exc: SeedError) -> None:
        entity = next(
            (s.name for s in ENTITY_SOURCES if s.state is report.state), None
        )
        logger.error("Error importing data: %s", exc.internal_message)
        report.fail(entity, exc.to_dict())

        if self.settings.atomic:
            # the run transaction was rolled back
            report.committed_entities.clear()
            report.tables_reset = False
        elif report.committed_entities:
            logger.warning(
                "Partial import left in place for: %s",
                ", ".join(report.committed_entities),
            )
