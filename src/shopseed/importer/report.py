"""
shopseed.importer.report - Structured result of one import run.

The report is the run's only state: which step it reached, what each
entity read/accepted/rejected, the accepted-ID sets handed to dependent
entities, and which entities are actually persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set


class RunState(Enum):
    RESETTING = "resetting"
    IMPORTING_PRODUCTS = "importing_products"
    IMPORTING_USERS = "importing_users"
    IMPORTING_ADDRESSES = "importing_addresses"
    IMPORTING_CARTS = "importing_carts"
    IMPORTING_ORDERS = "importing_orders"
    IMPORTING_ORDER_LINE_ITEMS = "importing_order_line_items"
    DONE = "done"
    FAILED = "failed"


@dataclass
class EntityResult:
    entity: str
    read: int = 0
    written: int = 0
    defaulted_timestamps: int = 0
    accepted_ids: Set[int] = field(default_factory=set)
    rejections: List[dict] = field(default_factory=list)   # [{row, code, reason}]

    @property
    def rejected(self) -> int:
        return len(self.rejections)

    def add_rejection(self, row: int, code: str, reason: str):
        self.rejections.append({"row": row, "code": code, "reason": reason})

    def to_dict(self) -> dict:
        return {
            "entity": self.entity,
            "read": self.read,
            "written": self.written,
            "rejected": self.rejected,
            "defaulted_timestamps": self.defaulted_timestamps,
            "rejections": self.rejections,
        }


@dataclass
class ImportReport:
    atomic: bool = False
    state: RunState = RunState.RESETTING
    failed_state: Optional[RunState] = None
    failed_entity: Optional[str] = None
    error: Optional[Dict[str, Any]] = None
    entities: Dict[str, EntityResult] = field(default_factory=dict)
    committed_entities: List[str] = field(default_factory=list)
    tables_reset: bool = False

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.DONE

    def entity(self, name: str) -> EntityResult:
        if name not in self.entities:
            self.entities[name] = EntityResult(entity=name)
        return self.entities[name]

    def accepted_ids(self, name: str) -> Set[int]:
        result = self.entities.get(name)
        return set(result.accepted_ids) if result else set()

    def advance(self, state: RunState):
        self.state = state

    def fail(self, entity: Optional[str], error: Dict[str, Any]):
        self.failed_state = self.state
        self.failed_entity = entity
        self.error = error
        self.state = RunState.FAILED

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "succeeded": self.succeeded,
            "atomic": self.atomic,
            "tables_reset": self.tables_reset,
            "failed_state": self.failed_state.value if self.failed_state else None,
            "failed_entity": self.failed_entity,
            "error": self.error,
            "committed_entities": list(self.committed_entities),
            "entities": {name: r.to_dict() for name, r in self.entities.items()},
        }
