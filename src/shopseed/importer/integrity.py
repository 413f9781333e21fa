"""
shopseed.importer.integrity - Foreign-key and uniqueness checks.

Both checks run against what this run has accepted so far, never against
what happens to be in the store: every run is a full replace.
"""

from __future__ import annotations

from typing import AbstractSet, Any, Dict, Hashable, TypeVar

from shopseed.core.exceptions import DuplicateKey, MissingReference

RowT = TypeVar("RowT")


class ReferenceFilter:
    """
    Accept a row only if its foreign key is in the parent's accepted-ID set.

    One filter per (child entity, key field) pair, e.g.
        ReferenceFilter("cart", "user_id", "user", accepted_user_ids)
    """

    def __init__(self, entity: str, field_name: str, referenced: str, accepted_ids: AbstractSet[int]):
        self.entity = entity
        self.field_name = field_name
        self.referenced = referenced
        self.accepted_ids = accepted_ids

    def check(self, row: RowT) -> RowT:
        value = getattr(row, self.field_name)
        if value is None or value not in self.accepted_ids:
            raise MissingReference(self.entity, self.field_name, self.referenced, value)
        return row


class UniqueGuard:
    """
    Reject a second row carrying an already-accepted key value.

    For keys other than the id itself the rejection names both the
    rejected row's id and the id that claimed the key first.
    """

    def __init__(self, field_name: str, normalize=None):
        self.field_name = field_name
        self._normalize = normalize
        self._seen: Dict[Hashable, Any] = {}  # key -> id of the row that claimed it

    def _key(self, row: Any) -> Hashable:
        value = getattr(row, self.field_name)
        return self._normalize(value) if self._normalize else value

    def check(self, row: RowT) -> RowT:
        key = self._key(row)
        if key in self._seen:
            value = getattr(row, self.field_name)
            if self.field_name == "id":
                raise DuplicateKey(self.field_name, value)
            raise DuplicateKey(
                self.field_name, value,
                row_id=getattr(row, "id", None), first_id=self._seen[key],
            )
        return row

    def accept(self, row: Any) -> None:
        """Record the row's key; call only once the row passed every check."""
        self._seen[self._key(row)] = getattr(row, "id", None)


def normalize_email(email: str) -> str:
    """Case-insensitive comparison key for user emails."""
    return email.strip().lower()
