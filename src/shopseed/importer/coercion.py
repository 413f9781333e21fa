"""
shopseed.importer.coercion - Raw record → typed row, one function per entity.

Every coerce_* function is pure apart from the `now` it is handed: given
one raw mapping it either returns a row dataclass or raises a
ValidationRejection.  Foreign keys that fail to parse come back as None
and are left for the integrity filter to reject.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, asdict
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from shopseed.core.exceptions import InvalidIdentifier, InvalidQuantity
from shopseed.importer.address_parser import parse_address
from shopseed.importer.reader import Record
from shopseed.utils.date_utils import DateUtils

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_int(raw: Optional[str]) -> Optional[int]:
    """Base-10 integer, or None when raw is missing or not an integer."""
    if raw is None or not _INTEGER.fullmatch(raw.strip()):
        return None
    return int(raw.strip())


def parse_decimal(raw: Optional[str]) -> Decimal:
    """Decimal value; anything unparsable becomes Decimal('NaN')."""
    try:
        return Decimal((raw or "").strip())
    except InvalidOperation:
        return Decimal("NaN")


def _require_id(record: Record, column: str) -> int:
    value = parse_int(record.get(column))
    if value is None:
        raise InvalidIdentifier(column, record.get(column))
    return value


def _require_quantity(record: Record, column: str) -> int:
    value = parse_int(record.get(column))
    if value is None:
        raise InvalidQuantity(column, record.get(column))
    return value


class _Row:
    def to_dict(self) -> Dict[str, Any]:
        """Column values for the batch insert"""
        return asdict(self)


@dataclass
class ProductRow(_Row):
    id: int
    name: str
    price: Decimal


@dataclass
class UserRow(_Row):
    id: int
    name: str
    email: str
    password: str


@dataclass
class AddressRow(_Row):
    id: int
    user_id: Optional[int]
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    is_default: bool = False


@dataclass
class CartRow(_Row):
    id: int
    user_id: Optional[int]
    product_id: int
    quantity: int
    created_at: datetime
    created_at_defaulted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("created_at_defaulted")
        return data


@dataclass
class OrderRow(_Row):
    id: int
    user_id: Optional[int]
    created_at: datetime
    created_at_defaulted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("created_at_defaulted")
        return data


@dataclass
class OrderLineItemRow(_Row):
    id: int
    order_id: Optional[int]
    product_id: int
    quantity: int


def coerce_product(record: Record) -> ProductRow:
    return ProductRow(
        id=_require_id(record, "id"),
        name=record["name"],
        price=parse_decimal(record.get("price")),
    )


def coerce_user(record: Record) -> UserRow:
    return UserRow(
        id=_require_id(record, "id"),
        name=record["name"],
        email=record["email"],
        password=record["password"],
    )


def coerce_address(record: Record) -> AddressRow:
    """Raises InvalidAddressFormat / InvalidStateZipFormat for a bad address."""
    address_id = _require_id(record, "id")
    parsed = parse_address(record["address"])
    return AddressRow(
        id=address_id,
        user_id=parse_int(record.get("user_id")),
        street=parsed.street,
        city=parsed.city,
        state=parsed.state,
        zip_code=parsed.zip_code,
        country=parsed.country,
        is_default=False,
    )


def coerce_cart(record: Record, now: datetime, source_timezone: Optional[str] = None) -> CartRow:
    created_at, defaulted = DateUtils.parse_or_default(
        record.get("created_at"), now, source_timezone
    )
    return CartRow(
        id=_require_id(record, "id"),
        user_id=parse_int(record.get("user_id")),
        product_id=_require_id(record, "product_id"),
        quantity=_require_quantity(record, "quantity"),
        created_at=created_at,
        created_at_defaulted=defaulted,
    )


def coerce_order(record: Record, now: datetime, source_timezone: Optional[str] = None) -> OrderRow:
    created_at, defaulted = DateUtils.parse_or_default(
        record.get("created"), now, source_timezone
    )
    return OrderRow(
        id=_require_id(record, "id"),
        user_id=parse_int(record.get("user_id")),
        created_at=created_at,
        created_at_defaulted=defaulted,
    )


def coerce_order_line_item(record: Record) -> OrderLineItemRow:
    # source column is "amount", stored as quantity
    return OrderLineItemRow(
        id=_require_id(record, "id"),
        order_id=parse_int(record.get("order_id")),
        product_id=_require_id(record, "product_id"),
        quantity=_require_quantity(record, "amount"),
    )
