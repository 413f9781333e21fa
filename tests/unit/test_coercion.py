from datetime import datetime, timezone
from decimal import Decimal

import pytest

from shopseed.core.exceptions import (
    InvalidAddressFormat,
    InvalidIdentifier,
    InvalidQuantity,
)
from shopseed.importer import coercion

NOW = datetime(2026, 1, 15, 8, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw,expected", [
    ("42", 42),
    (" 7 ", 7),
    ("-3", -3),
    ("+5", 5),
    ("", None),
    ("abc", None),
    ("12abc", None),
    ("1.5", None),
    ("1_000", None),
    (None, None),
])
def test_parse_int(raw, expected):
    assert coercion.parse_int(raw) == expected


def test_parse_decimal_valid():
    assert coercion.parse_decimal("19.99") == Decimal("19.99")


def test_parse_decimal_invalid_becomes_nan():
    assert coercion.parse_decimal("free").is_nan()
    assert coercion.parse_decimal("").is_nan()


def test_product_with_bad_price_is_not_rejected():
    row = coercion.coerce_product({"id": "1", "name": "Mouse", "price": "n/a"})

    assert row.id == 1
    assert row.price.is_nan()


def test_product_with_bad_id_is_rejected():
    with pytest.raises(InvalidIdentifier):
        coercion.coerce_product({"id": "x", "name": "Mouse", "price": "1"})


def test_user_fields_pass_through():
    row = coercion.coerce_user(
        {"id": "3", "name": "Carol", "email": "carol@example.com", "password": "pw"}
    )

    assert row.to_dict() == {
        "id": 3, "name": "Carol", "email": "carol@example.com", "password": "pw",
    }


def test_address_policy_fields_are_fixed():
    row = coercion.coerce_address(
        {"id": "1", "user_id": "2", "address": "42 Oak Ave, Portland, OR 97205"}
    )

    assert row.country == "USA"
    assert row.is_default is False
    assert row.user_id == 2


def test_address_with_bad_text_is_rejected():
    with pytest.raises(InvalidAddressFormat):
        coercion.coerce_address({"id": "1", "user_id": "2", "address": "Main St"})


def test_non_numeric_foreign_key_is_left_for_the_filter():
    row = coercion.coerce_order({"id": "1", "user_id": "abc", "created": ""}, NOW)

    assert row.user_id is None


def test_cart_timestamp_parsed():
    row = coercion.coerce_cart(
        {"id": "1", "user_id": "1", "product_id": "2", "quantity": "1",
         "created_at": "2024-03-01 09:15:00"},
        NOW,
    )

    assert row.created_at == datetime(2024, 3, 1, 9, 15, tzinfo=timezone.utc)
    assert row.created_at_defaulted is False


@pytest.mark.parametrize("created_at", [None, "", "   ", "not a date", "2024-13-45"])
def test_cart_timestamp_falls_back_to_now(created_at):
    record = {"id": "1", "user_id": "1", "product_id": "2", "quantity": "1"}
    if created_at is not None:
        record["created_at"] = created_at

    row = coercion.coerce_cart(record, NOW)

    assert row.created_at == NOW
    assert row.created_at_defaulted is True


def test_cart_to_dict_drops_bookkeeping():
    row = coercion.coerce_cart(
        {"id": "1", "user_id": "1", "product_id": "2", "quantity": "3"}, NOW
    )

    assert set(row.to_dict()) == {"id", "user_id", "product_id", "quantity", "created_at"}


def test_cart_with_bad_quantity_is_rejected():
    with pytest.raises(InvalidQuantity):
        coercion.coerce_cart(
            {"id": "1", "user_id": "1", "product_id": "2", "quantity": "lots"}, NOW
        )


def test_order_timestamp_uses_source_timezone():
    row = coercion.coerce_order(
        {"id": "1", "user_id": "1", "created": "2024-01-03 10:30:00"},
        NOW,
        source_timezone="US/Eastern",
    )

    assert row.created_at == datetime(2024, 1, 3, 15, 30, tzinfo=timezone.utc)


def test_line_item_amount_maps_to_quantity():
    row = coercion.coerce_order_line_item(
        {"id": "9", "order_id": "1", "product_id": "4", "amount": "3"}
    )

    assert row.to_dict() == {"id": 9, "order_id": 1, "product_id": 4, "quantity": 3}


@pytest.mark.parametrize("amount", ["", "two", "1.5"])
def test_line_item_with_bad_amount_is_rejected(amount):
    with pytest.raises(InvalidQuantity) as exc_info:
        coercion.coerce_order_line_item(
            {"id": "9", "order_id": "1", "product_id": "4", "amount": amount}
        )

    assert exc_info.value.details["field"] == "amount"
