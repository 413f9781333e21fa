from datetime import datetime, timezone

import pytest

from shopseed.utils.date_utils import DateUtils

DEFAULT = datetime(2026, 1, 15, tzinfo=timezone.utc)


def test_now_utc_is_aware():
    assert DateUtils.now_utc().tzinfo is timezone.utc


def test_to_utc_localizes_naive_values():
    naive = datetime(2024, 7, 1, 12, 0)

    assert DateUtils.to_utc(naive, "US/Pacific") == datetime(2024, 7, 1, 19, 0, tzinfo=timezone.utc)


def test_to_utc_assumes_utc_without_timezone():
    assert DateUtils.to_utc(datetime(2024, 7, 1, 12, 0)).tzinfo == timezone.utc


@pytest.mark.parametrize("raw", [
    "2024-02-10T12:00:00Z",
    "2024-02-10 12:00:00",
    "Feb 10 2024 12:00",
    "2024-02-10T14:00:00+02:00",
])
def test_parse_flexible_formats(raw):
    assert DateUtils.parse_flexible(raw) == datetime(2024, 2, 10, 12, 0, tzinfo=timezone.utc)


def test_parse_flexible_rejects_garbage():
    with pytest.raises(ValueError):
        DateUtils.parse_flexible("yesterday-ish")


def test_parse_or_default_reports_substitution():
    assert DateUtils.parse_or_default("garbage", DEFAULT) == (DEFAULT, True)
    assert DateUtils.parse_or_default(None, DEFAULT) == (DEFAULT, True)
    assert DateUtils.parse_or_default("2024-02-10", DEFAULT) == (
        datetime(2024, 2, 10, tzinfo=timezone.utc), False,
    )
