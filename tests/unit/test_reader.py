import pytest

from shopseed.core.exceptions import FormatError
from shopseed.importer.reader import read_records, read_source


def test_reads_rows_in_order_keyed_by_header():
    records = read_records("id,name,price\n2,Hub,39.00\n1,Mouse,24.99\n")

    assert records == [
        {"id": "2", "name": "Hub", "price": "39.00"},
        {"id": "1", "name": "Mouse", "price": "24.99"},
    ]


def test_skips_empty_lines():
    records = read_records("id,name\n\n1,a\n\n\n2,b\n")

    assert [r["id"] for r in records] == ["1", "2"]


def test_strips_bom_and_header_whitespace():
    raw = "\ufeff id , name \n1,a\n".encode("utf-8")

    assert read_records(raw) == [{"id": "1", "name": "a"}]


def test_quoted_field_keeps_embedded_commas():
    records = read_records('id,user_id,address\n1,2,"1 Main St, Springfield, IL 62704"\n')

    assert records[0]["address"] == "1 Main St, Springfield, IL 62704"


def test_header_only_source_yields_no_records():
    assert read_records("id,name\n") == []


def test_column_count_mismatch_fails_whole_read():
    with pytest.raises(FormatError) as exc_info:
        read_records("id,name\n1,a\n2,b,extra\n3,c\n", source="users.csv")

    assert exc_info.value.details == {"source": "users.csv", "line": 3}


def test_short_row_is_also_a_format_error():
    with pytest.raises(FormatError):
        read_records("id,name,price\n1,a\n")


def test_empty_source_is_a_format_error():
    with pytest.raises(FormatError):
        read_records("   \n")


def test_empty_source_allowed_reads_as_no_records():
    assert read_records("", allow_empty=True) == []
    assert read_records(b"\xef\xbb\xbf\n", allow_empty=True) == []


def test_missing_required_column():
    with pytest.raises(FormatError, match="amount"):
        read_records("id,order_id,product_id\n1,1,1\n", required=("id", "order_id", "amount"))


def test_read_source_missing_file(tmp_path):
    with pytest.raises(FormatError, match="Cannot read"):
        read_source(tmp_path / "nope.csv")


def test_read_source_from_disk(tmp_path):
    path = tmp_path / "products.csv"
    path.write_text("id,name,price\n1,Mouse,24.99\n", encoding="utf-8")

    assert read_source(path, required=("id", "name", "price")) == [
        {"id": "1", "name": "Mouse", "price": "24.99"}
    ]
