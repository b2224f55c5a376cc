"""Tests for record filtering and sorting."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from drivepath.schemas.records import FileKind, FileRecord
from drivepath.services.sorting import sort_records


def _record(name: str, size: int | None = None, modified: datetime | None = None) -> FileRecord:
    return FileRecord(
        name=name,
        kind=FileKind.FILE,
        provider="google_drive",
        path=f"/{name}",
        mime_type="text/plain",
        size=size,
        last_modified_time=modified,
    )


@pytest.fixture
def records() -> list[FileRecord]:
    """Create a small listing."""
    return [
        _record("b.txt", 20, datetime(2024, 3, 1, tzinfo=timezone.utc)),
        _record("a.txt", 10, datetime(2024, 1, 1, tzinfo=timezone.utc)),
        _record("doc", None, None),
        _record("c.txt", 30, datetime(2024, 2, 1, tzinfo=timezone.utc)),
    ]


class TestSorting:
    """Tests for ordering."""

    def test_no_options_keeps_order(self, records):
        """Test records pass through untouched by default."""
        assert sort_records(records) == records
        assert sort_records(records) is not records

    def test_sort_by_name(self, records):
        """Test ascending sort by name."""
        result = sort_records(records, order_by="name")
        assert [r.name for r in result] == ["a.txt", "b.txt", "c.txt", "doc"]

    def test_sort_desc_puts_missing_last(self, records):
        """Test records without the field go last in either direction."""
        result = sort_records(records, order_by="size", direction="desc")
        assert [r.name for r in result] == ["c.txt", "b.txt", "a.txt", "doc"]

    def test_sort_by_wire_name(self, records):
        """Test camelCase field names are accepted."""
        result = sort_records(records, order_by="lastModifiedTime")
        assert [r.name for r in result] == ["a.txt", "c.txt", "b.txt", "doc"]

    def test_unknown_direction(self, records):
        """Test an unknown direction is rejected."""
        with pytest.raises(ValueError):
            sort_records(records, order_by="name", direction="sideways")


class TestFiltering:
    """Tests for field comparison."""

    def test_filter_numeric(self, records):
        """Test string values are coerced to the field type."""
        result = sort_records(records, compare_with="size", operator="gt", value="15")
        assert [r.name for r in result] == ["b.txt", "c.txt"]

    def test_filter_datetime(self, records):
        """Test ISO timestamps compare against datetimes."""
        result = sort_records(
            records,
            compare_with="lastModifiedTime",
            operator="lt",
            value="2024-02-15T00:00:00Z",
        )
        assert {r.name for r in result} == {"a.txt", "c.txt"}

    def test_filter_date_without_offset(self, records):
        """Test a plain date compares as UTC midnight."""
        result = sort_records(
            records, compare_with="lastModifiedTime", operator="gt", value="2024-01-15"
        )
        assert {r.name for r in result} == {"b.txt", "c.txt"}

    def test_filter_naive_datetime_value(self, records):
        """Test a naive datetime object is taken as UTC."""
        result = sort_records(
            records,
            compare_with="lastModifiedTime",
            operator="eq",
            value=datetime(2024, 1, 1),
        )
        assert [r.name for r in result] == ["a.txt"]

    def test_filter_eq_on_name(self, records):
        """Test equality on strings."""
        result = sort_records(records, compare_with="name", operator="eq", value="doc")
        assert [r.name for r in result] == ["doc"]

    def test_filter_then_sort(self, records):
        """Test filtering happens before ordering."""
        result = sort_records(
            records,
            compare_with="size",
            operator="neq",
            value=20,
            order_by="size",
            direction="desc",
        )
        assert [r.name for r in result] == ["c.txt", "a.txt"]

    def test_unknown_field(self, records):
        """Test unknown fields are rejected."""
        with pytest.raises(ValueError):
            sort_records(records, compare_with="colour", operator="eq", value="red")

    def test_unknown_operator(self, records):
        """Test unknown operators are rejected."""
        with pytest.raises(ValueError):
            sort_records(records, compare_with="size", operator="like", value=1)
