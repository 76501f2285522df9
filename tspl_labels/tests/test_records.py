"""Tests for label records and page planning.

Validates record construction from JSON/CSV mappings, immutability, and
the chunking of records into physical pages.
"""

from __future__ import annotations

import dataclasses
import math

import pytest

from tspl_labels.records.labels import LabelRecord, Position, plan_pages


def _records(n: int) -> list[LabelRecord]:
    return [LabelRecord(f"QR-{i}", f"Item {i}", str(i)) for i in range(n)]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class TestLabelRecord:
    def test_defaults(self) -> None:
        rec = LabelRecord("SKU-1")
        assert rec.name == ""
        assert rec.id == ""

    def test_frozen(self) -> None:
        rec = LabelRecord("SKU-1", "Widget", "1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            rec.name = "Other"  # type: ignore[misc]

    def test_position_frozen(self) -> None:
        pos = Position(10, 20)
        with pytest.raises(dataclasses.FrozenInstanceError):
            pos.x = 5  # type: ignore[misc]

    @pytest.mark.parametrize("key", ["qr_payload", "qrPayload", "qr"])
    def test_from_mapping_qr_keys(self, key: str) -> None:
        rec = LabelRecord.from_mapping({key: "P-9", "name": "Bolt", "id": "9"})
        assert rec == LabelRecord("P-9", "Bolt", "9")

    def test_from_mapping_missing_optional(self) -> None:
        rec = LabelRecord.from_mapping({"qr": "P-9"})
        assert rec.name == ""
        assert rec.id == ""

    def test_from_mapping_stringifies(self) -> None:
        rec = LabelRecord.from_mapping({"qr": 1234, "id": 56})
        assert rec.qr_payload == "1234"
        assert rec.id == "56"

    def test_from_mapping_missing_qr(self) -> None:
        with pytest.raises(ValueError, match="needs one of"):
            LabelRecord.from_mapping({"name": "Bolt"})

    @pytest.mark.parametrize("row", ["SKU-1", 42, ["qr", "x"], None])
    def test_from_mapping_rejects_non_mapping(self, row) -> None:
        with pytest.raises(ValueError, match="must be a mapping"):
            LabelRecord.from_mapping(row)

    def test_from_mapping_keeps_falsy_values(self) -> None:
        rec = LabelRecord.from_mapping({"qr": "X", "name": 0, "id": 0})
        assert rec.name == "0"
        assert rec.id == "0"

    def test_from_mapping_none_is_empty(self) -> None:
        rec = LabelRecord.from_mapping({"qr": "X", "name": None, "id": None})
        assert (rec.name, rec.id) == ("", "")


# ---------------------------------------------------------------------------
# Page planning
# ---------------------------------------------------------------------------


class TestPlanPages:
    def test_empty(self) -> None:
        assert plan_pages([], 4) == []

    @pytest.mark.parametrize("n,k", [(1, 4), (4, 4), (5, 4), (9, 2), (7, 3)])
    def test_page_count(self, n: int, k: int) -> None:
        pages = plan_pages(_records(n), k)
        assert len(pages) == math.ceil(n / k)

    def test_order_preserved(self) -> None:
        records = _records(7)
        pages = plan_pages(records, 3)
        assert [r for page in pages for r in page] == records

    def test_only_last_page_short(self) -> None:
        pages = plan_pages(_records(5), 2)
        assert [len(p) for p in pages] == [2, 2, 1]

    def test_pages_are_tuples(self) -> None:
        pages = plan_pages(_records(3), 2)
        assert all(isinstance(p, tuple) for p in pages)

    @pytest.mark.parametrize("k", [0, -1])
    def test_non_positive_rejected(self, k: int) -> None:
        with pytest.raises(ValueError, match="must be positive"):
            plan_pages(_records(3), k)

    def test_non_int_rejected(self) -> None:
        with pytest.raises(ValueError, match="must be an int"):
            plan_pages(_records(3), 2.0)  # type: ignore[arg-type]

    def test_zero_rejected_even_when_empty(self) -> None:
        with pytest.raises(ValueError):
            plan_pages([], 0)
