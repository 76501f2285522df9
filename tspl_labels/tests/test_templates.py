"""Tests for document assembly and size dispatch.

Validates the document-level properties: one header, one page block per
``ceil(n / k)`` chunk, per-page QR counts, termination with the end tag,
determinism, and fallback to the small stock for unknown size tags.
"""

from __future__ import annotations

import logging
import math

import pytest

from tspl_labels.configs.layout import ConfigError, LabelSize, default_config
from tspl_labels.records.labels import LabelRecord
from tspl_labels.tspl.generator import END_TAG, TSPLGenerator
from tspl_labels.tspl.templates import (
    assemble,
    generate_for_size,
    generate_from_values,
    generate_large,
    generate_medium,
    generate_small,
    resolve_size,
)

HEADER_OPEN = "<xpml><page quantity='0'"
PAGE_OPEN = "<xpml><page quantity='1'"


def _records(n: int) -> list[LabelRecord]:
    return [LabelRecord(f"QR-{i}", f"Item {i}", str(i)) for i in range(n)]


def _page_blocks(document: str) -> list[str]:
    return document.split(PAGE_OPEN)[1:]


# ---------------------------------------------------------------------------
# Document structure
# ---------------------------------------------------------------------------


class TestDocumentStructure:
    def test_empty_is_header_plus_end(self) -> None:
        doc = generate_for_size("small", [], {})
        header = TSPLGenerator(default_config(LabelSize.SMALL)).render_header()
        assert doc == header + END_TAG
        assert PAGE_OPEN not in doc

    def test_five_records_on_small(self) -> None:
        doc = generate_for_size("small", _records(5), {})
        blocks = _page_blocks(doc)
        assert len(blocks) == 2
        assert [b.count("QRCODE") for b in blocks] == [4, 1]

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 7, 8, 13])
    @pytest.mark.parametrize("k", [1, 2, 3, 4])
    def test_page_and_slot_counts(self, n: int, k: int) -> None:
        doc = generate_small(_records(n), {"itemsPerRow": k})
        blocks = _page_blocks(doc)
        assert len(blocks) == math.ceil(n / k)
        remaining = n
        for block in blocks:
            expected = min(k, remaining)
            assert block.count("QRCODE ") == expected
            assert block.count("TEXT ") == expected
            remaining -= expected

    def test_header_once(self) -> None:
        doc = generate_small(_records(9))
        assert doc.count(HEADER_OPEN) == 1
        assert doc.startswith(HEADER_OPEN)

    def test_codepage_once_per_page(self) -> None:
        doc = generate_small(_records(9))
        for block in _page_blocks(doc):
            commands = block.split("\n\n")
            assert sum(c.startswith("CODEPAGE") for c in commands) == 1
            assert commands[2].startswith("QRCODE")
            assert commands[3] == "CODEPAGE 1252"

    def test_ends_with_end_tag(self) -> None:
        for n in (0, 1, 6):
            doc = generate_medium(_records(n))
            assert doc.endswith(END_TAG)
            assert doc.count(END_TAG) == 1

    def test_blocks_concatenated_without_separator(self) -> None:
        doc = generate_small(_records(1))
        assert "<xpml></page></xpml><xpml><page quantity='1'" in doc
        assert "<xpml></page></xpml><xpml><end/></xpml>" in doc

    def test_deterministic(self) -> None:
        opts = {"density": 9, "itemsPerRow": 3}
        assert generate_large(_records(7), opts) == generate_large(_records(7), opts)

    def test_well_formed_quotes(self) -> None:
        records = [LabelRecord("line1\nline2", 'Widget "Pro"', 'A"1')]
        doc = generate_small(records)
        assert "Widget 'Pro'" in doc
        for line in doc.split("\n"):
            assert line.count('"') % 2 == 0

    def test_page_height_in_pitch(self) -> None:
        doc = generate_large(_records(1))
        assert "<xpml><page quantity='1' pitch='150.0 mm'></xpml>SET TEAR ON" in doc


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestContractViolations:
    def test_zero_items_per_page(self) -> None:
        with pytest.raises(ConfigError):
            generate_for_size("small", _records(3), {"itemsPerPage": 0})

    def test_zero_items_per_page_empty_input(self) -> None:
        with pytest.raises(ConfigError):
            generate_for_size("small", [], {"itemsPerRow": 0})


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestDispatch:
    @pytest.mark.parametrize(
        "tag,fn",
        [
            ("small", generate_small),
            ("25x25", generate_small),
            ("medium", generate_medium),
            ("100x50", generate_medium),
            ("large", generate_large),
            ("100x150", generate_large),
            (LabelSize.MEDIUM, generate_medium),
        ],
    )
    def test_matches_per_size_entry_point(self, tag, fn) -> None:
        records = _records(3)
        assert generate_for_size(tag, records) == fn(records)

    def test_unknown_tag_falls_back_to_small(self, caplog) -> None:
        records = _records(2)
        with caplog.at_level(logging.WARNING, logger="tspl_labels.tspl.templates"):
            doc = generate_for_size("A4", records)
        assert doc == generate_small(records)
        assert "Unknown label size 'A4'" in caplog.text

    def test_resolve_size(self) -> None:
        assert resolve_size("100x150") is LabelSize.LARGE
        assert resolve_size("bogus") is LabelSize.SMALL

    def test_assemble_matches(self) -> None:
        assert assemble(_records(2), LabelSize.LARGE) == generate_large(_records(2))


# ---------------------------------------------------------------------------
# Layout warnings
# ---------------------------------------------------------------------------


class TestLayoutWarnings:
    def test_medium_defaults_log_info(self, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="tspl_labels.tspl.templates"):
            generate_medium(_records(2))
        underflow = [r for r in caplog.records if "underflow" in r.getMessage()]
        assert len(underflow) == 2
        assert all(r.levelno == logging.INFO for r in underflow)
        assert "qr_positions has 1 entry for 2 items per page" in caplog.text

    def test_unrelated_override_keeps_info(self, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="tspl_labels.tspl.templates"):
            generate_large(_records(2), {"density": 12})
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_override_causing_underflow_warns(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="tspl_labels.tspl.templates"):
            generate_small(_records(5), {"itemsPerRow": 5})
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert {w.getMessage().split(": ", 1)[1].split(" ")[0] for w in warnings} == {
            "qr_positions",
            "name_text_positions",
        }

    def test_shortened_table_warns(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="tspl_labels.tspl.templates"):
            generate_small(_records(2), {"qrPositions": [[10, 10]]})
        assert "qr_positions has 1 entry for 4 items per page" in caplog.text

    def test_small_defaults_quiet(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="tspl_labels.tspl.templates"):
            generate_small(_records(4))
        assert "underflow" not in caplog.text

    def test_warning_does_not_change_output(self) -> None:
        doc = generate_small(_records(5), {"itemsPerRow": 5})
        blocks = _page_blocks(doc)
        assert len(blocks) == 1
        assert blocks[0].count("QRCODE 819,175,") == 2


# ---------------------------------------------------------------------------
# Value-only template
# ---------------------------------------------------------------------------


class TestValues:
    def test_pages_and_captions(self) -> None:
        doc = generate_from_values(["A", "B", "C", "D", "E"])
        blocks = _page_blocks(doc)
        assert len(blocks) == 2
        assert 'QRCODE 148,175,L,4,A,180,M2,S7,"D"' in blocks[0]
        assert 'TEXT 160,38,"ROMAN.TTF",180,1,8,"D"' in blocks[0]
        assert doc.endswith(END_TAG)

    def test_size_tag(self) -> None:
        doc = generate_from_values(["X"], "100x50")
        assert 'QRCODE 656,257,L,8,A,180,M2,S7,"X"' in doc
        assert 'TEXT 696,80,"0",180,22,11,"X"' in doc

    def test_empty(self) -> None:
        doc = generate_from_values([])
        assert PAGE_OPEN not in doc
        assert doc.endswith(END_TAG)

    def test_sanitized(self) -> None:
        doc = generate_from_values(['a"b\nc'])
        assert "\"a'b c\"" in doc
