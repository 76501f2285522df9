"""Label records -- the vocabulary between inventory data and TSPL output.

A *LabelRecord* is one logical label (QR payload, display name, product
id).  Records are grouped into *physical pages*: one printed sheet holds
``items_per_page`` labels side by side, each at a fixed slot.

Coordinates
-----------
``Position`` values are printer **dots**, not millimetres.  Each slot of a
physical page looks up its position by index in a per-role table.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

PhysicalPage = tuple["LabelRecord", ...]
"""Up to ``items_per_page`` records printed on one sheet, in input order."""

_QR_KEYS = ("qr_payload", "qrPayload", "qr")


def _text_field(value: Any) -> str:
    return "" if value is None else str(value)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Position:
    """Print position in printer dots.

    Parameters
    ----------
    x, y : int
        Dot coordinates relative to the printer reference point.
    """

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class LabelRecord:
    """One logical label.

    Parameters
    ----------
    qr_payload : str
        Data encoded in the QR symbol.
    name : str
        Display name printed next to the symbol.
    id : str
        Product / stock identifier.
    """

    qr_payload: str
    name: str = ""
    id: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LabelRecord:
        """Build a record from a JSON object or CSV row.

        The QR payload may be keyed ``qr_payload``, ``qrPayload`` or
        ``qr``.  Missing ``name`` / ``id`` default to empty strings.

        Raises
        ------
        ValueError
            If *data* is not a mapping or no QR payload key is present.
        """
        if not isinstance(data, Mapping):
            raise ValueError(
                f"Label record must be a mapping, got {type(data).__name__}"
            )
        for key in _QR_KEYS:
            if data.get(key) is not None:
                qr = data[key]
                break
        else:
            raise ValueError(
                f"Label record needs one of {list(_QR_KEYS)}, "
                f"got keys {sorted(map(str, data))}"
            )
        return cls(
            qr_payload=str(qr),
            name=_text_field(data.get("name")),
            id=_text_field(data.get("id")),
        )


# ---------------------------------------------------------------------------
# Page planning
# ---------------------------------------------------------------------------


def plan_pages(
    records: Sequence[Any],
    items_per_page: int,
) -> list[PhysicalPage]:
    """Split records into physical pages of ``items_per_page`` slots.

    Parameters
    ----------
    records : Sequence
        Labels (or bare values for the value-only template) in print
        order.
    items_per_page : int
        Slots per printed sheet.  Must be a positive integer.

    Returns
    -------
    list[PhysicalPage]
        ``ceil(len(records) / items_per_page)`` pages.  Only the last page
        may hold fewer than ``items_per_page`` records.

    Raises
    ------
    ValueError
        If ``items_per_page`` is not a positive integer.
    """
    if isinstance(items_per_page, bool) or not isinstance(items_per_page, int):
        raise ValueError(
            f"items_per_page must be an int, got {type(items_per_page).__name__}"
        )
    if items_per_page <= 0:
        raise ValueError(
            f"items_per_page must be positive, got {items_per_page}"
        )

    return [
        tuple(records[start:start + items_per_page])
        for start in range(0, len(records), items_per_page)
    ]
