"""Label layout configuration.

Per-size layout defaults as typed, frozen dataclasses.  A layout covers
the physical stock (size, gap, speed, density), the slot position tables,
and the QR / text rendering parameters.

Positions are in printer **dots**; stock dimensions are in **mm**.

Usage::

    from tspl_labels.configs.layout import LabelSize, default_config
    cfg = default_config(LabelSize.SMALL)
    issues = check_layout(cfg)
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass

from tspl_labels.records.labels import Position


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when label options fail validation."""

    pass


# ---------------------------------------------------------------------------
# Sizes
# ---------------------------------------------------------------------------


class LabelSize(str, enum.Enum):
    """Supported label stocks.

    ``SMALL`` is 25x25 mm labels, four across a 108 mm liner.
    ``MEDIUM`` (100x50 mm) and ``LARGE`` (100x150 mm) hold two per page.
    """

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def stock(self) -> str:
        """Stock dimension tag, e.g. ``"25x25"``."""
        return _STOCK_TAGS[self]

    @classmethod
    def from_tag(cls, tag: str | LabelSize) -> LabelSize | None:
        """Return the size for *tag* (``"small"`` or ``"25x25"``), else ``None``."""
        if isinstance(tag, LabelSize):
            return tag
        if not isinstance(tag, str):
            return None
        key = tag.strip().lower()
        for size in cls:
            if key in (size.value, size.stock):
                return size
        return None


_STOCK_TAGS = {
    LabelSize.SMALL: "25x25",
    LabelSize.MEDIUM: "100x50",
    LabelSize.LARGE: "100x150",
}


# ---------------------------------------------------------------------------
# Layout dataclass
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LabelLayoutConfig:
    """Fully resolved layout for one label stock.

    Position tables are indexed by slot number within a physical page.
    A slot past the end of a table reuses entry 0.

    Parameters
    ----------
    width_mm, height_mm, gap_mm : float
        Liner width, label pitch height and inter-label gap.
    speed : float
        Print speed (inches per second, firmware units).
    density : int
        Print darkness, 0-15.
    ribbon_on, tear_on : bool
        Thermal-transfer ribbon and tear-off mode.
    codepage : int | str
        Character set selected with ``CODEPAGE`` once per page.
    items_per_page : int
        Labels per physical page.
    qr_positions, text_positions, id_text_positions, name_text_positions
        Slot position tables.  ``text_positions`` is used by the
        value-only template; the others by the record template.
    qr_model, qr_size, qr_rotation, qr_mask, qr_error_level
        ``QRCODE`` arguments in command order.
    text_font, text_rotation, text_x_mul, text_y_mul
        Generic ``TEXT`` style (value and id text).
    name_text_font, name_text_rotation, name_text_x_mul, name_text_y_mul
        ``TEXT`` style for the display name.
    include_id_text : bool
        Emit an id ``TEXT`` command before the name.
    """

    width_mm: float
    height_mm: float
    gap_mm: float
    speed: float
    density: int
    ribbon_on: bool
    tear_on: bool
    codepage: int | str
    items_per_page: int

    qr_positions: tuple[Position, ...]
    text_positions: tuple[Position, ...]
    id_text_positions: tuple[Position, ...]
    name_text_positions: tuple[Position, ...]

    qr_model: str
    qr_size: int
    qr_rotation: int
    qr_mask: str
    qr_error_level: str

    text_font: str
    text_rotation: int
    text_x_mul: float
    text_y_mul: float

    name_text_font: str
    name_text_rotation: int
    name_text_x_mul: float
    name_text_y_mul: float

    include_id_text: bool = False

    def position_for(self, table: str, slot: int) -> Position | None:
        """Return the position of *slot* in *table*.

        Falls back to entry 0 when the table is shorter than ``slot + 1``;
        returns ``None`` for an empty table.
        """
        positions: tuple[Position, ...] = getattr(self, table)
        if not positions:
            return None
        if slot < len(positions):
            return positions[slot]
        return positions[0]


@dataclass(frozen=True)
class LayoutIssue:
    """A position table too short for ``items_per_page``."""

    table: str
    entries: int
    items_per_page: int

    @property
    def message(self) -> str:
        return (
            f"{self.table} has {self.entries} entr"
            f"{'y' if self.entries == 1 else 'ies'} for "
            f"{self.items_per_page} items per page; slots "
            f"{self.entries}..{self.items_per_page - 1} reuse slot 0"
        )


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


def _positions(*pairs: tuple[int, int]) -> tuple[Position, ...]:
    return tuple(Position(x, y) for x, y in pairs)


_SMALL_QR = _positions((819, 175), (595, 175), (372, 175), (148, 175))

# Name text sits above each QR symbol (labels print rotated 180).
_SMALL_TEXT = tuple(Position(p.x + 12, p.y - 137) for p in _SMALL_QR)

_DEFAULTS: dict[LabelSize, LabelLayoutConfig] = {
    LabelSize.SMALL: LabelLayoutConfig(
        width_mm=108,
        height_mm=25,
        gap_mm=3,
        speed=5,
        density=7,
        ribbon_on=True,
        tear_on=True,
        codepage=1252,
        items_per_page=4,
        qr_positions=_SMALL_QR,
        text_positions=_SMALL_TEXT,
        id_text_positions=_SMALL_TEXT,
        name_text_positions=_SMALL_TEXT,
        qr_model="L",
        qr_size=4,
        qr_rotation=180,
        qr_mask="M2",
        qr_error_level="S7",
        text_font="ROMAN.TTF",
        text_rotation=180,
        text_x_mul=1,
        text_y_mul=8,
        name_text_font="0",
        name_text_rotation=180,
        name_text_x_mul=10,
        name_text_y_mul=10,
    ),
    LabelSize.MEDIUM: LabelLayoutConfig(
        width_mm=100.5,
        height_mm=50,
        gap_mm=3,
        speed=5,
        density=7,
        ribbon_on=True,
        tear_on=True,
        codepage=1252,
        items_per_page=2,
        qr_positions=_positions((656, 257)),
        text_positions=_positions((696, 80)),
        id_text_positions=(),
        name_text_positions=_positions((696, 80)),
        qr_model="L",
        qr_size=8,
        qr_rotation=180,
        qr_mask="M2",
        qr_error_level="S7",
        text_font="0",
        text_rotation=180,
        text_x_mul=22,
        text_y_mul=11,
        name_text_font="0",
        name_text_rotation=180,
        name_text_x_mul=22,
        name_text_y_mul=11,
    ),
    LabelSize.LARGE: LabelLayoutConfig(
        width_mm=100.5,
        height_mm=150,
        gap_mm=3,
        speed=5,
        density=7,
        ribbon_on=True,
        tear_on=True,
        codepage=1252,
        items_per_page=2,
        qr_positions=_positions((698, 645)),
        text_positions=_positions((696, 363)),
        id_text_positions=(),
        name_text_positions=_positions((696, 363)),
        qr_model="L",
        qr_size=10,
        qr_rotation=180,
        qr_mask="M2",
        qr_error_level="S7",
        text_font="0",
        text_rotation=180,
        text_x_mul=22,
        text_y_mul=33,
        name_text_font="0",
        name_text_rotation=180,
        name_text_x_mul=22,
        name_text_y_mul=33,
    ),
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def default_config(size: LabelSize) -> LabelLayoutConfig:
    """Return the built-in layout for *size*."""
    return _DEFAULTS[LabelSize(size)]


def check_layout(
    config: LabelLayoutConfig,
    tables: Sequence[str] | None = None,
) -> list[LayoutIssue]:
    """Report position tables shorter than ``items_per_page``.

    Parameters
    ----------
    config : LabelLayoutConfig
        Resolved layout.
    tables : Sequence[str] | None
        Table field names to check.  ``None`` checks the tables used by the
        record template: QR and name positions, plus id positions when
        ``include_id_text`` is set.

    Returns
    -------
    list[LayoutIssue]
        One entry per short, non-empty table.  Empty text tables mean the
        text is not printed and are not reported.
    """
    if tables is None:
        tables = ["qr_positions", "name_text_positions"]
        if config.include_id_text:
            tables.append("id_text_positions")

    issues: list[LayoutIssue] = []
    for table in tables:
        entries = len(getattr(config, table))
        if 0 < entries < config.items_per_page:
            issues.append(LayoutIssue(table, entries, config.items_per_page))
    return issues
