"""TSPL generator -- label records to printer command blocks.

Output is TSPL wrapped in XPML page markup, the dialect TSC printers
accept from their Windows driver spool files.  Each block is a list of
commands separated by **one blank line**, with no blank line after the
last command::

    <xpml><page quantity='0' pitch='25.0 mm'></xpml>SIZE 108 mm, 25 mm
    <blank>
    GAP 3 mm, 0 mm
    ...
    <xpml></page></xpml>

Blocks are concatenated without separators.  The blank-line layout is
part of what the firmware accepts, so it is reproduced exactly.

Blocks:
    Header (``quantity='0'``) -- media and mechanism setup, once per
    document.
    Page (``quantity='1'``) -- one physical sheet: ``CLS``, one
    ``QRCODE`` (+ ``TEXT``) per slot, ``CODEPAGE`` after the first
    ``QRCODE``, then ``PRINT 1,1``.

Quoting:
    String arguments are double-quoted; numbers are bare.  Every user
    string goes through ``sanitize_value`` before it is quoted.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from tspl_labels.configs.layout import ConfigError, LabelLayoutConfig
from tspl_labels.records.labels import LabelRecord, Position

logger = logging.getLogger(__name__)

END_TAG = "<xpml><end/></xpml>"
PAGE_CLOSE = "<xpml></page></xpml>"

_LINE_BREAKS = re.compile(r"[\r\n]+")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def sanitize_value(text: str) -> str:
    """Make *text* safe inside a double-quoted TSPL literal.

    Each run of CR/LF becomes one space and every ``"`` becomes ``'``.
    Commas and all other characters pass through unchanged.
    """
    return _LINE_BREAKS.sub(" ", text).replace('"', "'")


def _num(value: float | int) -> str:
    """Shortest decimal form: ``108``, ``100.5``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _on_off(flag: bool) -> str:
    return "ON" if flag else "OFF"


def _block(commands: Sequence[str]) -> str:
    return "\n\n".join(commands)


def _one_decimal(value: float | int) -> str:
    """One decimal place, ties away from zero on the exact binary value.

    ``format(25.25, ".1f")`` gives ``25.2`` (half-even); the driver
    spool files carry ``25.3``.
    """
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _page_open(quantity: int, height_mm: float) -> str:
    return f"<xpml><page quantity='{quantity}' pitch='{_one_decimal(height_mm)} mm'></xpml>"


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class TSPLGenerator:
    """Render header and page blocks for one resolved layout.

    Parameters
    ----------
    config : LabelLayoutConfig
        Fully resolved layout.

    Notes
    -----
    The generator holds only the frozen layout, so one instance may be
    shared between threads.
    """

    def __init__(self, config: LabelLayoutConfig) -> None:
        self._cfg = config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render_header(self) -> str:
        """Render the one-time media setup block."""
        c = self._cfg
        return _block([
            f"{_page_open(0, c.height_mm)}SIZE {_num(c.width_mm)} mm, {_num(c.height_mm)} mm",
            f"GAP {_num(c.gap_mm)} mm, 0 mm",
            f"SPEED {_num(c.speed)}",
            f"DENSITY {_num(c.density)}",
            f"SET RIBBON {_on_off(c.ribbon_on)}",
            "DIRECTION 0,0",
            "REFERENCE 0,0",
            "OFFSET 0 mm",
            "SET PEEL OFF",
            "SET CUTTER OFF",
            "SET PARTIAL_CUTTER OFF",
            PAGE_CLOSE,
        ])

    def render_page(self, page: Sequence[LabelRecord]) -> str:
        """Render one physical page of label records.

        Parameters
        ----------
        page : Sequence[LabelRecord]
            Records for this sheet; record ``i`` prints at slot ``i``.

        Returns
        -------
        str
            Page block from the ``quantity='1'`` open tag to the page
            close tag.

        Raises
        ------
        ConfigError
            If the layout has no QR positions.
        """
        c = self._cfg
        commands = self._page_start()
        for slot, record in enumerate(page):
            self._emit_qr(commands, slot, record.qr_payload)
            if c.include_id_text:
                pos = c.position_for("id_text_positions", slot)
                if pos is not None:
                    commands.append(self._text(
                        pos, c.text_font, c.text_rotation,
                        c.text_x_mul, c.text_y_mul, record.id,
                    ))
            pos = c.position_for("name_text_positions", slot)
            if pos is not None:
                commands.append(self._text(
                    pos, c.name_text_font, c.name_text_rotation,
                    c.name_text_x_mul, c.name_text_y_mul, record.name,
                ))
        return _block(self._page_end(commands))

    def render_value_page(self, values: Sequence[str]) -> str:
        """Render one page where each value is both QR data and caption.

        The caption uses the generic text style at ``text_positions``.
        """
        c = self._cfg
        commands = self._page_start()
        for slot, value in enumerate(values):
            self._emit_qr(commands, slot, value)
            pos = c.position_for("text_positions", slot)
            if pos is not None:
                commands.append(self._text(
                    pos, c.text_font, c.text_rotation,
                    c.text_x_mul, c.text_y_mul, value,
                ))
        return _block(self._page_end(commands))

    # ------------------------------------------------------------------
    # Command builders
    # ------------------------------------------------------------------

    def _page_start(self) -> list[str]:
        c = self._cfg
        return [
            f"{_page_open(1, c.height_mm)}SET TEAR {_on_off(c.tear_on)}",
            "CLS",
        ]

    def _page_end(self, commands: list[str]) -> list[str]:
        commands.append("PRINT 1,1")
        commands.append(PAGE_CLOSE)
        return commands

    def _emit_qr(self, commands: list[str], slot: int, data: str) -> None:
        c = self._cfg
        pos = c.position_for("qr_positions", slot)
        if pos is None:
            raise ConfigError("Layout has no qr_positions; cannot place QR codes")
        commands.append(
            f"QRCODE {pos.x},{pos.y},{c.qr_model},{c.qr_size},A,"
            f"{_num(c.qr_rotation)},{c.qr_mask},{c.qr_error_level},"
            f"\"{sanitize_value(data)}\""
        )
        # CODEPAGE is page-scoped on the firmware: once per page, after the first QR.
        if slot == 0:
            commands.append(f"CODEPAGE {c.codepage}")

    @staticmethod
    def _text(
        pos: Position,
        font: str,
        rotation: int,
        x_mul: float,
        y_mul: float,
        content: str,
    ) -> str:
        return (
            f"TEXT {pos.x},{pos.y},\"{font}\",{_num(rotation)},"
            f"{_num(x_mul)},{_num(y_mul)},\"{sanitize_value(content)}\""
        )
