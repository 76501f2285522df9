"""Label templates -- complete TSPL documents per label stock.

A document is the header block, one page block per physical page, and
the ``<xpml><end/></xpml>`` terminator, concatenated with nothing in
between and nothing after the terminator.

Entry points:
    ``generate_for_size(size, records, options)`` dispatches on a size
    tag (``"small"`` / ``"25x25"`` ...) and falls back to the small stock
    for unknown tags.  ``generate_small`` / ``generate_medium`` /
    ``generate_large`` bind one stock statically.

All functions are pure: identical arguments give byte-identical output.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Union

from tspl_labels.configs.layout import (
    LabelLayoutConfig,
    LabelSize,
    check_layout,
    default_config,
)
from tspl_labels.configs.options import LabelOptionsV1, resolve_options
from tspl_labels.records.labels import LabelRecord, plan_pages
from tspl_labels.tspl.generator import END_TAG, TSPLGenerator

logger = logging.getLogger(__name__)

Options = Union[LabelOptionsV1, Mapping[str, Any], None]


def _report_layout(
    config: LabelLayoutConfig,
    size: LabelSize,
    tables: Sequence[str] | None = None,
) -> None:
    # Underflow already present in the stock defaults logs at INFO.
    default = default_config(size)
    for issue in check_layout(config, tables):
        built_in = (
            config.items_per_page == default.items_per_page
            and getattr(config, issue.table) == getattr(default, issue.table)
        )
        level = logging.INFO if built_in else logging.WARNING
        logger.log(level, "Position table underflow: %s", issue.message)


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def assemble(
    records: Sequence[LabelRecord],
    size: LabelSize,
    options: Options = None,
) -> str:
    """Build a complete TSPL document for *records* on *size* stock.

    Parameters
    ----------
    records : Sequence[LabelRecord]
        Labels in print order.
    size : LabelSize
        Label stock providing the default layout.
    options : LabelOptionsV1 | Mapping | None
        Partial layout overrides.

    Returns
    -------
    str
        Header, one block per physical page, end tag.

    Raises
    ------
    ConfigError
        If *options* fail validation (including ``items_per_page <= 0``).
    """
    config = resolve_options(size, options)
    _report_layout(config, size)

    gen = TSPLGenerator(config)
    pages = plan_pages(records, config.items_per_page)
    logger.debug(
        "Rendering %d label(s) on %d %s page(s)",
        len(records), len(pages), size.value,
    )
    return "".join([
        gen.render_header(),
        *(gen.render_page(page) for page in pages),
        END_TAG,
    ])


def generate_small(records: Sequence[LabelRecord], options: Options = None) -> str:
    """25x25 mm stock, four labels per page."""
    return assemble(records, LabelSize.SMALL, options)


def generate_medium(records: Sequence[LabelRecord], options: Options = None) -> str:
    """100x50 mm stock, two labels per page."""
    return assemble(records, LabelSize.MEDIUM, options)


def generate_large(records: Sequence[LabelRecord], options: Options = None) -> str:
    """100x150 mm stock, two labels per page."""
    return assemble(records, LabelSize.LARGE, options)


_GENERATORS = {
    LabelSize.SMALL: generate_small,
    LabelSize.MEDIUM: generate_medium,
    LabelSize.LARGE: generate_large,
}


def resolve_size(tag: str | LabelSize) -> LabelSize:
    """Map a size tag to a ``LabelSize``, falling back to ``SMALL``."""
    size = LabelSize.from_tag(tag)
    if size is None:
        logger.warning("Unknown label size %r, using %s", tag, LabelSize.SMALL.value)
        return LabelSize.SMALL
    return size


def generate_for_size(
    size: str | LabelSize,
    records: Sequence[LabelRecord],
    options: Options = None,
) -> str:
    """Build a document for the stock named by *size*.

    Parameters
    ----------
    size : str | LabelSize
        ``"small"`` / ``"medium"`` / ``"large"`` or a stock tag
        (``"25x25"``, ``"100x50"``, ``"100x150"``).  Unknown tags print on
        the small stock.
    records : Sequence[LabelRecord]
        Labels in print order.
    options : LabelOptionsV1 | Mapping | None
        Partial layout overrides.
    """
    return _GENERATORS[resolve_size(size)](records, options)


# ---------------------------------------------------------------------------
# Value-only template
# ---------------------------------------------------------------------------


def generate_from_values(
    values: Sequence[str],
    size: str | LabelSize = LabelSize.SMALL,
    options: Options = None,
) -> str:
    """Build a document where each value is QR data and its own caption.

    Captions use the generic text style at ``text_positions``.
    """
    label_size = resolve_size(size)
    config = resolve_options(label_size, options)
    _report_layout(config, label_size, ("qr_positions", "text_positions"))

    gen = TSPLGenerator(config)
    pages = plan_pages(values, config.items_per_page)
    return "".join([
        gen.render_header(),
        *(gen.render_value_page(page) for page in pages),
        END_TAG,
    ])
