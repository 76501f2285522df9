#!/usr/bin/env python3
"""
Generate Labels Script.

Render label records into a TSPL document for a TSC label printer.

Usage:
    python -m tspl_labels.scripts.generate_labels --records stock.json --size small
    python -m tspl_labels.scripts.generate_labels -r batch.csv -s 100x50 -o labels.txt
    python -m tspl_labels.scripts.generate_labels --values skus.txt --items-per-page 3
    python -m tspl_labels.scripts.generate_labels -r stock.json -c site_labels.yaml

Record files:
    JSON: a list of objects with ``qr`` (or ``qrPayload``), ``name``, ``id``.
    CSV: a header row with the same column names.
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Any

from tspl_labels.configs.layout import ConfigError
from tspl_labels.configs.options import LabelOptionsV1, parse_options, read_options_file
from tspl_labels.records.labels import LabelRecord
from tspl_labels.tspl.templates import generate_for_size, generate_from_values
from tspl_labels.utils import fs
from tspl_labels.utils.logging_config import pop_context, setup_logging

logger = logging.getLogger(__name__)


def read_records(path: Path) -> list[LabelRecord]:
    """Load label records from a JSON list or a CSV file."""
    if path.suffix.lower() == ".csv":
        with open(path, newline="", encoding="utf-8") as f:
            rows: list[Any] = list(csv.DictReader(f))
    else:
        with open(path, encoding="utf-8") as f:
            rows = json.load(f)
        if not isinstance(rows, list):
            raise ValueError(f"{path}: expected a JSON list of records")
    records = []
    for index, row in enumerate(rows):
        try:
            records.append(LabelRecord.from_mapping(row))
        except ValueError as e:
            raise ValueError(f"{path}: record {index}: {e}") from e
    return records


def read_values(path: Path) -> list[str]:
    """Load one value per non-empty line."""
    with open(path, encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


def build_options(args: argparse.Namespace) -> tuple[str | None, LabelOptionsV1]:
    """Merge the options file with command-line overrides.

    Returns the ``size`` declared in the options file (if any) and the
    validated overrides.
    """
    data: dict[str, Any] = {}
    file_size = None
    if args.options:
        raw = read_options_file(args.options)
        file_size = raw.pop("size", None)
        # Normalise file keys to field names so command-line values win.
        data = parse_options(raw).model_dump(exclude_none=True)
    if args.items_per_page is not None:
        data["items_per_page"] = args.items_per_page
    if args.include_id:
        data["include_id_text"] = True
    return file_size, parse_options(data)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Generate a TSPL label document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Sizes: small (25x25), medium (100x50), large (100x150)",
    )

    # Label source
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--records",
        "-r",
        type=Path,
        help="JSON or CSV file of label records",
    )
    source.add_argument(
        "--values",
        type=Path,
        help="Text file, one QR value per line (value is also the caption)",
    )

    # Layout
    parser.add_argument(
        "--size",
        "-s",
        type=str,
        help="Label stock (default: from options file, else small)",
    )
    parser.add_argument(
        "--options",
        "-c",
        type=Path,
        help="YAML file of layout overrides",
    )
    parser.add_argument(
        "--items-per-page",
        type=int,
        help="Labels per physical page",
    )
    parser.add_argument(
        "--include-id",
        action="store_true",
        help="Print the record id above the name",
    )

    # Output
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Output file (default: stdout)",
    )
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )

    args = parser.parse_args()
    setup_logging(
        args.log_level,
        json=args.json_logs,
        context={"app": "generate_labels"},
    )

    try:
        file_size, options = build_options(args)
        size = args.size or file_size or "small"

        if args.records:
            records = read_records(args.records)
            document = generate_for_size(size, records, options)
            count = len(records)
        else:
            values = read_values(args.values)
            document = generate_from_values(values, size, options)
            count = len(values)

        if args.output:
            fs.atomic_write_text(args.output, document)
            logger.info("Wrote %d label(s) to %s", count, args.output)
        else:
            sys.stdout.write(document)
    except (ConfigError, ValueError, OSError, RuntimeError) as e:
        logger.error("Label generation failed: %s", e)
        sys.exit(1)
    finally:
        pop_context(["app"])


if __name__ == "__main__":
    main()
