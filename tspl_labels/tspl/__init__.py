"""
TSPL generation module.

Renders label records into TSC printer command documents (TSPL with XPML
page markup), one header block plus one block per physical page.
"""

from tspl_labels.tspl.generator import END_TAG, TSPLGenerator, sanitize_value
from tspl_labels.tspl.templates import (
    assemble,
    generate_for_size,
    generate_from_values,
    generate_large,
    generate_medium,
    generate_small,
    resolve_size,
)

__all__ = [
    "END_TAG",
    "TSPLGenerator",
    "assemble",
    "generate_for_size",
    "generate_from_values",
    "generate_large",
    "generate_medium",
    "generate_small",
    "resolve_size",
    "sanitize_value",
]
