"""
TSPL Labels Package.

Label template engine for TSC thermal label printers. Turns label records
(QR payload, name, id) into a complete TSPL document ready to stream to the
printer; transport and previews belong to the caller.

Subpackages:
    records: Label records, positions and page planning
    configs: Per-size layout defaults and option validation
    tspl: Command rendering and document templates
    scripts: Command-line front end
    utils: YAML / atomic file helpers, logging setup

Usage::

    from tspl_labels import LabelRecord, generate_for_size
    doc = generate_for_size("small", [LabelRecord("SKU-1", "Widget", "1")])
"""

from tspl_labels.configs import ConfigError, LabelSize
from tspl_labels.records import LabelRecord, Position
from tspl_labels.tspl import generate_for_size, sanitize_value

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "LabelRecord",
    "LabelSize",
    "Position",
    "generate_for_size",
    "sanitize_value",
]
