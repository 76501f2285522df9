"""Label layout defaults, option validation, and merge."""

from tspl_labels.configs.layout import (
    ConfigError,
    LabelLayoutConfig,
    LabelSize,
    LayoutIssue,
    check_layout,
    default_config,
)
from tspl_labels.configs.options import (
    LabelOptionsV1,
    PositionV1,
    load_options,
    parse_options,
    read_options_file,
    resolve_options,
)

__all__ = [
    "ConfigError",
    "LabelLayoutConfig",
    "LabelOptionsV1",
    "LabelSize",
    "LayoutIssue",
    "PositionV1",
    "check_layout",
    "default_config",
    "load_options",
    "parse_options",
    "read_options_file",
    "resolve_options",
]
