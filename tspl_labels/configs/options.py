"""Label option overrides: schema validation and merge.

Callers pass a partial set of layout fields; every field they set replaces
the size default, everything else is kept.  Overrides are validated with
pydantic so bad input fails fast with the offending key:

    - Keys in snake_case or camelCase (``width_mm`` / ``widthMm``)
    - ``items_per_page`` also as ``itemsPerPage`` or ``itemsPerRow``
    - Positions as ``{"x": .., "y": ..}``, ``[x, y]`` or ``Position``
    - Unknown keys are rejected

Usage:
    from tspl_labels.configs.options import load_options, resolve_options

    opts = load_options("site_labels.yaml")
    cfg = resolve_options(LabelSize.MEDIUM, opts)
    cfg = resolve_options(LabelSize.SMALL, {"itemsPerRow": 3})
"""

import dataclasses
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

import yaml
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from tspl_labels.configs.layout import (
    ConfigError,
    LabelLayoutConfig,
    LabelSize,
    default_config,
)
from tspl_labels.records.labels import Position
from tspl_labels.utils import fs

logger = logging.getLogger(__name__)

Rotation = Literal[0, 90, 180, 270]

_POSITION_FIELDS = (
    "qr_positions",
    "text_positions",
    "id_text_positions",
    "name_text_positions",
)


# ============================================================================
# SCHEMA
# ============================================================================

class PositionV1(BaseModel):
    """Slot position in printer dots."""
    model_config = ConfigDict(extra="forbid")

    x: int = Field(..., ge=0, description="X in dots")
    y: int = Field(..., ge=0, description="Y in dots")


class LabelOptionsV1(BaseModel):
    """Partial layout override.  ``None`` means keep the size default."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    # Physical stock
    width_mm: Optional[float] = Field(None, gt=0, description="Liner width (mm)")
    height_mm: Optional[float] = Field(None, gt=0, description="Label pitch height (mm)")
    gap_mm: Optional[float] = Field(None, ge=0, description="Gap between labels (mm)")
    speed: Optional[float] = Field(None, gt=0, description="Print speed")
    density: Optional[int] = Field(None, ge=0, le=15, description="Print darkness")
    ribbon_on: Optional[bool] = None
    tear_on: Optional[bool] = None
    codepage: Optional[Union[int, str]] = Field(None, description="e.g. 1252 or UTF-8")
    items_per_page: Optional[int] = Field(
        None,
        gt=0,
        validation_alias=AliasChoices("items_per_page", "itemsPerPage", "itemsPerRow"),
        description="Labels per physical page",
    )

    # Slot position tables
    qr_positions: Optional[List[PositionV1]] = None
    text_positions: Optional[List[PositionV1]] = None
    id_text_positions: Optional[List[PositionV1]] = None
    name_text_positions: Optional[List[PositionV1]] = None

    # QR rendering
    qr_model: Optional[str] = None
    qr_size: Optional[int] = Field(None, ge=1, le=10, description="Module size")
    qr_rotation: Optional[Rotation] = None
    qr_mask: Optional[str] = None
    qr_error_level: Optional[str] = None

    # Generic text
    text_font: Optional[str] = None
    text_rotation: Optional[Rotation] = None
    text_x_mul: Optional[float] = Field(None, gt=0)
    text_y_mul: Optional[float] = Field(None, gt=0)

    # Name text
    name_text_font: Optional[str] = None
    name_text_rotation: Optional[Rotation] = None
    name_text_x_mul: Optional[float] = Field(None, gt=0)
    name_text_y_mul: Optional[float] = Field(None, gt=0)

    include_id_text: Optional[bool] = None

    @field_validator(*_POSITION_FIELDS, mode="before")
    @classmethod
    def coerce_positions(cls, v: Any) -> Any:
        if v is None or not isinstance(v, (list, tuple)):
            return v
        out = []
        for item in v:
            if isinstance(item, Position):
                out.append({"x": item.x, "y": item.y})
            elif isinstance(item, (list, tuple)):
                if len(item) != 2:
                    raise ValueError(f"Position pair must have 2 values, got {item!r}")
                out.append({"x": item[0], "y": item[1]})
            else:
                out.append(item)
        return out

    @field_validator("qr_positions")
    @classmethod
    def validate_qr_positions(cls, v: Optional[List[PositionV1]]) -> Optional[List[PositionV1]]:
        if v is not None and not v:
            raise ValueError("qr_positions needs at least one position")
        return v

    @field_validator("qr_model", "qr_mask", "qr_error_level", "codepage")
    @classmethod
    def validate_bare_token(cls, v: Any) -> Any:
        # Unquoted command arguments: a comma or quote shifts every later argument.
        if isinstance(v, str) and (not v or any(c in v for c in ',"\r\n \t')):
            raise ValueError(f"Expected a bare token without commas, quotes or spaces, got {v!r}")
        return v

    @field_validator("text_font", "name_text_font")
    @classmethod
    def validate_font(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and (not v or any(c in v for c in '"\r\n')):
            raise ValueError(f"Font name must be non-empty without quotes or newlines, got {v!r}")
        return v

    def to_overrides(self) -> Dict[str, Any]:
        """Return the set fields as ``LabelLayoutConfig`` keyword arguments."""
        overrides = self.model_dump(exclude_none=True)
        for name in _POSITION_FIELDS:
            if name in overrides:
                overrides[name] = tuple(Position(p["x"], p["y"]) for p in overrides[name])
        return overrides


# ============================================================================
# PUBLIC API
# ============================================================================

def parse_options(data: Mapping[str, Any]) -> LabelOptionsV1:
    """Validate a mapping of overrides.

    Raises
    ------
    ConfigError
        If any key is unknown or any value fails validation.
    """
    try:
        return LabelOptionsV1.model_validate(dict(data))
    except ValidationError as e:
        raise ConfigError(f"Invalid label options: {e}") from e


def resolve_options(
    size: LabelSize,
    options: Union[LabelOptionsV1, Mapping[str, Any], None] = None,
) -> LabelLayoutConfig:
    """Merge caller overrides onto the default layout for *size*.

    Parameters
    ----------
    size : LabelSize
        Label stock whose defaults are the base.
    options : LabelOptionsV1 | Mapping | None
        Partial overrides.  Each field that is set replaces the default;
        ``items_per_page`` is overridden independently of the position
        tables.

    Returns
    -------
    LabelLayoutConfig
        Fully populated layout.

    Raises
    ------
    ConfigError
        If the overrides fail validation (e.g. ``items_per_page <= 0``).
    """
    base = default_config(size)
    if options is None:
        return base
    if isinstance(options, LabelOptionsV1):
        parsed = options
    elif isinstance(options, Mapping):
        parsed = parse_options(options)
    else:
        raise ConfigError(
            f"Label options must be a mapping or LabelOptionsV1, "
            f"got {type(options).__name__}"
        )

    overrides = parsed.to_overrides()
    if overrides:
        logger.debug("Overriding %s defaults: %s", size.value, sorted(overrides))
    return dataclasses.replace(base, **overrides)


def read_options_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read the raw option mapping from a YAML file without validating it.

    An empty file reads as an empty mapping.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ConfigError
        If the file is not valid YAML or not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Label options not found: {path}")

    logger.info("Loading label options from %s", path)
    try:
        data = fs.load_yaml(path)
    except yaml.YAMLError as e:
        raise ConfigError(str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Label options file must contain a mapping, got {type(data).__name__}: {path}"
        )
    return data


def load_options(path: Union[str, Path]) -> LabelOptionsV1:
    """Load and validate label overrides from YAML.

    The file is a flat mapping of option keys.  A top-level ``size`` key
    (used by the command-line tool) is ignored here.

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ConfigError
        If the file is not a mapping or fails validation
    """
    data = read_options_file(path)
    data.pop("size", None)
    return parse_options(data)
