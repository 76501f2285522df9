"""
Label record module.

Defines the immutable label records and position values consumed by the
TSPL generator, plus the planner that groups records into physical pages.
"""

from tspl_labels.records.labels import (
    LabelRecord,
    PhysicalPage,
    Position,
    plan_pages,
)

__all__ = [
    "LabelRecord",
    "PhysicalPage",
    "Position",
    "plan_pages",
]
