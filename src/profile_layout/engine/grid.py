"""
Module: engine.grid

Purpose:
    Grid Model: pure geometry over the fixed coordinate space.
    Rectangles use half-open semantics, so edge or corner contact
    is not an overlap.

Key Functions:
    - overlaps(): Rectangle intersection predicate
    - is_in_bounds(): Containment in the grid
    - is_occupied(): Collision against placed modules
    - clamp_to_bounds(): Shrink a rectangle to fit the grid
    - pointer_to_cell(): Pixel coordinate to grid cell

Dependencies:
    - engine.config: GridBounds, GridConfig
    - engine.models: GridPosition, Module

Used By:
    - engine.placement: Free slot search
    - engine.store: Invariant checks
    - engine.drag: Live drop validation
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .config import GridBounds, GridConfig
from .models import GridPosition, Module, ModuleId


def overlaps(a: GridPosition, b: GridPosition) -> bool:
    """
    Check whether two rectangles share any area.

    Example:
        >>> overlaps(GridPosition(0, 0, 2, 2), GridPosition(2, 0, 2, 2))
        False  # touching edges only
    """
    return (
        a.x < b.right
        and b.x < a.right
        and a.y < b.bottom
        and b.y < a.bottom
    )


def is_in_bounds(position: GridPosition, bounds: GridBounds) -> bool:
    """Check that a rectangle lies entirely inside the grid."""
    return (
        position.x >= 0
        and position.y >= 0
        and position.right <= bounds.cols
        and position.bottom <= bounds.rows
    )


def is_occupied(
    candidate: GridPosition,
    modules: Iterable[Module],
    exclude_id: Optional[ModuleId] = None,
) -> bool:
    """
    Check whether a candidate rectangle collides with any placed module.

    Args:
        candidate: Rectangle to test
        modules: Placed modules
        exclude_id: Module ignored by the test (the one being relocated)

    Returns:
        True if the candidate overlaps another module
    """
    return any(
        module.id != exclude_id and overlaps(candidate, module.position)
        for module in modules
    )


def clamp_to_bounds(candidate: GridPosition, bounds: GridBounds) -> GridPosition:
    """
    Shrink width/height so the rectangle fits the grid.

    The origin never moves. An origin outside the grid cannot be
    clamped and raises ValueError.
    """
    if not (0 <= candidate.x < bounds.cols and 0 <= candidate.y < bounds.rows):
        raise ValueError(f"Origin ({candidate.x}, {candidate.y}) is outside the grid")
    width = min(candidate.width, bounds.cols - candidate.x)
    height = min(candidate.height, bounds.rows - candidate.y)
    if width == candidate.width and height == candidate.height:
        return candidate
    return GridPosition(x=candidate.x, y=candidate.y, width=width, height=height)


def pointer_to_cell(px: float, py: float, grid: GridConfig) -> Tuple[int, int]:
    """
    Map a pixel coordinate (relative to the grid origin) to a cell.

    Uses floor division by the cell size, clamped to the grid.
    """
    col = int(px // grid.cell_width)
    row = int(py // grid.cell_height)
    col = max(0, min(col, grid.bounds.cols - 1))
    row = max(0, min(row, grid.bounds.rows - 1))
    return col, row
