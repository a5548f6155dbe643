"""
Module: engine.placement

Purpose:
    Placement Resolver: deterministic first-fit auto-placement.

Algorithm:
    Scan candidate origins in row-major order (y outer, x inner)
    and accept the first full-size rectangle that collides with
    nothing. The scan order is part of the contract: the same
    occupied set always yields the same position.

Key Functions:
    - find_free_position(): First free slot for a template
    - find_free_slot(): First free slot for an explicit size

Dependencies:
    - engine.grid: is_occupied

Used By:
    - engine.session: Palette insertion without a drop target
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from .config import GridBounds
from .grid import is_occupied
from .models import GridPosition, Module, ModuleTemplate

logger = logging.getLogger(__name__)


def find_free_slot(
    width: int,
    height: int,
    modules: Iterable[Module],
    bounds: GridBounds,
) -> Optional[GridPosition]:
    """
    Find the first free rectangle of the given size.

    Returns:
        GridPosition, or None when no rectangle of that size is free
    """
    placed: Sequence[Module] = list(modules)
    for y in range(0, bounds.rows - height + 1):
        for x in range(0, bounds.cols - width + 1):
            candidate = GridPosition(x=x, y=y, width=width, height=height)
            if not is_occupied(candidate, placed):
                return candidate
    return None


def find_free_position(
    template: ModuleTemplate,
    modules: Iterable[Module],
    bounds: GridBounds,
) -> Optional[GridPosition]:
    """
    Find where a template would be auto-placed.

    Args:
        template: Template whose default size is placed
        modules: Modules already on the grid
        bounds: Grid bounds

    Returns:
        First free position in row-major order, or None if the grid
        has no room for the template (a recoverable "grid is full").

    Example:
        >>> find_free_position(hero, [], GridBounds())
        GridPosition(x=0, y=0, width=4, height=2)
    """
    position = find_free_slot(template.width, template.height, modules, bounds)
    if position is None:
        logger.debug(
            f"No free {template.width}x{template.height} slot for '{template.type}'"
        )
    return position
