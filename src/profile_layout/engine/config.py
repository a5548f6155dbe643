"""
Module: engine.config

Purpose:
    Configuration for the module-layout engine.
    Defines the fixed grid coordinate space, pixel cell sizes per
    device preset, and session-wide limits.

Key Classes:
    - GridBounds: Immutable grid size in cells
    - GridConfig: Grid bounds plus pixel cell size
    - EngineConfig: Session limits and seeding behaviour

Dependencies:
    - dataclasses (std)

Used By:
    - engine.grid: Bounds checks and clamping
    - engine.drag: Pointer-to-cell mapping
    - engine.session: Session construction
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


DEFAULT_COLS = 4
DEFAULT_ROWS = 8
DEFAULT_CELL_WIDTH_PX = 280
DEFAULT_CELL_HEIGHT_PX = 120
DEFAULT_MAX_MODULES = 20


@dataclass(frozen=True)
class GridBounds:
    """
    Fixed grid size in cells (immutable).

    Valid positions lie within [0, cols) x [0, rows).

    Example:
        >>> GridBounds().cell_count
        32
    """

    cols: int = DEFAULT_COLS
    rows: int = DEFAULT_ROWS

    def __post_init__(self) -> None:
        """Validate bounds on construction."""
        if self.cols <= 0:
            raise ValueError(f"cols must be positive: {self.cols}")
        if self.rows <= 0:
            raise ValueError(f"rows must be positive: {self.rows}")

    @property
    def cell_count(self) -> int:
        """Total number of cells in the grid."""
        return self.cols * self.rows


@dataclass(frozen=True)
class GridConfig:
    """
    Grid bounds together with the on-screen size of one cell.

    Attributes:
        bounds: Grid size in cells
        cell_width: Width of one cell in pixels
        cell_height: Height of one cell in pixels

    Example:
        >>> GridConfig().pixel_width
        1120  # 4 cols * 280px
    """

    bounds: GridBounds = field(default_factory=GridBounds)
    cell_width: int = DEFAULT_CELL_WIDTH_PX
    cell_height: int = DEFAULT_CELL_HEIGHT_PX

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.cell_width <= 0:
            raise ValueError(f"cell_width must be positive: {self.cell_width}")
        if self.cell_height <= 0:
            raise ValueError(f"cell_height must be positive: {self.cell_height}")

    @property
    def pixel_width(self) -> int:
        """Grid width in pixels."""
        return self.bounds.cols * self.cell_width

    @property
    def pixel_height(self) -> int:
        """Grid height in pixels."""
        return self.bounds.rows * self.cell_height


GRID_PRESETS: Dict[str, GridConfig] = {
    "desktop": GridConfig(GridBounds(cols=4, rows=8), cell_width=280, cell_height=120),
    "tablet": GridConfig(GridBounds(cols=3, rows=11), cell_width=240, cell_height=100),
    "mobile": GridConfig(GridBounds(cols=2, rows=16), cell_width=160, cell_height=80),
}


def get_grid_preset(name: str) -> GridConfig:
    """
    Look up a grid preset by device name.

    Raises:
        ValueError: If no preset has that name
    """
    try:
        return GRID_PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown grid preset {name!r}, expected one of {sorted(GRID_PRESETS)}"
        ) from None


@dataclass(frozen=True)
class EngineConfig:
    """
    Configuration for one editing session (immutable).

    Attributes:
        grid: Grid geometry used by the session
        max_modules: Store-wide module limit (None for unlimited)
        seed_types: Template types auto-placed into a fresh empty session
    """

    grid: GridConfig = field(default_factory=lambda: GRID_PRESETS["desktop"])
    max_modules: Optional[int] = DEFAULT_MAX_MODULES
    seed_types: Tuple[str, ...] = ("hero",)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_modules is not None and self.max_modules < 1:
            raise ValueError(f"max_modules must be at least 1: {self.max_modules}")
