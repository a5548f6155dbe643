"""
Module: engine.models

Purpose:
    Data models for the module-layout engine.
    Value types for grid geometry, the immutable template catalog
    entries, and the mutable placed modules.

Key Classes:
    - GridPosition: Rectangle on the grid (value type)
    - ModuleSize: Default width/height of a template
    - ModuleTemplate: Catalog entry for an insertable module kind
    - Module: A placed, content-bearing rectangle

Dependencies:
    - dataclasses (std)
    - uuid (std): Module identifiers

Used By:
    - engine.grid: Geometry predicates
    - engine.store: Module collection
    - engine.persistence: Wire codec
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


ModuleId = str


@dataclass(frozen=True)
class GridPosition:
    """
    Rectangle on the layout grid (immutable value type).

    A position occupies the half-open cells [x, x+width) x [y, y+height).
    Bounds against a specific grid are checked by engine.grid, not here.

    Example:
        >>> pos = GridPosition(x=0, y=2, width=2, height=2)
        >>> pos.right, pos.bottom
        (2, 4)
    """

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate dimensions on construction."""
        if self.width < 1:
            raise ValueError(f"width must be at least 1: {self.width}")
        if self.height < 1:
            raise ValueError(f"height must be at least 1: {self.height}")

    @property
    def right(self) -> int:
        """Exclusive right edge (x + width)."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge (y + height)."""
        return self.y + self.height


@dataclass(frozen=True)
class ModuleSize:
    """Default width/height (in cells) of a template."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Module size must be at least 1x1: {self.width}x{self.height}")


@dataclass(frozen=True)
class ModuleTemplate:
    """
    Catalog entry describing an insertable module kind (immutable).

    Attributes:
        type: Module type key (e.g. "hero", "price_list")
        display_name: Label shown in the palette
        icon: Short glyph shown next to the label
        default_size: Size of a freshly inserted module
        category: Palette grouping
        description: One-line palette help text
        max_instances: Per-layout cap, or None when unlimited
    """

    type: str
    display_name: str
    icon: str
    default_size: ModuleSize
    category: str
    description: str = ""
    max_instances: Optional[int] = None

    @property
    def width(self) -> int:
        return self.default_size.width

    @property
    def height(self) -> int:
        return self.default_size.height


@dataclass
class Module:
    """
    A positioned, typed, content-bearing rectangle on the grid.

    Identity is the id; position is replaced wholesale on relocation.
    The engine never inspects content, its shape belongs to the type.

    Attributes:
        id: Unique, stable identifier
        type: Template type key
        position: Current grid rectangle
        content: Type-specific payload (opaque to the engine)
        is_visible: Whether the module is shown on the public profile
        sort_order: Insertion order within the layout
    """

    id: ModuleId
    type: str
    position: GridPosition
    content: Dict[str, Any] = field(default_factory=dict)
    is_visible: bool = True
    sort_order: int = 0


def new_module_id() -> ModuleId:
    """Generate a fresh module identifier."""
    return f"module_{uuid.uuid4().hex}"
