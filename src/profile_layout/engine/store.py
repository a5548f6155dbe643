"""
Module: engine.store

Purpose:
    Module Store: the authoritative, ordered collection of placed
    modules for one editing session. Every write goes through the
    methods below, which enforce the layout invariants:

    - No-overlap: no two module rectangles intersect
    - In-bounds: every rectangle lies inside the grid
    - Instance cap: per-type max_instances is never exceeded
    - Id uniqueness: no two modules share an id

    Placement conflicts are rejected silently (False return, nothing
    mutated). Only a bulk replace with invalid data raises.

Key Classes:
    - ModuleStore: Owned module collection plus selection
    - LayoutIntegrityError: Bulk replace violates an invariant

Dependencies:
    - engine.grid: Geometry predicates
    - engine.templates: Instance caps

Used By:
    - engine.drag: Commits drops
    - engine.persistence: Load/save
    - engine.session: Editing operations
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from .config import GridBounds
from .grid import is_in_bounds, is_occupied, overlaps
from .models import GridPosition, Module, ModuleId
from .templates import TemplateRegistry

logger = logging.getLogger(__name__)


class LayoutIntegrityError(ValueError):
    """A module set violates a layout invariant."""
    pass


class ModuleStore:
    """
    Ordered collection of modules keyed by id, with single selection.

    Attributes:
        bounds: Grid bounds every module must fit
        registry: Template catalog used for type and cap checks
        max_modules: Store-wide module limit (None for unlimited)

    Example:
        >>> store = ModuleStore(GridBounds(), default_registry())
        >>> store.insert(Module("m1", "hero", GridPosition(0, 0, 4, 2)))
        True
        >>> store.insert(Module("m2", "text", GridPosition(0, 1, 2, 2)))
        False  # overlaps the hero
    """

    def __init__(
        self,
        bounds: GridBounds,
        registry: TemplateRegistry,
        max_modules: Optional[int] = None,
    ) -> None:
        self.bounds = bounds
        self.registry = registry
        self.max_modules = max_modules
        self._modules: Dict[ModuleId, Module] = {}
        self._selected_id: Optional[ModuleId] = None

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._modules)

    def __iter__(self) -> Iterator[Module]:
        return iter(list(self._modules.values()))

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._modules

    @property
    def modules(self) -> tuple[Module, ...]:
        """Modules in insertion order."""
        return tuple(self._modules.values())

    def get(self, module_id: ModuleId) -> Optional[Module]:
        return self._modules.get(module_id)

    def instance_count(self, template_type: str) -> int:
        return self.registry.instance_count(template_type, self._modules.values())

    @property
    def is_full(self) -> bool:
        """Whether the store-wide module limit is reached."""
        return self.max_modules is not None and len(self._modules) >= self.max_modules

    @property
    def selected_id(self) -> Optional[ModuleId]:
        return self._selected_id

    @property
    def selected_module(self) -> Optional[Module]:
        if self._selected_id is None:
            return None
        return self._modules.get(self._selected_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, module: Module) -> bool:
        """
        Append a module and assign it the next sort order.

        Returns:
            True if inserted, False if any invariant would break
        """
        if module.id in self._modules:
            logger.debug(f"Rejected insert: duplicate id {module.id}")
            return False
        template = self.registry.get(module.type)
        if template is None:
            logger.debug(f"Rejected insert: unknown module type {module.type!r}")
            return False
        if self.is_full:
            logger.info(f"Rejected insert: layout already holds {self.max_modules} modules")
            return False
        if not self.registry.can_add(template, self._modules.values()):
            logger.info(
                f"Rejected insert: '{module.type}' limited to {template.max_instances} instance(s)"
            )
            return False
        if not self._is_free(module.position):
            logger.debug(f"Rejected insert of {module.id}: position {module.position} unavailable")
            return False

        module.sort_order = self._next_sort_order()
        self._modules[module.id] = module
        logger.info(f"Inserted {module.type} module {module.id} at {_fmt(module.position)}")
        return True

    def relocate(self, module_id: ModuleId, new_position: GridPosition) -> bool:
        """
        Replace a module's position, keeping identity, content and order.

        The module's own current rectangle never blocks the move.
        """
        module = self._modules.get(module_id)
        if module is None:
            logger.debug(f"Rejected relocate: unknown id {module_id}")
            return False
        if not self._is_free(new_position, exclude_id=module_id):
            logger.debug(f"Rejected relocate of {module_id} to {_fmt(new_position)}")
            return False

        module.position = new_position
        logger.info(f"Relocated {module_id} to {_fmt(new_position)}")
        return True

    def remove(self, module_id: ModuleId) -> bool:
        """Delete a module, clearing the selection if it was selected."""
        module = self._modules.pop(module_id, None)
        if module is None:
            return False
        if self._selected_id == module_id:
            self._selected_id = None
        logger.info(f"Removed {module.type} module {module_id}")
        return True

    def update_content(self, module_id: ModuleId, partial: Mapping[str, Any]) -> bool:
        """Shallow-merge partial content into the module's content."""
        module = self._modules.get(module_id)
        if module is None:
            return False
        module.content = {**module.content, **partial}
        return True

    def set_visibility(self, module_id: ModuleId, visible: bool) -> bool:
        module = self._modules.get(module_id)
        if module is None:
            return False
        module.is_visible = bool(visible)
        return True

    def select(self, module_id: ModuleId) -> bool:
        """
        Select a module. Selecting an unknown id is a no-op.

        Returns:
            True if the selection changed
        """
        if module_id not in self._modules or module_id == self._selected_id:
            return False
        self._selected_id = module_id
        return True

    def clear_selection(self) -> None:
        self._selected_id = None

    def replace_all(self, modules: Iterable[Module]) -> None:
        """
        Replace the whole collection (used on load).

        Incoming sort orders are kept. The set is validated as a whole
        before anything changes.

        Raises:
            LayoutIntegrityError: If the set violates any invariant
        """
        incoming: List[Module] = list(modules)
        self._validate_set(incoming)
        self._modules = {module.id: module for module in incoming}
        self._selected_id = None
        logger.info(f"Replaced layout with {len(incoming)} modules")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _is_free(self, position: GridPosition, exclude_id: Optional[ModuleId] = None) -> bool:
        return is_in_bounds(position, self.bounds) and not is_occupied(
            position, self._modules.values(), exclude_id=exclude_id
        )

    def _next_sort_order(self) -> int:
        if not self._modules:
            return 0
        return max(m.sort_order for m in self._modules.values()) + 1

    def _validate_set(self, modules: List[Module]) -> None:
        if self.max_modules is not None and len(modules) > self.max_modules:
            raise LayoutIntegrityError(
                f"{len(modules)} modules exceed the limit of {self.max_modules}"
            )

        seen: Dict[ModuleId, Module] = {}
        counts: Dict[str, int] = {}
        for module in modules:
            if module.id in seen:
                raise LayoutIntegrityError(f"Duplicate module id: {module.id}")
            template = self.registry.get(module.type)
            if template is None:
                raise LayoutIntegrityError(f"Unknown module type: {module.type!r}")
            if not is_in_bounds(module.position, self.bounds):
                raise LayoutIntegrityError(
                    f"Module {module.id} at {_fmt(module.position)} is outside "
                    f"the {self.bounds.cols}x{self.bounds.rows} grid"
                )
            for other in seen.values():
                if overlaps(module.position, other.position):
                    raise LayoutIntegrityError(f"Modules {other.id} and {module.id} overlap")
            counts[module.type] = counts.get(module.type, 0) + 1
            if template.max_instances is not None and counts[module.type] > template.max_instances:
                raise LayoutIntegrityError(
                    f"'{module.type}' limited to {template.max_instances} instance(s)"
                )
            seen[module.id] = module


def _fmt(position: GridPosition) -> str:
    return f"({position.x},{position.y} {position.width}x{position.height})"
