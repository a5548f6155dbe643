"""
Module: engine.drag

Purpose:
    Drag Session Controller: a finite-state controller that turns a
    sequence of pointer events into a committed insertion/relocation
    or a cancellation.

State machine:
    IDLE --start_palette_drag--> DRAGGING_FROM_PALETTE
    IDLE --start_module_drag---> DRAGGING_EXISTING_MODULE
    DRAGGING_* --pointer_move--> DRAGGING_* (drop indicator refreshed)
    DRAGGING_* --drop----------> IDLE (COMMITTED, or CANCELLED if no indicator)
    DRAGGING_* --cancel--------> IDLE (CANCELLED)

    The store is only mutated on commit, so a cancel never needs to
    restore anything.

Key Classes:
    - DragSessionController: The controller
    - DragState / DragOutcome: State and terminal outcome enums
    - DragResult: What a drop or cancel produced
    - DragSessionError: Drag started while another is active

Dependencies:
    - engine.grid: Pointer mapping, clamping, occupancy
    - engine.store: Commit target

Used By:
    - engine.session: Exposed to the editor
    - gui.widgets.grid_canvas: Feeds Qt mouse and drag events
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import GridConfig
from .content import default_content
from .grid import clamp_to_bounds, is_occupied, pointer_to_cell
from .models import GridPosition, Module, ModuleId, ModuleTemplate, new_module_id
from .store import ModuleStore

logger = logging.getLogger(__name__)


class DragSessionError(RuntimeError):
    """A drag was started while another drag session is active."""
    pass


class DragState(Enum):
    IDLE = "idle"
    DRAGGING_FROM_PALETTE = "dragging_from_palette"
    DRAGGING_EXISTING_MODULE = "dragging_existing_module"


class DragOutcome(Enum):
    COMMITTED = "committed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class DragResult:
    """
    Terminal result of a drag session.

    Attributes:
        outcome: COMMITTED or CANCELLED
        module_id: Created or relocated module (None when cancelled)
        position: Committed position (None when cancelled)
        created: True when a palette drop created a new module
    """

    outcome: DragOutcome
    module_id: Optional[ModuleId] = None
    position: Optional[GridPosition] = None
    created: bool = False

    @property
    def committed(self) -> bool:
        return self.outcome is DragOutcome.COMMITTED


_CANCELLED = DragResult(outcome=DragOutcome.CANCELLED)


class DragSessionController:
    """
    Pointer-driven placement of new and existing modules.

    Pointer coordinates are pixels relative to the grid's top-left
    corner; they are mapped to cells by floor division by the cell size.

    Example:
        >>> controller = DragSessionController(store, GRID_PRESETS["desktop"])
        >>> controller.start_module_drag("m1")
        True
        >>> controller.pointer_move(600, 250)
        GridPosition(x=2, y=2, width=2, height=2)
        >>> controller.drop().outcome
        <DragOutcome.COMMITTED: 'committed'>
    """

    def __init__(self, store: ModuleStore, grid: GridConfig) -> None:
        self.store = store
        self.grid = grid
        self._state = DragState.IDLE
        self._template: Optional[ModuleTemplate] = None
        self._module_id: Optional[ModuleId] = None
        self._original_position: Optional[GridPosition] = None
        self._indicator: Optional[GridPosition] = None

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is not DragState.IDLE

    @property
    def drop_indicator(self) -> Optional[GridPosition]:
        """Currently validated drop position, or None if invalid/none."""
        return self._indicator

    @property
    def dragged_template(self) -> Optional[ModuleTemplate]:
        return self._template

    @property
    def dragged_module_id(self) -> Optional[ModuleId]:
        return self._module_id

    @property
    def original_position(self) -> Optional[GridPosition]:
        return self._original_position

    # ------------------------------------------------------------------
    # Transitions out of IDLE
    # ------------------------------------------------------------------

    def start_palette_drag(self, template_type: str) -> bool:
        """
        Begin dragging a new module from the template palette.

        Returns:
            False (no state change) if the template is unknown, its
            instance cap is already reached, or the layout is full

        Raises:
            DragSessionError: If a drag is already active
        """
        self._ensure_idle()
        template = self.store.registry.get(template_type)
        if template is None:
            logger.debug(f"Palette drag refused: unknown template {template_type!r}")
            return False
        if not self.store.registry.can_add(template, self.store.modules):
            logger.debug(f"Palette drag refused: '{template_type}' instance cap reached")
            return False
        if self.store.is_full:
            logger.debug(f"Palette drag refused: layout already holds {self.store.max_modules} modules")
            return False

        self._state = DragState.DRAGGING_FROM_PALETTE
        self._template = template
        logger.debug(f"Started palette drag for '{template_type}'")
        return True

    def start_module_drag(self, module_id: ModuleId) -> bool:
        """
        Begin relocating a module already on the grid.

        Returns:
            False (no state change) if the module does not exist

        Raises:
            DragSessionError: If a drag is already active
        """
        self._ensure_idle()
        module = self.store.get(module_id)
        if module is None:
            return False

        self._state = DragState.DRAGGING_EXISTING_MODULE
        self._module_id = module_id
        self._original_position = module.position
        logger.debug(f"Started relocation drag for {module_id} from {module.position}")
        return True

    # ------------------------------------------------------------------
    # Live updates
    # ------------------------------------------------------------------

    def pointer_move(self, px: float, py: float) -> Optional[GridPosition]:
        """
        Refresh the drop indicator for a new pointer position.

        Returns:
            The new drop indicator, or None if the location is invalid
            (or no drag is active)
        """
        if not self.is_active:
            return None

        col, row = pointer_to_cell(px, py, self.grid)
        width, height = self._dragged_size()
        candidate = clamp_to_bounds(
            GridPosition(x=col, y=row, width=width, height=height),
            self.grid.bounds,
        )
        if is_occupied(candidate, self.store.modules, exclude_id=self._module_id):
            self._indicator = None
        else:
            self._indicator = candidate
        return self._indicator

    # ------------------------------------------------------------------
    # Terminal transitions
    # ------------------------------------------------------------------

    def drop(self) -> DragResult:
        """
        Release the pointer over the grid.

        Commits at the drop indicator when one exists; otherwise the
        drop is a cancellation.
        """
        if not self.is_active:
            return _CANCELLED
        indicator = self._indicator
        if indicator is None:
            return self.cancel()

        if self._state is DragState.DRAGGING_FROM_PALETTE:
            result = self._commit_insert(indicator)
        else:
            result = self._commit_relocate(indicator)
        self._reset()
        return result

    def cancel(self) -> DragResult:
        """Abort the active drag without touching the store."""
        if self.is_active:
            logger.debug(f"Drag cancelled ({self._state.value})")
        self._reset()
        return _CANCELLED

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _commit_insert(self, position: GridPosition) -> DragResult:
        template = self._template
        assert template is not None
        module = Module(
            id=new_module_id(),
            type=template.type,
            position=position,
            content=default_content(template.type),
            is_visible=True,
        )
        if not self.store.insert(module):
            return _CANCELLED
        self.store.select(module.id)
        return DragResult(
            outcome=DragOutcome.COMMITTED,
            module_id=module.id,
            position=position,
            created=True,
        )

    def _commit_relocate(self, position: GridPosition) -> DragResult:
        module_id = self._module_id
        assert module_id is not None
        if not self.store.relocate(module_id, position):
            return _CANCELLED
        return DragResult(outcome=DragOutcome.COMMITTED, module_id=module_id, position=position)

    def _dragged_size(self) -> tuple[int, int]:
        if self._template is not None:
            return self._template.width, self._template.height
        assert self._original_position is not None
        return self._original_position.width, self._original_position.height

    def _ensure_idle(self) -> None:
        if self.is_active:
            raise DragSessionError(
                f"Cannot start a drag while another is active ({self._state.value})"
            )

    def _reset(self) -> None:
        self._state = DragState.IDLE
        self._template = None
        self._module_id = None
        self._original_position = None
        self._indicator = None
