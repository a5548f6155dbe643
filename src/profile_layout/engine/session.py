"""
Module: engine.session

Purpose:
    Orchestrate one profile editing session.
    Owns the Module Store and wires it to the template registry,
    the drag controller and the persistence gateway.

    Palette click → auto-place → select
    Pointer drag  → controller → store
    Save / load   → gateway → external API

Key Classes:
    - EditingSession: Session facade used by the editor
    - PaletteInsertResult / InsertStatus: Outcome of palette insertion
    - PaletteEntry: Template plus its current availability

Dependencies:
    - engine.store, engine.drag, engine.persistence, engine.placement

Used By:
    - gui.main_window: Editor window
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .config import EngineConfig
from .content import default_content
from .drag import DragSessionController
from .models import Module, ModuleId, ModuleTemplate, new_module_id
from .persistence import PersistenceAPI, PersistenceGateway, SaveResponse
from .placement import find_free_position
from .store import ModuleStore
from .templates import TemplateRegistry, default_registry

logger = logging.getLogger(__name__)


class InsertStatus(Enum):
    ADDED = "added"
    UNKNOWN_TEMPLATE = "unknown_template"
    CAPACITY_REACHED = "capacity_reached"
    LAYOUT_FULL = "layout_full"
    NO_SPACE = "no_space"


@dataclass(frozen=True)
class PaletteInsertResult:
    """
    Outcome of inserting a template from the palette.

    Attributes:
        status: ADDED or the reason nothing was added
        module: The new module when added
    """

    status: InsertStatus
    module: Optional[Module] = None

    @property
    def added(self) -> bool:
        return self.status is InsertStatus.ADDED


@dataclass(frozen=True)
class PaletteEntry:
    """A template as the palette should show it right now."""

    template: ModuleTemplate
    count: int
    enabled: bool


class EditingSession:
    """
    One editor's session over one profile layout.

    Example:
        >>> session = EditingSession(EngineConfig(), api=JsonFileModuleAPI(root))
        >>> session.add_from_palette("gallery").status
        <InsertStatus.ADDED: 'added'>
        >>> asyncio.run(session.save("42")).success
        True
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        registry: Optional[TemplateRegistry] = None,
        api: Optional[PersistenceAPI] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.registry = registry or default_registry()
        self.store = ModuleStore(
            self.config.grid.bounds,
            self.registry,
            max_modules=self.config.max_modules,
        )
        self.controller = DragSessionController(self.store, self.config.grid)
        self.gateway = PersistenceGateway(api, self.store) if api is not None else None

    @property
    def grid(self):
        return self.config.grid

    @property
    def modules(self) -> tuple[Module, ...]:
        return self.store.modules

    def start_empty(self) -> List[Module]:
        """
        Seed an empty layout with the configured default modules.

        Returns:
            Modules that were placed
        """
        placed: List[Module] = []
        for template_type in self.config.seed_types:
            result = self.add_from_palette(template_type, select=False)
            if result.module is not None:
                placed.append(result.module)
            else:
                logger.warning(f"Could not seed '{template_type}': {result.status.value}")
        return placed

    def add_from_palette(self, template_type: str, select: bool = True) -> PaletteInsertResult:
        """
        Insert a template at the first free position (row-major).

        A full grid or an exhausted template is reported through the
        result status, never raised.
        """
        template = self.registry.get(template_type)
        if template is None:
            return PaletteInsertResult(InsertStatus.UNKNOWN_TEMPLATE)
        if not self.registry.can_add(template, self.store.modules):
            return PaletteInsertResult(InsertStatus.CAPACITY_REACHED)
        if self.store.is_full:
            return PaletteInsertResult(InsertStatus.LAYOUT_FULL)

        position = find_free_position(template, self.store.modules, self.grid.bounds)
        if position is None:
            return PaletteInsertResult(InsertStatus.NO_SPACE)

        module = Module(
            id=new_module_id(),
            type=template.type,
            position=position,
            content=default_content(template.type),
        )
        if not self.store.insert(module):
            # Checked above; only reachable if the store's rules diverge
            return PaletteInsertResult(InsertStatus.NO_SPACE)
        if select:
            self.store.select(module.id)
        return PaletteInsertResult(InsertStatus.ADDED, module)

    def palette_entries(self) -> Dict[str, List[PaletteEntry]]:
        """
        Templates grouped by category with counts and availability.

        Disabled entries are exhausted, larger than the grid, or the
        layout already holds the maximum number of modules.
        """
        bounds = self.grid.bounds
        modules = self.store.modules
        layout_full = self.store.is_full
        grouped: Dict[str, List[PaletteEntry]] = {}
        for category, templates in self.registry.by_category().items():
            grouped[category] = [
                PaletteEntry(
                    template=t,
                    count=self.registry.instance_count(t.type, modules),
                    enabled=(
                        not layout_full
                        and self.registry.can_add(t, modules)
                        and t.width <= bounds.cols
                        and t.height <= bounds.rows
                    ),
                )
                for t in templates
            ]
        return grouped

    def select(self, module_id: ModuleId) -> bool:
        return self.store.select(module_id)

    def remove(self, module_id: ModuleId) -> bool:
        return self.store.remove(module_id)

    def update_content(self, module_id: ModuleId, partial: Mapping[str, Any]) -> bool:
        return self.store.update_content(module_id, partial)

    def set_visibility(self, module_id: ModuleId, visible: bool) -> bool:
        return self.store.set_visibility(module_id, visible)

    async def load(self, profile_id: str) -> int:
        """Replace the layout with the saved one. See PersistenceGateway.load."""
        return await self._require_gateway().load(profile_id)

    async def save(self, profile_id: str) -> SaveResponse:
        """Persist the full layout. See PersistenceGateway.save."""
        return await self._require_gateway().save(profile_id)

    def _require_gateway(self) -> PersistenceGateway:
        if self.gateway is None:
            raise RuntimeError("EditingSession has no persistence API configured")
        return self.gateway
