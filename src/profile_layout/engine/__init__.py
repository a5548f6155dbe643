"""
Module: engine

Purpose:
    Spatial module-layout engine for the profile editor.
    Places rectangular modules on a fixed grid without overlap,
    inserts from a template palette, relocates through pointer-driven
    drag sessions, and persists layouts through an external API.

Key Functions:
    - find_free_position(): First-fit auto-placement
    - to_wire() / from_wire(): Wire codec
    - render_layout_preview(): Layout skeleton image

Key Classes:
    - GridBounds / GridConfig / EngineConfig: Configuration
    - ModuleStore: Owned module collection
    - DragSessionController: Drag state machine
    - PersistenceGateway: Load/save
    - EditingSession: Session facade

Dependencies:
    - PIL: Preview rendering
    - portalocker: JSON file backend locking

Used By:
    - profile_layout.gui: PySide6 editor
"""

from .config import GridBounds, GridConfig, EngineConfig, GRID_PRESETS, get_grid_preset
from .models import GridPosition, ModuleSize, ModuleTemplate, Module, new_module_id
from .grid import overlaps, is_in_bounds, is_occupied, clamp_to_bounds, pointer_to_cell
from .placement import find_free_position, find_free_slot
from .templates import (
    TemplateRegistry,
    TemplateCatalogError,
    DEFAULT_TEMPLATES,
    default_registry,
    load_templates,
)
from .content import default_content
from .store import ModuleStore, LayoutIntegrityError
from .drag import DragSessionController, DragState, DragOutcome, DragResult, DragSessionError
from .persistence import (
    PersistenceAPI,
    PersistenceGateway,
    SaveResponse,
    WireFormatError,
    from_wire,
    to_wire,
)
from .file_api import JsonFileModuleAPI
from .session import EditingSession, InsertStatus, PaletteEntry, PaletteInsertResult
from .preview import render_layout_preview, save_layout_preview

__all__ = [
    # Config
    "GridBounds",
    "GridConfig",
    "EngineConfig",
    "GRID_PRESETS",
    "get_grid_preset",
    # Models
    "GridPosition",
    "ModuleSize",
    "ModuleTemplate",
    "Module",
    "new_module_id",
    # Grid model
    "overlaps",
    "is_in_bounds",
    "is_occupied",
    "clamp_to_bounds",
    "pointer_to_cell",
    # Placement
    "find_free_position",
    "find_free_slot",
    # Templates
    "TemplateRegistry",
    "TemplateCatalogError",
    "DEFAULT_TEMPLATES",
    "default_registry",
    "load_templates",
    "default_content",
    # Store
    "ModuleStore",
    "LayoutIntegrityError",
    # Drag
    "DragSessionController",
    "DragState",
    "DragOutcome",
    "DragResult",
    "DragSessionError",
    # Persistence
    "PersistenceAPI",
    "PersistenceGateway",
    "SaveResponse",
    "WireFormatError",
    "from_wire",
    "to_wire",
    "JsonFileModuleAPI",
    # Session
    "EditingSession",
    "InsertStatus",
    "PaletteEntry",
    "PaletteInsertResult",
    # Preview
    "render_layout_preview",
    "save_layout_preview",
]
