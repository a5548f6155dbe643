"""
Module: engine.templates

Purpose:
    Template Registry: static, read-only catalog of insertable module
    kinds. Validated once when constructed; grouped by category for
    the palette; counts instances for the per-type cap.

Key Classes:
    - TemplateRegistry: Validated template catalog
    - TemplateCatalogError: Invalid catalog definition

Key Functions:
    - default_registry(): Cached built-in catalog
    - load_templates(): Load a catalog from a JSON file

Dependencies:
    - json (std), pathlib (std)

Used By:
    - engine.store: Instance cap enforcement
    - engine.drag: Drag start guard
    - gui.widgets.module_palette: Palette listing
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from .models import Module, ModuleSize, ModuleTemplate

logger = logging.getLogger(__name__)


class TemplateCatalogError(ValueError):
    """Template catalog failed validation."""
    pass


DEFAULT_TEMPLATES: tuple[ModuleTemplate, ...] = (
    ModuleTemplate(
        type="hero",
        display_name="Hero Banner",
        icon="🎯",
        default_size=ModuleSize(4, 2),
        category="Introduction",
        description="Headline, profile picture and a short pitch",
        max_instances=1,
    ),
    ModuleTemplate(
        type="text",
        display_name="Text Block",
        icon="📝",
        default_size=ModuleSize(2, 2),
        category="Introduction",
        description="Longer free-form introduction",
    ),
    ModuleTemplate(
        type="stats",
        display_name="Statistics",
        icon="📊",
        default_size=ModuleSize(2, 1),
        category="Introduction",
        description="Key numbers and results",
    ),
    ModuleTemplate(
        type="price_list",
        display_name="Price List",
        icon="🛠️",
        default_size=ModuleSize(2, 3),
        category="Services",
        description="Services with prices",
    ),
    ModuleTemplate(
        type="gallery",
        display_name="Gallery",
        icon="🖼️",
        default_size=ModuleSize(2, 2),
        category="Media",
        description="Pictures of past work",
    ),
    ModuleTemplate(
        type="video",
        display_name="Video",
        icon="🎥",
        default_size=ModuleSize(2, 2),
        category="Media",
        description="Introduction video",
    ),
    ModuleTemplate(
        type="contact",
        display_name="Contact",
        icon="📞",
        default_size=ModuleSize(2, 2),
        category="Contact",
        description="Phone, email and address",
        max_instances=1,
    ),
    ModuleTemplate(
        type="reviews",
        display_name="Reviews",
        icon="⭐",
        default_size=ModuleSize(2, 2),
        category="Credibility",
        description="Client reviews",
    ),
    ModuleTemplate(
        type="certificates",
        display_name="Certificates",
        icon="🏆",
        default_size=ModuleSize(1, 2),
        category="Credibility",
        description="Professional certificates",
    ),
)


class TemplateRegistry:
    """
    Read-only catalog of module templates keyed by type.

    Example:
        >>> registry = TemplateRegistry(DEFAULT_TEMPLATES)
        >>> registry.get("hero").max_instances
        1
    """

    def __init__(self, templates: Iterable[ModuleTemplate]) -> None:
        self._templates: Dict[str, ModuleTemplate] = {}
        for template in templates:
            _validate_template(template)
            if template.type in self._templates:
                raise TemplateCatalogError(f"Duplicate template type: {template.type!r}")
            self._templates[template.type] = template
        if not self._templates:
            raise TemplateCatalogError("Template catalog is empty")

    def __contains__(self, template_type: object) -> bool:
        return template_type in self._templates

    def __iter__(self) -> Iterator[ModuleTemplate]:
        return iter(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)

    @property
    def templates(self) -> tuple[ModuleTemplate, ...]:
        """All templates in catalog order."""
        return tuple(self._templates.values())

    def get(self, template_type: str) -> Optional[ModuleTemplate]:
        """Template for a type, or None if unknown."""
        return self._templates.get(template_type)

    def by_category(self) -> Dict[str, List[ModuleTemplate]]:
        """Templates grouped by category, preserving catalog order."""
        groups: Dict[str, List[ModuleTemplate]] = {}
        for template in self._templates.values():
            groups.setdefault(template.category, []).append(template)
        return groups

    @staticmethod
    def instance_count(template_type: str, modules: Iterable[Module]) -> int:
        """Number of modules of the given type."""
        return sum(1 for module in modules if module.type == template_type)

    def can_add(self, template: ModuleTemplate, modules: Iterable[Module]) -> bool:
        """Whether another instance of the template is allowed."""
        if template.max_instances is None:
            return True
        return self.instance_count(template.type, modules) < template.max_instances

    def remaining(self, template: ModuleTemplate, modules: Iterable[Module]) -> Optional[int]:
        """Instances still allowed, or None when uncapped."""
        if template.max_instances is None:
            return None
        used = self.instance_count(template.type, modules)
        return max(0, template.max_instances - used)


def _validate_template(template: ModuleTemplate) -> None:
    if not template.type:
        raise TemplateCatalogError("Template type must be non-empty")
    if not template.category:
        raise TemplateCatalogError(f"Template {template.type!r} has no category")
    if template.max_instances is not None and template.max_instances < 1:
        raise TemplateCatalogError(
            f"Template {template.type!r} max_instances must be at least 1: "
            f"{template.max_instances}"
        )


@lru_cache(maxsize=1)
def default_registry() -> TemplateRegistry:
    """Built-in catalog, validated once per process."""
    return TemplateRegistry(DEFAULT_TEMPLATES)


def load_templates(path: Path) -> TemplateRegistry:
    """
    Load a template catalog from a JSON file.

    The file holds a list of objects with keys ``type``, ``display_name``,
    ``icon``, ``default_size`` ({width, height}), ``category`` and the
    optional ``description`` and ``max_instances``.

    Raises:
        TemplateCatalogError: If the file is unreadable or invalid
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise TemplateCatalogError(f"Failed to read template catalog {path}: {e}") from e

    if not isinstance(raw, list):
        raise TemplateCatalogError("Template catalog must be a JSON list")

    templates = [_template_from_dict(entry) for entry in raw]
    registry = TemplateRegistry(templates)
    logger.info(f"Loaded {len(registry)} templates from {Path(path).name}")
    return registry


def _template_from_dict(entry: object) -> ModuleTemplate:
    if not isinstance(entry, dict):
        raise TemplateCatalogError(f"Template entry must be an object: {entry!r}")
    try:
        size = entry["default_size"]
        return ModuleTemplate(
            type=str(entry["type"]),
            display_name=str(entry["display_name"]),
            icon=str(entry.get("icon", "")),
            default_size=ModuleSize(int(size["width"]), int(size["height"])),
            category=str(entry["category"]),
            description=str(entry.get("description", "")),
            max_instances=(
                int(entry["max_instances"])
                if entry.get("max_instances") is not None
                else None
            ),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise TemplateCatalogError(f"Invalid template entry {entry!r}: {e}") from e

