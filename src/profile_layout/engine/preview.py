"""
Module: engine.preview

Purpose:
    Render the layout skeleton (grid plus module containers) to an
    image. Module content is not rendered; each container shows its
    template name.

Key Functions:
    - render_layout_preview(): Layout -> PIL image
    - save_layout_preview(): Render and write PNG

Dependencies:
    - PIL: Image drawing

Used By:
    - gui.main_window: Export preview action
    - scripts/render_layout_preview.py: CLI export
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from PIL import Image, ImageDraw, ImageFont

from .config import GridConfig
from .models import Module, ModuleId
from .templates import TemplateRegistry

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = "white"
GRID_LINE_COLOR = (224, 224, 224)
MODULE_FILL_COLOR = (240, 249, 255)
MODULE_BORDER_COLOR = (158, 158, 158)
HIDDEN_FILL_COLOR = (245, 245, 245)
SELECTED_BORDER_COLOR = (3, 100, 184)
TEXT_COLOR = (31, 31, 31)
HIDDEN_TEXT_COLOR = (158, 158, 158)


def render_layout_preview(
    modules: Iterable[Module],
    grid: GridConfig,
    registry: Optional[TemplateRegistry] = None,
    *,
    scale: float = 0.5,
    selected_id: Optional[ModuleId] = None,
    show_hidden: bool = True,
) -> Image.Image:
    """
    Draw the grid and module containers.

    Args:
        modules: Modules to draw
        grid: Grid geometry (cell size in pixels)
        registry: Used for display names; falls back to the type key
        scale: Multiplier applied to cell sizes
        selected_id: Module outlined with the accent color
        show_hidden: Draw invisible modules dimmed instead of skipping them

    Returns:
        RGB image of size (pixel_width, pixel_height) * scale
    """
    if scale <= 0:
        raise ValueError(f"scale must be positive: {scale}")

    cell_w = max(1, round(grid.cell_width * scale))
    cell_h = max(1, round(grid.cell_height * scale))
    cols, rows = grid.bounds.cols, grid.bounds.rows

    image = Image.new("RGB", (cols * cell_w + 1, rows * cell_h + 1), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(image)

    for col in range(cols + 1):
        draw.line([(col * cell_w, 0), (col * cell_w, rows * cell_h)], fill=GRID_LINE_COLOR)
    for row in range(rows + 1):
        draw.line([(0, row * cell_h), (cols * cell_w, row * cell_h)], fill=GRID_LINE_COLOR)

    font = _load_font(max(10, cell_h // 6))
    inset = min(2, cell_w // 4, cell_h // 4)
    for module in modules:
        if not module.is_visible and not show_hidden:
            continue
        pos = module.position
        box = (
            pos.x * cell_w + inset,
            pos.y * cell_h + inset,
            pos.right * cell_w - inset,
            pos.bottom * cell_h - inset,
        )
        selected = module.id == selected_id
        draw.rectangle(
            box,
            fill=MODULE_FILL_COLOR if module.is_visible else HIDDEN_FILL_COLOR,
            outline=SELECTED_BORDER_COLOR if selected else MODULE_BORDER_COLOR,
            width=3 if selected else 1,
        )
        draw.text(
            (box[0] + 6, box[1] + 4),
            _label_for(module, registry),
            fill=TEXT_COLOR if module.is_visible else HIDDEN_TEXT_COLOR,
            font=font,
        )

    return image


def save_layout_preview(path: Path, modules: Iterable[Module], grid: GridConfig, **kwargs) -> Path:
    """Render the layout preview and write it as PNG."""
    image = render_layout_preview(modules, grid, **kwargs)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(path, format="PNG")
    logger.info(f"Wrote layout preview {path} ({image.width}x{image.height})")
    return path


def _label_for(module: Module, registry: Optional[TemplateRegistry]) -> str:
    template = registry.get(module.type) if registry is not None else None
    label = template.display_name if template is not None else module.type
    if not module.is_visible:
        label += " (hidden)"
    return label


def _load_font(size: int) -> ImageFont.ImageFont:
    font_options = [
        "arial.ttf",
        "Arial.ttf",
        "DejaVuSans.ttf",
    ]
    for font_name in font_options:
        try:
            return ImageFont.truetype(font_name, size)
        except (IOError, OSError):
            continue

    logger.debug("Could not load TrueType font, using default")
    return ImageFont.load_default()
