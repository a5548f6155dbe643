#!/usr/bin/env python3
"""
Render a saved profile layout to a PNG preview.

Reads profile_<id>.json from the profiles directory written by the
editor and draws the grid skeleton for the chosen device preset.

Usage:
    python scripts/render_layout_preview.py --root workspace/profiles --profile 42 --out preview.png
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root / "src"))

from profile_layout.engine import (
    GRID_PRESETS,
    JsonFileModuleAPI,
    default_registry,
    from_wire,
    get_grid_preset,
    save_layout_preview,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger("render_layout_preview")


def main() -> int:
    parser = argparse.ArgumentParser(description="Render a saved layout to PNG")
    parser.add_argument("--root", type=Path, required=True, help="Profiles directory")
    parser.add_argument("--profile", required=True, help="Profile id")
    parser.add_argument("--out", type=Path, required=True, help="Output PNG path")
    parser.add_argument("--device", choices=sorted(GRID_PRESETS), default="desktop")
    parser.add_argument("--scale", type=float, default=0.5)
    parser.add_argument("--hide-invisible", action="store_true", help="Skip hidden modules")
    args = parser.parse_args()

    api = JsonFileModuleAPI(args.root)
    try:
        wire = asyncio.run(api.load_modules(args.profile))
        modules = from_wire(wire)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load profile {args.profile}: {e}")
        return 1

    if not modules:
        logger.warning(f"Profile {args.profile} has no saved modules")

    save_layout_preview(
        args.out,
        modules,
        get_grid_preset(args.device),
        registry=default_registry(),
        scale=args.scale,
        show_hidden=not args.hide_invisible,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
