"""
Path utilities for handling dev vs production (frozen) file locations.

Dev mode: Uses local workspace/ directory
Frozen mode: Uses the system application data location
"""
from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths


def is_frozen() -> bool:
    """Check if running as a frozen (PyInstaller) application."""
    return getattr(sys, 'frozen', False) or hasattr(sys, '_MEIPASS')


def get_app_data_dir() -> Path:
    """
    Get the application data directory for editor state files.

    Frozen: platform AppLocalDataLocation (e.g. %LOCALAPPDATA%/Profile Layout)
    Dev: workspace/
    """
    if is_frozen():
        return Path(QStandardPaths.writableLocation(
            QStandardPaths.StandardLocation.AppLocalDataLocation
        ))
    return Path.cwd() / "workspace"


def get_settings_path() -> Path:
    """Get the path for storing editor settings."""
    return get_app_data_dir() / "editor_settings.json"


def get_profiles_dir() -> Path:
    """Directory holding saved profile layouts."""
    return get_app_data_dir() / "profiles"


def get_previews_dir() -> Path:
    """Directory for exported layout preview images."""
    return get_app_data_dir() / "previews"


def ensure_directories() -> None:
    """Create the data directories if they do not exist."""
    for directory in (get_profiles_dir(), get_previews_dir()):
        directory.mkdir(parents=True, exist_ok=True)
