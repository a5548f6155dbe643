"""
Settings persistence model for the profile editor.

Handles persistent editor preferences with robust error handling.
Any malformed data results in graceful fallback to defaults.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from PySide6.QtCore import QObject

from profile_layout.engine.config import GRID_PRESETS

logger = logging.getLogger(__name__)

DEFAULT_DEVICE = "desktop"


class EditorSettings(QObject):
    """Lightweight JSON-backed store for persisting editor preferences."""

    CURRENT_VERSION = 1

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        self.data: Dict[str, object] = {}
        self._load_error: Optional[str] = None

        if self.path.exists():
            try:
                self.data = json.loads(self.path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                self._load_error = f"Settings file is corrupted:\n{e}"
                self.data = {}
            except OSError as e:
                self._load_error = f"Failed to read settings:\n{e}"
                self.data = {}

        if "version" not in self._get_dict():
            self.data["version"] = self.CURRENT_VERSION

    @property
    def load_error(self) -> Optional[str]:
        return self._load_error

    def get_device(self) -> str:
        """Grid preset name; unknown values fall back to desktop."""
        device = self._get_dict().get("device")
        if isinstance(device, str) and device in GRID_PRESETS:
            return device
        return DEFAULT_DEVICE

    def set_device(self, device: str) -> None:
        if device not in GRID_PRESETS:
            raise ValueError(f"Unknown device preset: {device!r}")
        self._get_dict()["device"] = device
        self._save()

    def get_last_profile_id(self) -> Optional[str]:
        value = self._get_dict().get("last_profile_id")
        return str(value) if value not in (None, "") else None

    def set_last_profile_id(self, profile_id: str) -> None:
        self._get_dict()["last_profile_id"] = str(profile_id)
        self._save()

    def get_palette_visible(self) -> bool:
        ui = self._get_dict().setdefault("ui", {})
        if not isinstance(ui, dict):
            ui = self.data["ui"] = {}
        return bool(ui.get("palette_visible", True))

    def set_palette_visible(self, visible: bool) -> None:
        ui = self._get_dict().setdefault("ui", {})
        if not isinstance(ui, dict):
            ui = self.data["ui"] = {}
        ui["palette_visible"] = bool(visible)
        self._save()

    def _get_dict(self) -> Dict[str, object]:
        if not isinstance(self.data, dict):
            self.data = {}
        return self.data

    def _save(self) -> None:
        """Write settings through a temp file so an interrupted write cannot corrupt them."""
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.path.with_suffix(".tmp")
            temp_path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")
            temp_path.replace(self.path)
        except OSError as e:
            logger.warning(f"Failed to save settings: {e}")
            if temp_path:
                try:
                    if temp_path.exists():
                        temp_path.unlink()
                except OSError:
                    pass
