"""
Main window for the profile layout editor.

Palette on the left, grid canvas in the centre, toolbar actions for
persistence and preview export. Save/load block with a busy cursor;
the engine does no in-flight tracking, so the actions are disabled
while one runs.
"""
import asyncio
import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QGuiApplication
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QScrollArea,
    QToolBar,
    QWidget,
)

from profile_layout.engine.config import EngineConfig, GRID_PRESETS, get_grid_preset
from profile_layout.engine.file_api import JsonFileModuleAPI
from profile_layout.engine.persistence import PersistenceAPI, WireFormatError
from profile_layout.engine.preview import save_layout_preview
from profile_layout.engine.session import EditingSession, InsertStatus
from profile_layout.engine.store import LayoutIntegrityError
from profile_layout.gui.models.settings import EditorSettings
from profile_layout.gui.widgets.grid_canvas import GridCanvas
from profile_layout.gui.widgets.module_palette import ModulePalette

logger = logging.getLogger(__name__)

STATUS_TIMEOUT_MS = 5000

_INSERT_MESSAGES = {
    InsertStatus.CAPACITY_REACHED: "That module type has reached its limit.",
    InsertStatus.LAYOUT_FULL: "The layout already holds the maximum number of modules.",
    InsertStatus.NO_SPACE: "The grid is full: no free space for that module.",
    InsertStatus.UNKNOWN_TEMPLATE: "Unknown module type.",
}


class EditorWindow(QMainWindow):
    """Profile layout editor window for a single profile."""

    def __init__(
        self,
        profile_id: str,
        api: PersistenceAPI,
        settings: Optional[EditorSettings] = None,
        previews_dir: Optional[Path] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.profile_id = str(profile_id)
        self.api = api
        self.settings = settings
        self.previews_dir = previews_dir or Path.cwd()

        device = settings.get_device() if settings else "desktop"
        self.session = self._new_session(device)

        self.setWindowTitle(f"Profile Layout – profile {self.profile_id}")
        self.palette_widget = ModulePalette()
        self.palette_widget.setFixedWidth(260)
        self.canvas = GridCanvas(self.session)

        scroll = QScrollArea()
        scroll.setWidget(self.canvas)
        scroll.setAlignment(Qt.AlignmentFlag.AlignCenter)

        central = QWidget()
        layout = QHBoxLayout(central)
        layout.addWidget(self.palette_widget)
        layout.addWidget(scroll, 1)
        self.setCentralWidget(central)

        self.grid_label = QLabel()
        self.statusBar().addPermanentWidget(self.grid_label)
        self._build_toolbar(device)

        self.palette_widget.templateActivated.connect(self.add_template)
        self.canvas.layoutChanged.connect(self.refresh)
        self.canvas.selectionChanged.connect(self._on_selection_changed)

        self.refresh()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def add_template(self, template_type: str) -> None:
        """Auto-place a template (palette double-click)."""
        result = self.session.add_from_palette(template_type)
        if not result.added:
            self.show_message(_INSERT_MESSAGES[result.status])
            return
        self.refresh()

    def remove_selected(self) -> None:
        selected = self.session.store.selected_id
        if selected is None:
            return
        self.session.remove(selected)
        self.refresh()

    def toggle_selected_visibility(self) -> None:
        module = self.session.store.selected_module
        if module is None:
            return
        self.session.set_visibility(module.id, not module.is_visible)
        self.refresh()

    def save(self) -> bool:
        """Persist the full layout. Returns True on success."""
        try:
            response = self._run_blocking(self.session.save(self.profile_id))
        except Exception as e:
            logger.exception(f"Save failed for profile {self.profile_id}")
            self.show_message(f"Save failed: {e}")
            return False
        if not response.success:
            self.show_message(f"Save rejected: {response.error or 'unknown error'}")
            return False
        if self.settings is not None:
            self.settings.set_last_profile_id(self.profile_id)
        self.show_message(f"Saved {len(self.session.modules)} modules.")
        return True

    def load(self) -> bool:
        """Replace the layout with the saved one. Returns True on success."""
        return self._load_into(self.session)

    def switch_device(self, device: str) -> None:
        """Re-open the saved layout on another grid preset."""
        if device not in GRID_PRESETS:
            return
        session = self._new_session(device)
        if not self._load_into(session):
            current = next(
                name for name, grid in GRID_PRESETS.items() if grid == self.session.grid
            )
            self.device_combo.blockSignals(True)
            self.device_combo.setCurrentText(current)
            self.device_combo.blockSignals(False)
            return
        self.session = session
        self.canvas.set_session(session)
        if self.settings is not None:
            self.settings.set_device(device)
        self.refresh()

    def export_preview(self) -> Path:
        path = self.previews_dir / f"profile_{self.profile_id}.png"
        save_layout_preview(
            path,
            self.session.modules,
            self.session.grid,
            registry=self.session.registry,
            selected_id=self.session.store.selected_id,
        )
        self.show_message(f"Preview written to {path}")
        return path

    def refresh(self) -> None:
        self.palette_widget.refresh(self.session.palette_entries())
        bounds = self.session.grid.bounds
        self.grid_label.setText(
            f"Grid {bounds.cols}×{bounds.rows} ({len(self.session.modules)} modules)"
        )
        has_selection = self.session.store.selected_id is not None
        self.remove_action.setEnabled(has_selection)
        self.visibility_action.setEnabled(has_selection)
        self.canvas.update()

    def show_message(self, message: str) -> None:
        self.statusBar().showMessage(message, STATUS_TIMEOUT_MS)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _new_session(self, device: str) -> EditingSession:
        return EditingSession(EngineConfig(grid=get_grid_preset(device)), api=self.api)

    def _load_into(self, session: EditingSession) -> bool:
        try:
            count = self._run_blocking(session.load(self.profile_id))
        except (WireFormatError, LayoutIntegrityError) as e:
            self.show_message(f"Saved layout cannot be shown on this grid: {e}")
            return False
        except Exception as e:
            logger.exception(f"Load failed for profile {self.profile_id}")
            self.show_message(f"Load failed: {e}")
            return False
        if count == 0:
            session.start_empty()
        if session is self.session:
            self.refresh()
        self.show_message(f"Loaded {count} modules.")
        return True

    def _run_blocking(self, coro):
        self._set_busy(True)
        QGuiApplication.setOverrideCursor(Qt.CursorShape.WaitCursor)
        try:
            return asyncio.run(coro)
        finally:
            QGuiApplication.restoreOverrideCursor()
            self._set_busy(False)

    def _set_busy(self, busy: bool) -> None:
        for action in (self.save_action, self.reload_action):
            action.setEnabled(not busy)
        self.device_combo.setEnabled(not busy)

    def _build_toolbar(self, device: str) -> None:
        toolbar = QToolBar("Editor")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.save_action = QAction("Save", self)
        self.save_action.triggered.connect(self.save)
        self.reload_action = QAction("Reload", self)
        self.reload_action.triggered.connect(self.load)
        self.remove_action = QAction("Remove selected", self)
        self.remove_action.triggered.connect(self.remove_selected)
        self.visibility_action = QAction("Show/hide selected", self)
        self.visibility_action.triggered.connect(self.toggle_selected_visibility)
        self.preview_action = QAction("Export preview", self)
        self.preview_action.triggered.connect(self.export_preview)
        self.palette_action = QAction("Palette", self)
        self.palette_action.setCheckable(True)
        palette_visible = self.settings.get_palette_visible() if self.settings else True
        self.palette_action.setChecked(palette_visible)
        self.palette_widget.setVisible(palette_visible)
        self.palette_action.toggled.connect(self._on_palette_toggled)

        for action in (
            self.save_action,
            self.reload_action,
            self.remove_action,
            self.visibility_action,
            self.preview_action,
            self.palette_action,
        ):
            toolbar.addAction(action)

        self.device_combo = QComboBox()
        self.device_combo.addItems(list(GRID_PRESETS))
        self.device_combo.setCurrentText(device)
        self.device_combo.currentTextChanged.connect(self.switch_device)
        toolbar.addSeparator()
        toolbar.addWidget(self.device_combo)

    def _on_palette_toggled(self, visible: bool) -> None:
        self.palette_widget.setVisible(visible)
        if self.settings is not None:
            self.settings.set_palette_visible(visible)

    def _on_selection_changed(self, module_id: str) -> None:
        self.refresh()


def create_file_backed_window(
    profile_id: str,
    profiles_dir: Path,
    settings: Optional[EditorSettings] = None,
    previews_dir: Optional[Path] = None,
) -> EditorWindow:
    """Editor window storing layouts as JSON files, with the saved layout loaded."""
    window = EditorWindow(
        profile_id,
        JsonFileModuleAPI(profiles_dir),
        settings=settings,
        previews_dir=previews_dir,
    )
    window.load()
    return window
