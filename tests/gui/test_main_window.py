"""Unit tests for the editor main window with a file-backed API."""

import json

import pytest
from portalocker.exceptions import LockException

from profile_layout.gui.main_window import EditorWindow, create_file_backed_window
from profile_layout.gui.models.settings import EditorSettings


@pytest.fixture
def settings(tmp_path):
    return EditorSettings(tmp_path / "editor_settings.json")


@pytest.fixture
def window(qtbot, tmp_path, settings):
    window = create_file_backed_window(
        "42",
        tmp_path / "profiles",
        settings=settings,
        previews_dir=tmp_path / "previews",
    )
    qtbot.addWidget(window)
    return window


class TestEditorWindow:
    """Tests for window-level editing actions."""

    def test_open_when_no_saved_layout_then_seeded_with_hero(self, window):
        assert [m.type for m in window.session.modules] == ["hero"]
        assert not window.remove_action.isEnabled()

    def test_add_template_when_cap_reached_then_status_message(self, window):
        window.add_template("hero")
        assert "limit" in window.statusBar().currentMessage()
        assert len(window.session.modules) == 1

    def test_save_when_called_then_file_written_and_profile_remembered(self, window, tmp_path, settings):
        window.add_template("contact")

        assert window.save()

        document = json.loads((tmp_path / "profiles" / "profile_42.json").read_text(encoding="utf-8"))
        assert [r["module_type"] for r in document["modules"]] == ["hero", "contact"]
        assert settings.get_last_profile_id() == "42"

    def test_reload_when_unsaved_edits_then_saved_layout_restored(self, window):
        window.save()
        window.add_template("text")

        assert window.load()

        assert [m.type for m in window.session.modules] == ["hero"]

    def test_remove_selected_when_module_selected_then_removed(self, window):
        window.add_template("gallery")
        assert window.remove_action.isEnabled()

        window.remove_selected()

        assert [m.type for m in window.session.modules] == ["hero"]

    def test_toggle_visibility_when_selected_then_hidden(self, window):
        window.add_template("video")
        selected = window.session.store.selected_module

        window.toggle_selected_visibility()

        assert selected.is_visible is False

    def test_switch_device_when_layout_too_wide_then_reverted(self, window, settings):
        window.save()

        window.device_combo.setCurrentText("tablet")

        assert window.device_combo.currentText() == "desktop"
        assert window.session.grid.bounds.cols == 4
        assert settings.get_device() == "desktop"

    def test_switch_device_when_layout_fits_then_session_replaced(self, window, settings):
        window.session.remove(window.session.modules[0].id)
        window.add_template("text")
        window.save()

        window.device_combo.setCurrentText("mobile")

        assert window.session.grid.bounds.cols == 2
        assert [m.type for m in window.session.modules] == ["text"]
        assert settings.get_device() == "mobile"

    def test_export_preview_when_called_then_png_written(self, window, tmp_path):
        path = window.export_preview()
        assert path == tmp_path / "previews" / "profile_42.png"
        assert path.exists()

    def test_palette_toggle_when_unchecked_then_hidden_and_persisted(self, window, settings):
        window.palette_action.setChecked(False)
        assert settings.get_palette_visible() is False


class LockedModuleAPI:
    """Persistence API whose profile file is always locked by another editor."""

    async def load_modules(self, profile_id):
        raise LockException("profile file is locked")

    async def save_modules(self, profile_id, modules):
        raise LockException("profile file is locked")


class TestEditorWindowBackendErrors:
    """Backend failures are reported in the status bar, not raised."""

    @pytest.fixture
    def locked_window(self, qtbot, tmp_path):
        window = EditorWindow("42", LockedModuleAPI(), previews_dir=tmp_path)
        qtbot.addWidget(window)
        return window

    def test_save_when_backend_raises_then_false_and_status_message(self, locked_window):
        assert locked_window.save() is False
        assert "Save failed" in locked_window.statusBar().currentMessage()
        assert locked_window.save_action.isEnabled()

    def test_load_when_backend_raises_then_false_and_layout_kept(self, locked_window):
        locked_window.add_template("text")

        assert locked_window.load() is False

        assert "Load failed" in locked_window.statusBar().currentMessage()
        assert [m.type for m in locked_window.session.modules] == ["text"]
