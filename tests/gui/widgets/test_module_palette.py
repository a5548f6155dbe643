"""Unit tests for the template palette."""

from PySide6.QtCore import Qt

from profile_layout.engine.session import EditingSession
from profile_layout.gui.widgets.module_palette import TEMPLATE_MIME_TYPE, ModulePalette


def _palette(qtbot, session):
    palette = ModulePalette()
    qtbot.addWidget(palette)
    palette.refresh(session.palette_entries())
    return palette


class TestModulePalette:
    """Tests for palette listing and drag payloads."""

    def test_refresh_when_default_catalog_then_categories_listed(self, qtbot):
        palette = _palette(qtbot, EditingSession())

        categories = [palette.topLevelItem(i).text(0) for i in range(palette.topLevelItemCount())]

        assert categories == ["Introduction", "Services", "Media", "Contact", "Credibility"]
        assert palette.template_item("gallery") is not None

    def test_refresh_when_cap_reached_then_item_disabled_with_count(self, qtbot):
        session = EditingSession()
        session.start_empty()

        palette = _palette(qtbot, session)

        hero = palette.template_item("hero")
        assert not hero.flags() & Qt.ItemFlag.ItemIsEnabled
        assert "(1/1)" in hero.text(0)
        assert palette.template_item("text").flags() & Qt.ItemFlag.ItemIsDragEnabled

    def test_mime_data_when_item_then_carries_template_type(self, qtbot):
        palette = _palette(qtbot, EditingSession())

        mime = palette.mimeData([palette.template_item("video")])

        assert mime.hasFormat(TEMPLATE_MIME_TYPE)
        assert bytes(mime.data(TEMPLATE_MIME_TYPE)).decode("utf-8") == "video"

    def test_double_click_when_enabled_then_template_activated(self, qtbot):
        palette = _palette(qtbot, EditingSession())

        with qtbot.waitSignal(palette.templateActivated, timeout=1000) as blocker:
            palette.itemDoubleClicked.emit(palette.template_item("stats"), 0)

        assert blocker.args == ["stats"]

    def test_double_click_when_disabled_then_no_signal(self, qtbot):
        session = EditingSession()
        session.start_empty()
        palette = _palette(qtbot, session)
        received = []
        palette.templateActivated.connect(received.append)

        palette.itemDoubleClicked.emit(palette.template_item("hero"), 0)

        assert received == []
