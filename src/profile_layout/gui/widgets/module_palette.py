"""
Template palette: insertable module kinds grouped by category.

Exhausted templates stay listed but are disabled and cannot be
dragged. Double-clicking an enabled template requests auto-placement.
"""
from typing import Dict, List, Optional, Sequence

from PySide6.QtCore import Qt, QMimeData, Signal
from PySide6.QtWidgets import QAbstractItemView, QTreeWidget, QTreeWidgetItem

from profile_layout.engine.session import PaletteEntry

TEMPLATE_MIME_TYPE = "application/x-profile-layout-template"
TEMPLATE_TYPE_ROLE = Qt.ItemDataRole.UserRole


class ModulePalette(QTreeWidget):
    """Category tree of module templates."""

    templateActivated = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setHeaderHidden(True)
        self.setColumnCount(1)
        self.setDragEnabled(True)
        self.setDragDropMode(QAbstractItemView.DragDropMode.DragOnly)
        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.itemDoubleClicked.connect(self._on_item_double_clicked)

    def refresh(self, entries: Dict[str, List[PaletteEntry]]) -> None:
        """Rebuild the tree from the session's palette entries."""
        self.clear()
        for category, category_entries in entries.items():
            category_item = QTreeWidgetItem([category])
            category_item.setFlags(Qt.ItemFlag.ItemIsEnabled)
            self.addTopLevelItem(category_item)
            for entry in category_entries:
                category_item.addChild(self._make_item(entry))
            category_item.setExpanded(True)

    def template_item(self, template_type: str) -> Optional[QTreeWidgetItem]:
        """Item for a template type, if listed."""
        for i in range(self.topLevelItemCount()):
            category_item = self.topLevelItem(i)
            for j in range(category_item.childCount()):
                child = category_item.child(j)
                if child.data(0, TEMPLATE_TYPE_ROLE) == template_type:
                    return child
        return None

    def mimeTypes(self) -> List[str]:
        return [TEMPLATE_MIME_TYPE]

    def mimeData(self, items: Sequence[QTreeWidgetItem]) -> QMimeData:
        mime = QMimeData()
        for item in items:
            template_type = item.data(0, TEMPLATE_TYPE_ROLE)
            if template_type:
                mime.setData(TEMPLATE_MIME_TYPE, str(template_type).encode("utf-8"))
                break
        return mime

    def _make_item(self, entry: PaletteEntry) -> QTreeWidgetItem:
        template = entry.template
        label = f"{template.icon} {template.display_name}  {template.width}×{template.height}"
        if template.max_instances is not None:
            label += f"  ({entry.count}/{template.max_instances})"

        item = QTreeWidgetItem([label])
        item.setData(0, TEMPLATE_TYPE_ROLE, template.type)
        item.setToolTip(0, template.description)
        if entry.enabled:
            item.setFlags(
                Qt.ItemFlag.ItemIsEnabled
                | Qt.ItemFlag.ItemIsSelectable
                | Qt.ItemFlag.ItemIsDragEnabled
            )
        else:
            item.setFlags(Qt.ItemFlag.NoItemFlags)
        return item

    def _on_item_double_clicked(self, item: QTreeWidgetItem, column: int) -> None:
        template_type = item.data(0, TEMPLATE_TYPE_ROLE)
        if template_type and item.flags() & Qt.ItemFlag.ItemIsEnabled:
            self.templateActivated.emit(str(template_type))
