"""
Grid canvas: paints the layout and feeds pointer events into the
session's drag controller.

Mouse drags relocate modules already on the grid; Qt drag-and-drop
from the ModulePalette inserts new ones. The canvas never mutates the
store directly, all commits go through the controller.
"""
import logging
from typing import Optional, Tuple

from PySide6.QtCore import Qt, QPointF, QRectF, Signal
from PySide6.QtGui import QFont, QPainter, QPen
from PySide6.QtWidgets import QSizePolicy, QWidget

from profile_layout.engine.drag import DragResult
from profile_layout.engine.models import GridPosition, Module
from profile_layout.engine.session import EditingSession
from profile_layout.gui.styles.theme import Colors, Fonts, qcolor
from profile_layout.gui.widgets.module_palette import TEMPLATE_MIME_TYPE

logger = logging.getLogger(__name__)


class GridCanvas(QWidget):
    """
    Editable view of one session's grid.

    Widget pixels map to grid pixels through ``scale``; the controller
    then maps grid pixels to cells.
    """

    layoutChanged = Signal()
    selectionChanged = Signal(str)  # Empty string when cleared

    def __init__(self, session: EditingSession, scale: float = 0.5, parent=None):
        super().__init__(parent)
        self._session = session
        self._scale = scale
        # Pixel offset between the pointer and the dragged module's origin
        self._grab_offset = QPointF(0, 0)
        self.setAcceptDrops(True)
        self.setMouseTracking(True)
        self.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)
        self._update_size()

    @property
    def session(self) -> EditingSession:
        return self._session

    def set_session(self, session: EditingSession) -> None:
        """Show a different session (e.g. after a device preset switch)."""
        self._session.controller.cancel()
        self._session = session
        self._update_size()
        self.update()

    def cell_rect(self, position: GridPosition) -> QRectF:
        """Widget rectangle covered by a grid position."""
        cell_w, cell_h = self._cell_size()
        return QRectF(
            position.x * cell_w,
            position.y * cell_h,
            position.width * cell_w,
            position.height * cell_h,
        )

    def module_at(self, point: QPointF) -> Optional[Module]:
        """Topmost module under a widget point."""
        for module in reversed(self._session.modules):
            if self.cell_rect(module.position).contains(point):
                return module
        return None

    # ------------------------------------------------------------------
    # Palette drag handling (also used directly by tests)
    # ------------------------------------------------------------------

    def begin_palette_drag(self, template_type: str, point: QPointF) -> bool:
        controller = self._session.controller
        if controller.is_active:
            return False
        if not controller.start_palette_drag(template_type):
            return False
        self._grab_offset = QPointF(0, 0)
        self._move_pointer(point)
        return True

    def move_drag(self, point: QPointF) -> Optional[GridPosition]:
        indicator = self._move_pointer(point)
        self.update()
        return indicator

    def finish_drag(self, point: QPointF) -> DragResult:
        """Drop at a widget point; outside the grid this is a cancel."""
        controller = self._session.controller
        if self.rect().contains(point.toPoint()):
            self._move_pointer(point)
            result = controller.drop()
        else:
            result = controller.cancel()
        self._after_drag(result)
        return result

    def abort_drag(self) -> DragResult:
        result = self._session.controller.cancel()
        self.update()
        return result

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------

    def mousePressEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        point = event.position()
        module = self.module_at(point)
        if module is None:
            if self._session.store.selected_id is not None:
                self._session.store.clear_selection()
                self.selectionChanged.emit("")
            self.update()
            return

        if self._session.select(module.id):
            self.selectionChanged.emit(module.id)
        controller = self._session.controller
        if not controller.is_active and controller.start_module_drag(module.id):
            self._grab_offset = point - self.cell_rect(module.position).topLeft()
            self._move_pointer(point)
        self.update()

    def mouseMoveEvent(self, event):
        if self._session.controller.is_active:
            self.move_drag(event.position())

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        if self._session.controller.is_active:
            self.finish_drag(event.position())

    def dragEnterEvent(self, event):
        mime = event.mimeData()
        if not mime.hasFormat(TEMPLATE_MIME_TYPE):
            event.ignore()
            return
        template_type = bytes(mime.data(TEMPLATE_MIME_TYPE)).decode("utf-8")
        if self.begin_palette_drag(template_type, event.position()):
            event.acceptProposedAction()
            self.update()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        if not self._session.controller.is_active:
            event.ignore()
            return
        self.move_drag(event.position())
        event.acceptProposedAction()

    def dragLeaveEvent(self, event):
        self.abort_drag()

    def dropEvent(self, event):
        if not self._session.controller.is_active:
            event.ignore()
            return
        result = self.finish_drag(event.position())
        if result.committed:
            event.acceptProposedAction()
        else:
            event.ignore()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), qcolor(Colors.SURFACE))

        self._paint_grid_lines(painter)

        controller = self._session.controller
        selected_id = self._session.store.selected_id
        font = QFont()
        font.setPointSize(Fonts.BODY_PT)
        painter.setFont(font)
        for module in self._session.modules:
            dragged = module.id == controller.dragged_module_id
            self._paint_module(painter, module, selected=module.id == selected_id, dragged=dragged)

        indicator = controller.drop_indicator
        if indicator is not None:
            rect = self.cell_rect(indicator).adjusted(3, 3, -3, -3)
            painter.setBrush(qcolor(Colors.DROP_INDICATOR, 60))
            painter.setPen(QPen(qcolor(Colors.DROP_INDICATOR), 2, Qt.PenStyle.DashLine))
            painter.drawRoundedRect(rect, 6, 6)
        painter.end()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _paint_grid_lines(self, painter: QPainter) -> None:
        bounds = self._session.grid.bounds
        cell_w, cell_h = self._cell_size()
        painter.setPen(QPen(qcolor(Colors.GRID_LINE), 1))
        for col in range(bounds.cols + 1):
            painter.drawLine(QPointF(col * cell_w, 0), QPointF(col * cell_w, bounds.rows * cell_h))
        for row in range(bounds.rows + 1):
            painter.drawLine(QPointF(0, row * cell_h), QPointF(bounds.cols * cell_w, row * cell_h))

    def _paint_module(self, painter: QPainter, module: Module, selected: bool, dragged: bool) -> None:
        rect = self.cell_rect(module.position).adjusted(2, 2, -2, -2)
        fill = Colors.MODULE_FILL if module.is_visible else Colors.MODULE_HIDDEN_FILL
        painter.setBrush(qcolor(fill, 120 if dragged else 255))
        border = Colors.PRIMARY_BLUE if selected else Colors.MODULE_BORDER
        painter.setPen(QPen(qcolor(border), 3 if selected else 1))
        painter.drawRoundedRect(rect, 6, 6)

        template = self._session.registry.get(module.type)
        label = f"{template.icon} {template.display_name}" if template else module.type
        if not module.is_visible:
            label += " (hidden)"
        painter.setPen(qcolor(Colors.TEXT_PRIMARY if module.is_visible else Colors.TEXT_DISABLED))
        painter.drawText(
            rect.adjusted(8, 6, -8, -6),
            Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop,
            label,
        )

    def _move_pointer(self, point: QPointF) -> Optional[GridPosition]:
        origin = point - self._grab_offset
        return self._session.controller.pointer_move(
            origin.x() / self._scale, origin.y() / self._scale
        )

    def _after_drag(self, result: DragResult) -> None:
        self._grab_offset = QPointF(0, 0)
        if result.committed:
            self.layoutChanged.emit()
            if result.created and result.module_id:
                self.selectionChanged.emit(result.module_id)
        self.update()

    def _cell_size(self) -> Tuple[float, float]:
        grid = self._session.grid
        return grid.cell_width * self._scale, grid.cell_height * self._scale

    def _update_size(self) -> None:
        grid = self._session.grid
        self.setFixedSize(
            int(grid.pixel_width * self._scale) + 1,
            int(grid.pixel_height * self._scale) + 1,
        )
