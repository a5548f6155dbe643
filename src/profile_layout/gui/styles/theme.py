"""
Theme definitions for the profile editor.
"""
from PySide6.QtGui import QColor


class Colors:
    # Primary Colors
    PRIMARY_BLUE = "#0364B8"
    PRIMARY_BLUE_HOVER = "#0A2767"

    # Backgrounds
    BACKGROUND = "#f5f5f5"
    SURFACE = "#ffffff"
    DISABLED_BG = "#e0e0e0"

    # Text
    TEXT_PRIMARY = "#1f1f1f"
    TEXT_SECONDARY = "#666666"
    TEXT_DISABLED = "#757575"

    # Borders & Dividers
    BORDER = "#e0e0e0"
    GRID_LINE = "#e6e6e6"
    BORDER_FOCUS = "#28A8EA"

    # Status
    ERROR = "#d32f2f"
    SUCCESS = "#388e3c"

    # Modules
    MODULE_FILL = "#F0F9FF"
    MODULE_HIDDEN_FILL = "#f0f0f0"
    MODULE_BORDER = "#9e9e9e"
    DROP_INDICATOR = "#388e3c"


class Fonts:
    UI_FONT = "-apple-system, 'SF Pro Text', 'Segoe UI', Roboto, Helvetica, Arial, sans-serif"
    BODY_PT = 11
    SMALL_PT = 9


def qcolor(hex_value: str, alpha: int = 255) -> QColor:
    """QColor from a theme hex string with optional alpha."""
    color = QColor(hex_value)
    color.setAlpha(alpha)
    return color


GLOBAL_STYLESHEET = f"""
QMainWindow {{
    background-color: {Colors.BACKGROUND};
}}
QTreeWidget {{
    background-color: {Colors.SURFACE};
    border: 1px solid {Colors.BORDER};
    color: {Colors.TEXT_PRIMARY};
}}
QTreeWidget::item:disabled {{
    color: {Colors.TEXT_DISABLED};
}}
QStatusBar {{
    color: {Colors.TEXT_SECONDARY};
}}
QToolButton:checked {{
    color: {Colors.PRIMARY_BLUE};
}}
QComboBox:focus {{
    border: 1px solid {Colors.BORDER_FOCUS};
}}
"""
