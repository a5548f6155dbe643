"""
Entry point for the PySide6 profile layout editor.
"""
import argparse
import logging
import sys
from typing import List, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit a profile's module layout")
    parser.add_argument("--profile", help="Profile id to edit (defaults to the last one saved)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def run(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the editor application.
    """
    from PySide6.QtWidgets import QApplication
    from profile_layout.gui.main_window import create_file_backed_window
    from profile_layout.gui.models.settings import EditorSettings
    from profile_layout.gui.styles.theme import GLOBAL_STYLESHEET
    from profile_layout.gui.utils.paths import (
        ensure_directories,
        get_previews_dir,
        get_profiles_dir,
        get_settings_path,
    )

    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )
    logger = logging.getLogger("profile_layout")

    app = QApplication(sys.argv[:1])
    app.setApplicationName("Profile Layout")
    app.setOrganizationName("Profile Layout")
    app.setStyleSheet(GLOBAL_STYLESHEET)

    ensure_directories()
    settings = EditorSettings(get_settings_path())
    if settings.load_error:
        logger.warning(f"Editor settings reset to defaults: {settings.load_error}")

    profile_id = args.profile or settings.get_last_profile_id() or "default"
    logger.info(f"Opening layout editor for profile {profile_id}")

    window = create_file_backed_window(
        profile_id,
        get_profiles_dir(),
        settings=settings,
        previews_dir=get_previews_dir(),
    )
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
