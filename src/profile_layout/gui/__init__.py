"""PySide6 profile layout editor built on profile_layout.engine."""
