import os
import pytest
import sys

# Run Qt headless when no display is available
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
from pathlib import Path

# Add src to sys.path so we can import profile_layout
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from profile_layout.engine.config import GridBounds, GRID_PRESETS
from profile_layout.engine.models import GridPosition, Module
from profile_layout.engine.store import ModuleStore
from profile_layout.engine.templates import default_registry


# Common test fixtures
@pytest.fixture
def registry():
    """Built-in template catalog."""
    return default_registry()


@pytest.fixture
def bounds():
    """Default 4x8 grid."""
    return GridBounds()


@pytest.fixture
def desktop_grid():
    return GRID_PRESETS["desktop"]


@pytest.fixture
def store(bounds, registry):
    """Empty store on the default grid with the default module limit."""
    return ModuleStore(bounds, registry, max_modules=20)


@pytest.fixture
def make_module():
    """Factory for modules at explicit positions."""
    def _make(module_id, module_type, x, y, width, height, **kwargs):
        return Module(
            id=module_id,
            type=module_type,
            position=GridPosition(x, y, width, height),
            **kwargs,
        )
    return _make
