"""
Tests for engine.config

Test Coverage:
- GridBounds / GridConfig validation and derived sizes
- Device presets
- EngineConfig limits
"""
import pytest

from profile_layout.engine.config import (
    EngineConfig,
    GridBounds,
    GridConfig,
    GRID_PRESETS,
    get_grid_preset,
)


class TestGridBounds:
    """Tests for GridBounds dataclass."""

    def test_init_when_defaults_then_four_by_eight(self):
        bounds = GridBounds()
        assert (bounds.cols, bounds.rows) == (4, 8)
        assert bounds.cell_count == 32

    def test_init_when_zero_cols_then_raises_error(self):
        with pytest.raises(ValueError, match="cols must be positive"):
            GridBounds(cols=0, rows=8)

    def test_init_when_negative_rows_then_raises_error(self):
        with pytest.raises(ValueError, match="rows must be positive"):
            GridBounds(cols=4, rows=-1)


class TestGridConfig:
    """Tests for GridConfig dataclass."""

    def test_pixel_size_when_desktop_then_cells_times_size(self):
        grid = GridConfig()
        assert grid.pixel_width == 4 * 280
        assert grid.pixel_height == 8 * 120

    def test_init_when_zero_cell_width_then_raises_error(self):
        with pytest.raises(ValueError, match="cell_width must be positive"):
            GridConfig(cell_width=0)

    def test_init_when_zero_cell_height_then_raises_error(self):
        with pytest.raises(ValueError, match="cell_height must be positive"):
            GridConfig(cell_height=0)


class TestGridPresets:
    """Tests for device presets."""

    @pytest.mark.parametrize(
        "name, cols, rows, cell_w, cell_h",
        [
            ("desktop", 4, 8, 280, 120),
            ("tablet", 3, 11, 240, 100),
            ("mobile", 2, 16, 160, 80),
        ],
    )
    def test_get_grid_preset_when_known_name_then_returns_geometry(self, name, cols, rows, cell_w, cell_h):
        grid = get_grid_preset(name)
        assert (grid.bounds.cols, grid.bounds.rows) == (cols, rows)
        assert (grid.cell_width, grid.cell_height) == (cell_w, cell_h)

    def test_get_grid_preset_when_unknown_name_then_raises_error(self):
        with pytest.raises(ValueError, match="Unknown grid preset"):
            get_grid_preset("watch")


class TestEngineConfig:
    """Tests for EngineConfig dataclass."""

    def test_init_when_defaults_then_desktop_twenty_modules_hero_seed(self):
        config = EngineConfig()
        assert config.grid == GRID_PRESETS["desktop"]
        assert config.max_modules == 20
        assert config.seed_types == ("hero",)

    def test_init_when_max_modules_none_then_unlimited(self):
        assert EngineConfig(max_modules=None).max_modules is None

    def test_init_when_max_modules_zero_then_raises_error(self):
        with pytest.raises(ValueError, match="max_modules must be at least 1"):
            EngineConfig(max_modules=0)
