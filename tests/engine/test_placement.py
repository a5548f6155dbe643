"""
Tests for engine.placement

Test Coverage:
- Row-major first-fit auto-placement
- Grid-full result
- Determinism for a fixed occupied set
"""
from profile_layout.engine.config import GridBounds
from profile_layout.engine.models import GridPosition
from profile_layout.engine.placement import find_free_position, find_free_slot


class TestFindFreePosition:
    """Tests for template auto-placement."""

    def test_find_free_position_when_empty_grid_then_hero_at_origin(self, registry, bounds):
        position = find_free_position(registry.get("hero"), [], bounds)
        assert position == GridPosition(x=0, y=0, width=4, height=2)

    def test_find_free_position_when_hero_placed_then_contact_below(self, registry, bounds, make_module):
        modules = [make_module("hero-1", "hero", 0, 0, 4, 2)]
        position = find_free_position(registry.get("contact"), modules, bounds)
        assert position == GridPosition(x=0, y=2, width=2, height=2)

    def test_find_free_position_when_only_one_cell_free_then_none(self, registry, make_module):
        bounds = GridBounds(cols=2, rows=2)
        modules = [
            make_module("a", "stats", 0, 0, 2, 1),
            make_module("b", "certificates", 0, 1, 1, 1),
        ]
        assert find_free_position(registry.get("gallery"), modules, bounds) is None

    def test_find_free_position_when_template_larger_than_grid_then_none(self, registry):
        assert find_free_position(registry.get("hero"), [], GridBounds(cols=2, rows=16)) is None

    def test_find_free_position_when_row_has_gap_then_fills_same_row_first(self, registry, bounds, make_module):
        modules = [make_module("m1", "text", 0, 0, 2, 2)]
        position = find_free_position(registry.get("gallery"), modules, bounds)
        assert position == GridPosition(x=2, y=0, width=2, height=2)

    def test_find_free_position_when_called_twice_then_same_result(self, registry, bounds, make_module):
        modules = [
            make_module("m1", "hero", 0, 0, 4, 2),
            make_module("m2", "price_list", 0, 2, 2, 3),
        ]
        first = find_free_position(registry.get("video"), modules, bounds)
        second = find_free_position(registry.get("video"), list(reversed(modules)), bounds)
        assert first == second == GridPosition(x=2, y=2, width=2, height=2)


class TestFindFreeSlot:
    """Tests for explicit-size slot search."""

    def test_find_free_slot_when_result_then_never_overlaps(self, bounds, make_module):
        modules = [make_module("m1", "text", 1, 1, 2, 2)]
        slot = find_free_slot(3, 1, modules, bounds)
        assert slot == GridPosition(x=0, y=0, width=3, height=1)

    def test_find_free_slot_when_scan_skips_blocked_rows_then_first_open_row(self, bounds, make_module):
        modules = [make_module("m1", "text", 1, 0, 2, 2)]
        slot = find_free_slot(3, 1, modules, bounds)
        assert slot == GridPosition(x=0, y=2, width=3, height=1)
