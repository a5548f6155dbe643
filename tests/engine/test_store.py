"""
Tests for engine.store

Test Coverage:
- insert(): invariants (overlap, bounds, caps, ids), sort order
- relocate(): self-exclusion, identity and content preserved
- remove() / update_content() / set_visibility()
- Selection rules
- replace_all(): whole-set validation, store untouched on failure
"""
import pytest

from profile_layout.engine.config import GridBounds
from profile_layout.engine.grid import overlaps
from profile_layout.engine.models import GridPosition
from profile_layout.engine.store import LayoutIntegrityError, ModuleStore


class TestInsert:
    """Tests for ModuleStore.insert."""

    def test_insert_when_free_position_then_added(self, store, make_module):
        assert store.insert(make_module("m1", "text", 0, 0, 2, 2))
        assert "m1" in store
        assert len(store) == 1

    def test_insert_when_overlapping_then_rejected_and_unchanged(self, store, make_module):
        store.insert(make_module("m1", "hero", 0, 0, 4, 2))

        inserted = store.insert(make_module("m2", "text", 0, 1, 2, 2))

        assert not inserted
        assert "m2" not in store
        assert len(store) == 1

    def test_insert_when_touching_edge_then_added(self, store, make_module):
        store.insert(make_module("m1", "hero", 0, 0, 4, 2))
        assert store.insert(make_module("m2", "text", 0, 2, 2, 2))

    def test_insert_when_out_of_bounds_then_rejected(self, store, make_module):
        assert not store.insert(make_module("m1", "text", 3, 0, 2, 2))
        assert not store.insert(make_module("m2", "text", 0, 7, 2, 2))
        assert len(store) == 0

    def test_insert_when_duplicate_id_then_rejected(self, store, make_module):
        store.insert(make_module("m1", "text", 0, 0, 2, 2))
        assert not store.insert(make_module("m1", "text", 2, 0, 2, 2))

    def test_insert_when_unknown_type_then_rejected(self, store, make_module):
        assert not store.insert(make_module("m1", "map", 0, 0, 1, 1))

    def test_insert_when_instance_cap_reached_then_rejected(self, store, make_module):
        store.insert(make_module("c1", "contact", 0, 0, 2, 2))

        assert not store.insert(make_module("c2", "contact", 2, 0, 2, 2))
        assert store.instance_count("contact") == 1

    def test_insert_when_module_limit_reached_then_rejected(self, registry, make_module):
        store = ModuleStore(GridBounds(), registry, max_modules=2)
        store.insert(make_module("a", "certificates", 0, 0, 1, 1))
        store.insert(make_module("b", "certificates", 1, 0, 1, 1))

        assert store.is_full
        assert not store.insert(make_module("c", "certificates", 2, 0, 1, 1))

    def test_insert_when_sequence_then_sort_order_increments(self, store, make_module):
        store.insert(make_module("a", "text", 0, 0, 2, 2))
        store.insert(make_module("b", "text", 2, 0, 2, 2))
        store.insert(make_module("c", "text", 0, 2, 2, 2))

        assert [m.sort_order for m in store.modules] == [0, 1, 2]
        assert [m.id for m in store.modules] == ["a", "b", "c"]

    def test_insert_when_after_removal_then_sort_order_past_max(self, store, make_module):
        store.insert(make_module("a", "text", 0, 0, 2, 2))
        store.insert(make_module("b", "text", 2, 0, 2, 2))
        store.remove("a")

        store.insert(make_module("c", "text", 0, 2, 2, 2))

        assert store.get("c").sort_order == 2

    def test_insert_when_many_accepted_then_no_pair_overlaps(self, store, make_module):
        candidates = [
            ("a", 0, 0, 2, 2), ("b", 1, 1, 2, 2), ("c", 2, 0, 2, 2),
            ("d", 0, 2, 2, 2), ("e", 3, 1, 1, 3), ("f", 2, 2, 2, 2),
        ]
        for module_id, x, y, w, h in candidates:
            store.insert(make_module(module_id, "gallery", x, y, w, h))

        placed = store.modules
        for i, first in enumerate(placed):
            for second in placed[i + 1:]:
                assert not overlaps(first.position, second.position)


class TestRelocate:
    """Tests for ModuleStore.relocate."""

    def test_relocate_when_target_free_then_moves_and_keeps_identity(self, store, make_module):
        store.insert(make_module("m1", "text", 0, 0, 2, 2, content={"title": "About"}))

        assert store.relocate("m1", GridPosition(2, 2, 2, 2))

        module = store.get("m1")
        assert module.position == GridPosition(2, 2, 2, 2)
        assert module.content == {"title": "About"}
        assert module.sort_order == 0

    def test_relocate_when_target_is_own_rectangle_then_allowed(self, store, make_module):
        store.insert(make_module("m1", "text", 0, 0, 2, 2))
        store.insert(make_module("m2", "text", 2, 0, 2, 2))

        assert store.relocate("m1", store.get("m1").position)

        assert store.get("m1").position == GridPosition(0, 0, 2, 2)

    def test_relocate_when_overlapping_own_old_position_then_allowed(self, store, make_module):
        store.insert(make_module("m1", "text", 0, 0, 2, 2))
        assert store.relocate("m1", GridPosition(1, 1, 2, 2))

    def test_relocate_when_overlapping_other_then_rejected(self, store, make_module):
        store.insert(make_module("m1", "text", 0, 0, 2, 2))
        store.insert(make_module("m2", "text", 2, 0, 2, 2))

        assert not store.relocate("m1", GridPosition(1, 0, 2, 2))
        assert store.get("m1").position == GridPosition(0, 0, 2, 2)

    def test_relocate_when_out_of_bounds_then_rejected(self, store, make_module):
        store.insert(make_module("m1", "text", 0, 0, 2, 2))
        assert not store.relocate("m1", GridPosition(3, 0, 2, 2))

    def test_relocate_when_unknown_id_then_rejected(self, store):
        assert not store.relocate("ghost", GridPosition(0, 0, 1, 1))


class TestEdits:
    """Tests for remove, content and visibility edits."""

    def test_remove_when_selected_then_selection_cleared(self, store, make_module):
        store.insert(make_module("m1", "text", 0, 0, 2, 2))
        store.select("m1")

        assert store.remove("m1")

        assert store.selected_id is None
        assert "m1" not in store

    def test_remove_when_unknown_id_then_false(self, store):
        assert not store.remove("ghost")

    def test_update_content_when_partial_then_shallow_merge(self, store, make_module):
        store.insert(make_module("m1", "hero", 0, 0, 4, 2, content={"title": "A", "subtitle": "B"}))

        store.update_content("m1", {"title": "New"})

        assert store.get("m1").content == {"title": "New", "subtitle": "B"}

    def test_set_visibility_when_hidden_then_flag_cleared(self, store, make_module):
        store.insert(make_module("m1", "text", 0, 0, 2, 2))

        assert store.set_visibility("m1", False)

        assert store.get("m1").is_visible is False


class TestSelection:
    """Tests for single selection."""

    def test_select_when_existing_then_selected(self, store, make_module):
        store.insert(make_module("m1", "text", 0, 0, 2, 2))
        assert store.select("m1")
        assert store.selected_module is store.get("m1")

    def test_select_when_unknown_then_noop(self, store, make_module):
        store.insert(make_module("m1", "text", 0, 0, 2, 2))
        store.select("m1")

        assert not store.select("ghost")

        assert store.selected_id == "m1"

    def test_select_when_already_selected_then_no_change(self, store, make_module):
        store.insert(make_module("m1", "text", 0, 0, 2, 2))
        store.select("m1")
        assert not store.select("m1")

    def test_clear_selection_when_selected_then_none(self, store, make_module):
        store.insert(make_module("m1", "text", 0, 0, 2, 2))
        store.select("m1")
        store.clear_selection()
        assert store.selected_module is None


class TestReplaceAll:
    """Tests for bulk replacement on load."""

    def test_replace_all_when_valid_then_contents_and_sort_orders_kept(self, store, make_module):
        store.insert(make_module("old", "text", 0, 0, 2, 2))
        store.select("old")

        store.replace_all([
            make_module("a", "hero", 0, 0, 4, 2, sort_order=5),
            make_module("b", "text", 0, 2, 2, 2, sort_order=9),
        ])

        assert [m.id for m in store.modules] == ["a", "b"]
        assert [m.sort_order for m in store.modules] == [5, 9]
        assert store.selected_id is None

    def test_replace_all_when_overlap_then_raises_and_store_untouched(self, store, make_module):
        store.insert(make_module("old", "text", 0, 0, 2, 2))

        with pytest.raises(LayoutIntegrityError, match="overlap"):
            store.replace_all([
                make_module("a", "text", 0, 0, 2, 2),
                make_module("b", "text", 1, 1, 2, 2),
            ])

        assert [m.id for m in store.modules] == ["old"]

    def test_replace_all_when_out_of_bounds_then_raises(self, store, make_module):
        with pytest.raises(LayoutIntegrityError, match="outside"):
            store.replace_all([make_module("a", "text", 3, 7, 2, 2)])

    def test_replace_all_when_duplicate_ids_then_raises(self, store, make_module):
        with pytest.raises(LayoutIntegrityError, match="Duplicate module id"):
            store.replace_all([
                make_module("a", "text", 0, 0, 2, 2),
                make_module("a", "text", 2, 0, 2, 2),
            ])

    def test_replace_all_when_cap_exceeded_then_raises(self, store, make_module):
        with pytest.raises(LayoutIntegrityError, match="limited to 1"):
            store.replace_all([
                make_module("c1", "contact", 0, 0, 2, 2),
                make_module("c2", "contact", 2, 0, 2, 2),
            ])

    def test_replace_all_when_unknown_type_then_raises(self, store, make_module):
        with pytest.raises(LayoutIntegrityError, match="Unknown module type"):
            store.replace_all([make_module("a", "map", 0, 0, 1, 1)])

    def test_replace_all_when_empty_then_store_cleared(self, store, make_module):
        store.insert(make_module("old", "text", 0, 0, 2, 2))
        store.replace_all([])
        assert len(store) == 0


class TestNoOverlapUnderEdits:
    """No two modules overlap after any mix of inserts and relocations."""

    def test_insert_and_relocate_when_mixed_sequence_then_no_pair_overlaps(self, store, make_module):
        steps = [
            ("insert", "a", (0, 0, 2, 2)),
            ("insert", "b", (2, 0, 2, 2)),
            ("relocate", "a", (1, 0, 2, 2)),
            ("insert", "c", (0, 2, 2, 3)),
            ("relocate", "b", (0, 1, 2, 2)),
            ("relocate", "c", (2, 2, 2, 3)),
            ("insert", "d", (1, 1, 2, 2)),
            ("relocate", "a", (0, 0, 2, 2)),
            ("insert", "e", (0, 5, 4, 3)),
            ("relocate", "e", (2, 4, 2, 2)),
            ("relocate", "d", (0, 6, 2, 2)),
        ]
        for action, module_id, (x, y, w, h) in steps:
            if action == "insert":
                store.insert(make_module(module_id, "gallery", x, y, w, h))
            else:
                store.relocate(module_id, GridPosition(x, y, w, h))

            placed = store.modules
            for i, first in enumerate(placed):
                for second in placed[i + 1:]:
                    assert not overlaps(first.position, second.position)

        assert store.get("a").position == GridPosition(0, 0, 2, 2)
        assert store.get("c").position == GridPosition(2, 2, 2, 3)
