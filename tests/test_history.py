"""Tests for rig.history - undo/redo stacks and continuity coalescing."""

from __future__ import annotations

import pytest

from fabforge.rig.history import HistoryEntry, HistoryManager, TabHistory


def _states(history: HistoryManager[str]) -> list[str]:
    return [entry.state for entry in history.entries()]


def _filled(n: int, max_history: int = 100) -> HistoryManager[str]:
    history: HistoryManager[str] = HistoryManager(max_history)
    for i in range(n):
        history.push(f"s{i}", f"edit {i}")
    return history


class TestPushUndoRedo:
    def test_empty_history(self):
        history: HistoryManager[str] = HistoryManager()
        assert history.current is None
        assert history.current_index == -1
        assert history.undo() is None
        assert history.redo() is None
        assert not history.can_undo()
        assert not history.can_redo()

    def test_push_sets_current(self):
        history = _filled(2)
        assert history.current == HistoryEntry("s1", "edit 1")
        assert history.current_index == 1
        assert history.can_undo()

    def test_undo_back_to_first_entry(self):
        history = _filled(5)
        for _ in range(4):
            entry = history.undo()
        assert entry is not None
        assert entry.state == "s0"
        assert not history.can_undo()
        assert history.can_redo()

    def test_floor_entry_is_never_popped(self):
        history = _filled(3)
        history.undo()
        floor = history.undo()
        for _ in range(5):
            assert history.undo() is floor
        assert _states(history) == ["s0", "s1", "s2"]
        assert history.current_index == 0

    def test_redo_returns_undone_entries_in_order(self):
        history = _filled(4)
        history.undo()
        history.undo()
        first = history.redo()
        second = history.redo()
        assert first is not None and first.state == "s2"
        assert second is not None and second.state == "s3"
        assert history.redo() is None
        assert not history.can_redo()

    def test_push_after_undo_truncates_redo(self):
        history = _filled(4)
        history.undo()
        history.undo()
        assert history.can_redo()

        history.push("new", "branch")

        assert not history.can_redo()
        assert _states(history) == ["s0", "s1", "new"]

    def test_combined_history_survives_cycles(self):
        history = _filled(5)
        for _ in range(3):
            history.undo()
        history.redo()
        history.undo()
        history.undo()
        history.redo()
        assert _states(history) == ["s0", "s1", "s2", "s3", "s4"]
        assert history.current is not None
        assert history.current.state == "s1"


class TestContinuity:
    def test_same_key_coalesces(self):
        history: HistoryManager[str] = HistoryManager()
        history.push("initial", "Initial state")
        history.push("A", "drag", "k1")
        history.push("B", "drag", "k1")

        assert _states(history) == ["initial", "B"]
        assert history.current == HistoryEntry("B", "drag", "k1")

    def test_different_keys_do_not_coalesce(self):
        history: HistoryManager[str] = HistoryManager()
        history.push("A", "drag", "k1")
        history.push("B", "drag", "k2")
        assert _states(history) == ["A", "B"]

    def test_missing_key_never_coalesces(self):
        history: HistoryManager[str] = HistoryManager()
        history.push("A", "edit")
        history.push("B", "edit")
        assert _states(history) == ["A", "B"]

    def test_undo_breaks_continuity(self):
        history: HistoryManager[str] = HistoryManager()
        history.push("initial", "Initial state")
        history.push("A", "drag", "k1")
        history.undo()
        history.push("B", "drag", "k1")
        assert _states(history) == ["initial", "B"]

    def test_undo_at_floor_breaks_continuity(self):
        history: HistoryManager[str] = HistoryManager()
        history.push("A", "drag", "k1")
        history.undo()
        history.push("B", "drag", "k1")
        assert _states(history) == ["A", "B"]

    def test_redo_breaks_continuity(self):
        history: HistoryManager[str] = HistoryManager()
        history.push("initial", "Initial state")
        history.push("A", "drag", "k1")
        history.undo()
        history.redo()
        history.push("B", "drag", "k1")
        assert _states(history) == ["initial", "A", "B"]

    def test_empty_redo_keeps_continuity(self):
        history: HistoryManager[str] = HistoryManager()
        history.push("initial", "Initial state")
        history.push("A", "drag", "k1")
        assert history.redo() is None
        history.push("B", "drag", "k1")
        assert _states(history) == ["initial", "B"]


class TestJumpAndCapacity:
    def test_jump_splits_history(self):
        history = _filled(5)
        entry = history.jump_to_state(1)

        assert entry is not None and entry.state == "s1"
        assert history.current_index == 1
        assert _states(history) == ["s0", "s1", "s2", "s3", "s4"]
        redone = history.redo()
        assert redone is not None and redone.state == "s2"

    def test_jump_forward_after_undo(self):
        history = _filled(5)
        history.jump_to_state(0)
        entry = history.jump_to_state(3)
        assert entry is not None and entry.state == "s3"
        assert history.can_redo()
        assert history.can_undo()

    @pytest.mark.parametrize("index", [-1, 5, 99])
    def test_jump_out_of_range(self, index: int):
        history = _filled(5)
        assert history.jump_to_state(index) is None
        assert history.current_index == 4

    def test_jump_breaks_continuity(self):
        history: HistoryManager[str] = HistoryManager()
        history.push("A", "drag", "k1")
        history.jump_to_state(0)
        history.push("B", "drag", "k1")
        assert _states(history) == ["A", "B"]

    def test_oldest_entry_evicted(self):
        history = _filled(5, max_history=3)
        assert _states(history) == ["s2", "s3", "s4"]
        history.undo()
        floor = history.undo()
        assert floor is not None and floor.state == "s2"
        assert not history.can_undo()

    def test_capacity_kept_after_jump(self):
        history = _filled(3, max_history=3)
        history.jump_to_state(0)
        history.push("x", "edit")
        history.push("y", "edit")
        history.push("z", "edit")
        assert _states(history) == ["x", "y", "z"]

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            HistoryManager(0)

    def test_clear(self):
        history = _filled(3)
        history.undo()
        history.clear()
        assert len(history) == 0
        assert history.current is None


class TestTabHistory:
    def test_history_per_tab(self):
        tabs: TabHistory[str] = TabHistory(max_history=7)
        first = tabs.get_history("a")
        assert tabs.get_history("a") is first
        assert tabs.get_history("b") is not first
        assert first.max_history == 7
        assert "a" in tabs

    def test_remove_and_clear(self):
        tabs: TabHistory[str] = TabHistory()
        tabs.get_history("a").push("x", "edit")
        tabs.remove_history("a")
        assert "a" not in tabs
        assert tabs.get_history("a").current is None

        tabs.get_history("b")
        tabs.clear()
        assert "b" not in tabs
