"""Linear undo/redo history of immutable document snapshots."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_HISTORY = 100


@dataclass(frozen=True)
class HistoryEntry(Generic[T]):
    """A snapshot and the human-readable edit that produced it."""

    state: T
    description: str
    continuity_key: str | None = None


class HistoryManager(Generic[T]):
    """Undo and redo stacks for one open document.

    The undo stack's bottom entry is the floor: :meth:`undo` never pops it.
    ``undo_stack + redo_stack`` is always the full history in chronological
    order, so the redo stack keeps the next entry to redo at the front.
    Consecutive pushes sharing a continuity key collapse into one entry.
    """

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY) -> None:
        if max_history < 1:
            msg = "max_history must be at least 1"
            raise ValueError(msg)
        self.max_history = max_history
        self._undo: deque[HistoryEntry[T]] = deque(maxlen=max_history)
        self._redo: deque[HistoryEntry[T]] = deque()
        self._last_continuity_key: str | None = None

    def __len__(self) -> int:
        return len(self._undo) + len(self._redo)

    @property
    def current(self) -> HistoryEntry[T] | None:
        return self._undo[-1] if self._undo else None

    @property
    def current_index(self) -> int:
        return len(self._undo) - 1

    def entries(self) -> list[HistoryEntry[T]]:
        return [*self._undo, *self._redo]

    def push(self, state: T, description: str, continuity_key: str | None = None) -> None:
        entry = HistoryEntry(state, description, continuity_key)

        if (
            continuity_key is not None
            and continuity_key == self._last_continuity_key
            and self._undo
        ):
            self._undo[-1] = entry
            return

        self._redo.clear()
        # deque(maxlen=...) drops the oldest entry on overflow.
        self._undo.append(entry)
        self._last_continuity_key = continuity_key
        logger.debug("History push: %s (%d entries)", description, len(self._undo))

    def undo(self) -> HistoryEntry[T] | None:
        """Step back one entry and return the new current entry.

        At the floor this is a no-op that returns the floor entry.
        """
        self._last_continuity_key = None
        if len(self._undo) > 1:
            self._redo.appendleft(self._undo.pop())
        return self.current

    def redo(self) -> HistoryEntry[T] | None:
        if not self._redo:
            return None
        self._last_continuity_key = None
        entry = self._redo.popleft()
        self._undo.append(entry)
        return entry

    def jump_to_state(self, index: int) -> HistoryEntry[T] | None:
        """Make the entry at *index* of :meth:`entries` current."""
        combined = self.entries()
        if index < 0 or index >= len(combined):
            return None
        self._undo = deque(combined[: index + 1], maxlen=self.max_history)
        self._redo = deque(combined[index + 1 :])
        self._last_continuity_key = None
        return self._undo[-1]

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
        self._last_continuity_key = None

    def can_undo(self) -> bool:
        return len(self._undo) > 1

    def can_redo(self) -> bool:
        return len(self._redo) > 0


class TabHistory(Generic[T]):
    """One :class:`HistoryManager` per open document, created on demand."""

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY) -> None:
        self.max_history = max_history
        self._histories: dict[str, HistoryManager[T]] = {}

    def __contains__(self, tab_id: object) -> bool:
        return tab_id in self._histories

    def get_history(self, tab_id: str) -> HistoryManager[T]:
        history = self._histories.get(tab_id)
        if history is None:
            history = HistoryManager(self.max_history)
            self._histories[tab_id] = history
        return history

    def remove_history(self, tab_id: str) -> None:
        self._histories.pop(tab_id, None)

    def clear(self) -> None:
        self._histories.clear()
