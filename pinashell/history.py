"""Bounded command history with up/down navigation for the line editor."""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterator, List, Optional

DEFAULT_HISTORY_CAP = 15


class NavigationStatus(Enum):
    MOVED = "moved"
    END_OF_HISTORY = "end_of_history"
    BEGIN_OF_HISTORY = "begin_of_history"


@dataclass
class NavigationResult:
    """Outcome of one navigation step; cursor is an index where 0 is the most recent entry."""
    status: NavigationStatus
    cursor: Optional[int]

    @property
    def moved(self) -> bool:
        return self.status is NavigationStatus.MOVED


class HistoryStore:
    """Most-recent-first list of finalized lines, capped at a fixed number of entries.

    Navigation never mutates the store, it only hands back a new cursor.
    """

    def __init__(self, cap: int = DEFAULT_HISTORY_CAP):
        if cap < 1:
            raise ValueError(f"History cap must be at least 1, got {cap}")
        self._entries: Deque[str] = deque(maxlen=cap)

    @property
    def cap(self) -> int:
        return self._entries.maxlen

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def push_front(self, line: str) -> None:
        """Insert line as the most recent entry, evicting the oldest when full."""
        # deque(maxlen) drops from the right end when appending on the left
        self._entries.appendleft(str(line))

    def navigate_older(self, cursor: Optional[int]) -> NavigationResult:
        if not self._entries:
            return NavigationResult(NavigationStatus.END_OF_HISTORY, cursor)
        if cursor is None:
            return NavigationResult(NavigationStatus.MOVED, 0)
        if cursor + 1 >= len(self._entries):
            return NavigationResult(NavigationStatus.END_OF_HISTORY, cursor)
        return NavigationResult(NavigationStatus.MOVED, cursor + 1)

    def navigate_newer(self, cursor: Optional[int]) -> NavigationResult:
        if cursor is None or cursor <= 0:
            return NavigationResult(NavigationStatus.BEGIN_OF_HISTORY, cursor)
        return NavigationResult(NavigationStatus.MOVED, cursor - 1)

    def entry_text(self, cursor: int) -> str:
        if cursor is None or not 0 <= cursor < len(self._entries):
            raise IndexError(f"No history entry at cursor {cursor}")
        return self._entries[cursor]

    def entries(self) -> List[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def format_listing(self) -> List[str]:
        """Numbered lines for display, most recent first and numbered from 0."""
        return [f" {index:2d} : {line}" for index, line in enumerate(self._entries)]


class HistoryCursor:
    """Per-read navigation position into a HistoryStore."""

    def __init__(self, store: HistoryStore):
        self.store = store
        self.position: Optional[int] = None

    def reset(self) -> None:
        self.position = None

    def older(self) -> NavigationResult:
        result = self.store.navigate_older(self.position)
        self.position = result.cursor
        return result

    def newer(self) -> NavigationResult:
        result = self.store.navigate_newer(self.position)
        self.position = result.cursor
        return result

    def text(self) -> str:
        return self.store.entry_text(self.position)
