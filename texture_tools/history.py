"""Snapshot based undo/redo over registered state fields."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List


logger = logging.getLogger(__name__)

HISTORY_LIMIT = 30


@dataclass
class HistoryEntry:
    label: str
    state: Dict[str, Any]


@dataclass
class HistoryField:
    capture: Callable[[], Any]
    apply: Callable[[Any], None]


class HistoryManager:
    """Bounded undo list plus a redo list that any new record clears.

    Each registered field's ``capture`` must return an independent copy, so a
    stored entry never changes when the live state does.
    """

    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self._limit = limit
        self._fields: Dict[str, HistoryField] = {}
        self._undo: List[HistoryEntry] = []
        self._redo: List[HistoryEntry] = []
        self._restoring = False
        self._last_undo_label: str | None = None
        self._last_redo_label: str | None = None

    def register_field(self, name: str, capture: Callable[[], Any], apply: Callable[[Any], None]) -> None:
        self._fields[name] = HistoryField(capture=capture, apply=apply)

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def is_restoring(self) -> bool:
        return self._restoring

    def capture(self) -> Dict[str, Any]:
        return {name: field.capture() for name, field in self._fields.items()}

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
        logger.debug("History cleared")

    def record(self, label: str, state: Dict[str, Any] | None = None) -> bool:
        """Push ``state`` (or a fresh capture) as the state before ``label``."""

        if self._restoring:
            logger.debug("History record skipped label=%s restoring=%s", label, self._restoring)
            return False
        snapshot = state if state is not None else self.capture()
        self._push_undo(HistoryEntry(label=label, state=snapshot))
        if self._redo:
            logger.debug("History record cleared redo label=%s dropped=%s", label, len(self._redo))
            self._redo.clear()
        logger.debug("History record added label=%s undo=%s", label, len(self._undo))
        return True

    def undo(self) -> bool:
        if not self._undo:
            logger.debug("History undo skipped undo=%s redo=%s", len(self._undo), len(self._redo))
            return False
        entry = self._undo.pop()
        self._redo.append(HistoryEntry(label=entry.label, state=self.capture()))
        self._last_undo_label = entry.label
        logger.debug("History undo apply label=%s undo=%s redo=%s", entry.label, len(self._undo), len(self._redo))
        self._apply_state(entry.state)
        return True

    def redo(self) -> bool:
        if not self._redo:
            logger.debug("History redo skipped undo=%s redo=%s", len(self._undo), len(self._redo))
            return False
        entry = self._redo.pop()
        self._push_undo(HistoryEntry(label=entry.label, state=self.capture()))
        self._last_redo_label = entry.label
        logger.debug("History redo apply label=%s undo=%s redo=%s", entry.label, len(self._undo), len(self._redo))
        self._apply_state(entry.state)
        return True

    @property
    def last_undo_label(self) -> str | None:
        return self._last_undo_label

    @property
    def last_redo_label(self) -> str | None:
        return self._last_redo_label

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def _push_undo(self, entry: HistoryEntry) -> None:
        self._undo.append(entry)
        overflow = len(self._undo) - self._limit
        if overflow > 0:
            del self._undo[:overflow]
            logger.debug("History trimmed oldest entries=%s", overflow)

    def _apply_state(self, state: Dict[str, Any]) -> None:
        self._restoring = True
        try:
            for name, value in state.items():
                field = self._fields.get(name)
                if field is not None:
                    field.apply(value)
        finally:
            self._restoring = False
