"""
The selection accessor contract consumed by FormatEngine, and an in-memory text buffer implementing it.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Tuple, runtime_checkable

import structlog

from mdtoggle.transform import normalize_newlines

logger = structlog.get_logger(__name__)

ChangeListener = Callable[[str], None]


@runtime_checkable
class SelectionAccessor(Protocol):
    """What the engine needs from a host text widget."""

    def get_text(self) -> str: ...

    def get_selection(self) -> Tuple[int, int]: ...

    def set_selection(self, start: int, end: int) -> None:
        """Select [start, end). Focuses the editable region first."""
        ...

    def replace_selection(self, text: str) -> None:
        """Replace the selection (or insert at the caret) as a single undoable edit."""
        ...


@runtime_checkable
class RangeAccessor(SelectionAccessor, Protocol):
    """An accessor that can replace an arbitrary range without selecting it first."""

    def replace_range(self, start: int, end: int, text: str) -> None: ...


@dataclass(frozen=True)
class _Snapshot:
    text: str
    start: int
    end: int


class TextBuffer:
    """
    A plain-text editing buffer with a selection, an undo history and change listeners.
    Line endings are normalized to "\\n" when text is loaded or inserted.
    """

    def __init__(self, text: str = "", selection: Optional[Tuple[int, int]] = None):
        self._text = normalize_newlines(text)
        self._start = self._end = len(self._text)
        self.focused = False
        self._undo: List[_Snapshot] = []
        self._redo: List[_Snapshot] = []
        self._listeners: List[ChangeListener] = []

        if selection is not None:
            self._start, self._end = self._clamp(*selection)

    # ------------------------------------------------------------------
    # Accessor contract
    # ------------------------------------------------------------------

    def get_text(self) -> str:
        return self._text

    def get_selection(self) -> Tuple[int, int]:
        return self._start, self._end

    def set_selection(self, start: int, end: int) -> None:
        self.focus()
        self._start, self._end = self._clamp(start, end)

    def replace_selection(self, text: str) -> None:
        self.replace_range(self._start, self._end, text)

    def replace_range(self, start: int, end: int, text: str) -> None:
        """
        Replaces [start, end) as a single undoable edit, leaving the caret after the new text.
        Undo restores the selection held before the call, even when [start, end) differs from it.
        """
        self.focus()
        self._undo.append(self._snapshot())
        self._redo.clear()

        start, end = self._clamp(start, end)
        text = normalize_newlines(text)
        self._text = self._text[:start] + text + self._text[end:]
        self._start = self._end = start + len(text)
        self._notify()

    # ------------------------------------------------------------------
    # Editing helpers
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        """Loads new content. This is not an edit: history is dropped and the caret moves to the end."""
        self._text = normalize_newlines(value)
        self._start = self._end = len(self._text)
        self._undo.clear()
        self._redo.clear()

    @property
    def selected_text(self) -> str:
        return self._text[self._start : self._end]

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def select_all(self) -> None:
        self.set_selection(0, len(self._text))

    def on_change(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self._snapshot())
        self._restore(self._undo.pop())
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self._snapshot())
        self._restore(self._redo.pop())
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _clamp(self, start: int, end: int) -> Tuple[int, int]:
        length = len(self._text)
        start = max(0, min(start, length))
        end = max(0, min(end, length))
        if end < start:
            start, end = end, start
        return start, end

    def _snapshot(self) -> _Snapshot:
        return _Snapshot(self._text, self._start, self._end)

    def _restore(self, snapshot: _Snapshot) -> None:
        self._text = snapshot.text
        self._start, self._end = snapshot.start, snapshot.end
        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self._text)
        logger.debug("buffer_changed", length=len(self._text), selection=(self._start, self._end))
