from typing import Any, Optional, Tuple, Union

import structlog

from mdtoggle import transform
from mdtoggle.buffer import RangeAccessor, SelectionAccessor
from mdtoggle.formats import FormatLike, get_format
from mdtoggle.models import FormatEdit, SelectionTriple

logger = structlog.get_logger(__name__)


class FormatEngine:
    """
    Applies, removes and detects formats on the current selection of a text buffer.

    Every call reads the buffer afresh, so the engine holds no state besides the accessor.
    Mutating calls return the engine for chaining:

        FormatEngine(buffer).range((6, 11)).apply_format("bold")
    """

    def __init__(self, accessor: SelectionAccessor):
        self.accessor = accessor

    def range(self, selection: Optional[Tuple[int, int]] = None) -> Union[Tuple[int, int], "FormatEngine"]:
        """Returns the current [start, end) selection, or sets it when given one."""
        if selection is None:
            start, end = self.accessor.get_selection()
            return start or 0, end or 0

        start, end = selection
        self.accessor.set_selection(start, end)
        return self

    def insert(self, text: str) -> "FormatEngine":
        """Replaces the current selection with `text`."""
        self.accessor.replace_selection(text)
        return self

    def get_selection_triple(self) -> SelectionTriple:
        start, end = self.range()
        return transform.split_selection(self.accessor.get_text(), start, end)

    def has_format(self, fmt: FormatLike) -> bool:
        descriptor = get_format(fmt)
        selection = self.get_selection_triple()
        result = transform.has_format(selection, descriptor)
        logger.debug(
            "format_checked",
            format=descriptor.label,
            selection=(selection.start, selection.end),
            result=result,
        )
        return result

    def apply_format(self, fmt: FormatLike, *args: Any) -> "FormatEngine":
        """
        Wraps the selection in the format's markers.
        Extra args reach generated markers, e.g. the URL of a link: apply_format("link", "/about").
        """
        descriptor = get_format(fmt)
        edit = transform.apply_format(self.get_selection_triple(), descriptor, *args)
        self._commit(edit)
        logger.debug(
            "format_applied",
            format=descriptor.label,
            replaced=(edit.replace_start, edit.replace_end),
            selection=edit.selection,
        )
        return self

    def remove_format(self, fmt: FormatLike) -> "FormatEngine":
        """Strips the format's markers from the selection. No-op if the selection does not carry the format."""
        descriptor = get_format(fmt)
        edit = transform.remove_format(self.get_selection_triple(), descriptor)
        if edit is None:
            logger.debug("format_not_present", format=descriptor.label)
            return self

        self._commit(edit)
        logger.debug(
            "format_removed",
            format=descriptor.label,
            replaced=(edit.replace_start, edit.replace_end),
            selection=edit.selection,
        )
        return self

    def toggle(self, fmt: FormatLike, *args: Any) -> "FormatEngine":
        if self.has_format(fmt):
            return self.remove_format(fmt)
        return self.apply_format(fmt, *args)

    def _commit(self, edit: FormatEdit):
        if isinstance(self.accessor, RangeAccessor):
            # Undo returns to the user's selection, not the widened one
            self.accessor.replace_range(edit.replace_start, edit.replace_end, edit.text)
        else:
            # Widened removals replace more than the current selection
            if tuple(self.range()) != (edit.replace_start, edit.replace_end):
                self.range((edit.replace_start, edit.replace_end))
            self.insert(edit.text)
        self.range(edit.selection)
