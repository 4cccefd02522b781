"""
Pure format transformations over a selection triple.

Each function takes the text around the selection and a resolved FormatDescriptor,
and describes the edit as a FormatEdit without touching any buffer.
"""

from typing import Any, List, Optional

from mdtoggle.matching import matches_prefix, matches_suffix, prefix_match_length, suffix_match_length
from mdtoggle.models import FormatDescriptor, FormatEdit, SelectionTriple

BLOCK_NEWLINES = 2


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n")


def split_selection(text: str, start: int, end: int) -> SelectionTriple:
    """
    Splits normalized `text` at [start, end).
    Offsets are clamped to the text and a reversed range is put in order.
    """
    value = normalize_newlines(text)
    start = max(0, min(start, len(value)))
    end = max(0, min(end, len(value)))
    if end < start:
        start, end = end, start
    return SelectionTriple(before=value[:start], content=value[start:end], after=value[end:])


class _SelectionOffsets:
    """Accumulates the new selection while lines are rebuilt."""

    def __init__(self, start: int, end: int):
        self.start = start
        self.end = end

    def shift(self, delta: int):
        self.start += delta
        self.end += delta

    def grow(self, delta: int):
        self.end += delta


def _leading_newlines(text: str) -> int:
    return len(text) - len(text.lstrip("\n"))


def _trailing_newlines(text: str) -> int:
    return len(text) - len(text.rstrip("\n"))


def _pad_block(insert: str, selection: SelectionTriple, offsets: _SelectionOffsets) -> str:
    # Never pad at the start or end of the buffer
    if selection.before:
        missing = max(0, BLOCK_NEWLINES - _trailing_newlines(selection.before))
        insert = "\n" * missing + insert
        offsets.shift(missing)

    if selection.after:
        missing = max(0, BLOCK_NEWLINES - _leading_newlines(selection.after))
        insert = insert + "\n" * missing

    return insert


def apply_format(selection: SelectionTriple, fmt: FormatDescriptor, *args: Any) -> FormatEdit:
    """
    Wraps the selected content in the format's markers.

    Non-multiline formats (and empty selections) keep the original content selected,
    between the markers. Multiline formats select the whole rebuilt block.
    Extra `args` are passed through to generated markers after (line, index).
    """
    content = selection.content
    lines = content.split("\n") if fmt.multiline else [content]
    offsets = _SelectionOffsets(selection.start, selection.end)

    formatted: List[str] = []
    for index, line in enumerate(lines):
        pval = normalize_newlines(fmt.prefix.render(line, index, *args))
        sval = normalize_newlines(fmt.suffix.render(line, index, *args))

        if not fmt.multiline or not content:
            offsets.shift(len(pval))
        else:
            offsets.grow(len(pval) + len(sval))

        formatted.append(pval + line + sval)

    insert = "\n".join(formatted)

    if fmt.block:
        insert = _pad_block(insert, selection, offsets)

    return FormatEdit(
        replace_start=selection.start,
        replace_end=selection.end,
        text=insert,
        selection_start=offsets.start,
        selection_end=offsets.end,
    )


def has_format(selection: SelectionTriple, fmt: FormatDescriptor) -> bool:
    """
    Single-line: markers either hug the selection from outside or sit inside it.
    Multiline with several lines: every line must carry both markers.
    """
    prefix, suffix = fmt.prefix, fmt.suffix
    lines = selection.content.split("\n")

    if not fmt.multiline or len(lines) == 1:
        outside = matches_suffix(selection.before, prefix) and matches_prefix(selection.after, suffix)
        inside = matches_prefix(selection.content, prefix) and matches_suffix(selection.content, suffix)
        return outside or inside

    return all(matches_prefix(line, prefix) and matches_suffix(line, suffix) for line in lines)


def remove_format(selection: SelectionTriple, fmt: FormatDescriptor) -> Optional[FormatEdit]:
    """
    Strips the format's markers from the selection.

    Returns None when the selection does not carry the format.
    Markers just outside a single-line selection are pulled into the replaced range.
    The stripped result ends up fully selected.
    """
    if not has_format(selection, fmt):
        return None

    prefix, suffix = fmt.prefix, fmt.suffix
    start, end = selection.start, selection.end
    lines = selection.content.split("\n") if fmt.multiline else [selection.content]

    if (
        (not fmt.multiline or len(lines) == 1)
        and matches_suffix(selection.before, prefix)
        and matches_prefix(selection.after, suffix)
    ):
        start -= suffix_match_length(selection.before, prefix)
        end += prefix_match_length(selection.after, suffix)
        lines = [selection.text[start:end]]

    stripped = []
    for line in lines:
        plen = prefix_match_length(line, prefix)
        slen = suffix_match_length(line, suffix)
        stripped.append(line[plen : len(line) - slen])

    insert = "\n".join(stripped)
    return FormatEdit(
        replace_start=start,
        replace_end=end,
        text=insert,
        selection_start=start,
        selection_end=start + len(insert),
    )
