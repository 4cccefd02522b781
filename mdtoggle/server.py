from typing import Callable, List, Optional

import structlog
from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel, Field

from mdtoggle.buffer import TextBuffer
from mdtoggle.engine import FormatEngine
from mdtoggle.formats import FORMATS
from mdtoggle.log_config import configure_logging

logger = structlog.get_logger(__name__)

mcp = FastMCP("mdtoggle Formatting Service")


class FormattedText(BaseModel):
    text: str = Field(..., description="The full text after the edit.")
    selection_start: int = Field(..., description="Start offset of the new selection.")
    selection_end: int = Field(..., description="End offset of the new selection (exclusive).")


def _buffer(text: str, start: Optional[int], end: Optional[int]) -> TextBuffer:
    buffer = TextBuffer(text)
    if start is None and end is None:
        buffer.select_all()
    else:
        first = start if start is not None else 0
        buffer.set_selection(first, end if end is not None else first)
    return buffer


def _run(text: str, start: Optional[int], end: Optional[int], action: Callable[[FormatEngine], object]) -> str:
    buffer = _buffer(text, start, end)
    action(FormatEngine(buffer))
    selection_start, selection_end = buffer.get_selection()
    result = FormattedText(text=buffer.get_text(), selection_start=selection_start, selection_end=selection_end)
    return result.model_dump_json()


@mcp.tool()
def list_formats() -> str:
    """
    Lists the built-in formats with their markers.
    Generated markers (ordered list numbers, link URLs) are shown by their detection pattern.
    """
    lines = []
    for name, fmt in FORMATS.items():
        prefix = fmt.prefix.pattern if fmt.prefix.is_generated else fmt.prefix.value
        suffix = fmt.suffix.pattern if fmt.suffix.is_generated else fmt.suffix.value
        flags = ", ".join(flag for flag in ("multiline", "block") if getattr(fmt, flag)) or "inline"
        lines.append(f"- {name}: prefix={prefix!r} suffix={suffix!r} ({flags})")
    return "\n".join(lines)


@mcp.tool()
def format_text(
    text: str,
    format_name: str,
    start: Optional[int] = None,
    end: Optional[int] = None,
    args: Optional[List[str]] = None,
) -> str:
    """
    Wraps the selection [start, end) of `text` in a Markdown format.

    Args:
        text: The full document text.
        format_name: One of the names from `list_formats` (e.g. 'bold', 'link', 'orderedList').
        start: Selection start offset. Omit both start and end to select everything.
        end: Selection end offset (exclusive).
        args: Extra values for generated markers, e.g. ['https://example.com'] for 'link' and 'image'.

    Returns:
        JSON with the new text and the new selection, or an error message.
    """
    try:
        return _run(text, start, end, lambda engine: engine.apply_format(format_name, *(args or [])))
    except Exception as e:
        logger.warning("tool_failed", tool="format_text", error=str(e))
        return f"Error formatting text: {str(e)}"


@mcp.tool()
def unformat_text(text: str, format_name: str, start: Optional[int] = None, end: Optional[int] = None) -> str:
    """
    Removes a Markdown format from the selection [start, end) of `text`.
    Markers right outside the selection are removed too. The text is returned unchanged
    if the selection does not carry the format.
    """
    try:
        return _run(text, start, end, lambda engine: engine.remove_format(format_name))
    except Exception as e:
        logger.warning("tool_failed", tool="unformat_text", error=str(e))
        return f"Error removing format: {str(e)}"


@mcp.tool()
def toggle_text_format(
    text: str,
    format_name: str,
    start: Optional[int] = None,
    end: Optional[int] = None,
    args: Optional[List[str]] = None,
) -> str:
    """Removes the format if the selection carries it, applies it otherwise."""
    try:
        return _run(text, start, end, lambda engine: engine.toggle(format_name, *(args or [])))
    except Exception as e:
        logger.warning("tool_failed", tool="toggle_text_format", error=str(e))
        return f"Error toggling format: {str(e)}"


@mcp.tool()
def check_format(text: str, format_name: str, start: Optional[int] = None, end: Optional[int] = None) -> str:
    """Returns 'true' if the selection [start, end) of `text` carries the format, 'false' otherwise."""
    try:
        engine = FormatEngine(_buffer(text, start, end))
        return "true" if engine.has_format(format_name) else "false"
    except Exception as e:
        logger.warning("tool_failed", tool="check_format", error=str(e))
        return f"Error checking format: {str(e)}"


def main():
    # MCP talks JSON-RPC over stdout, so every log line goes to stderr.
    configure_logging(json_output=True, default="INFO")
    mcp.run()


if __name__ == "__main__":
    main()
