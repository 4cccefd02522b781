"""
The built-in format registry and format resolution.
"""

from types import MappingProxyType
from typing import Any, List, Mapping, Union

import structlog

from mdtoggle.exceptions import InvalidFormat
from mdtoggle.models import FormatDescriptor, PatternSpec

logger = structlog.get_logger(__name__)

FormatLike = Union[str, FormatDescriptor, Mapping[str, Any]]


def _url_suffix(line: str, index: int, url: str = "", *args: Any) -> str:
    return f"]({url})"


def _list_number(line: str, index: int, *args: Any) -> str:
    return f"{index + 1}. "


def _header(level: int) -> PatternSpec:
    marker = "#" * level + " "
    # "# " also ends "### ", so a deeper header is excluded explicitly
    return PatternSpec(value=marker, antipattern="#" + marker)


URL_SUFFIX = PatternSpec(value=_url_suffix, pattern=r"\]\(.*?\)")

_FORMATS = {
    "bold": FormatDescriptor(name="bold", prefix="**", suffix="**"),
    "italic": FormatDescriptor(name="italic", prefix="_", suffix="_"),
    "link": FormatDescriptor(
        name="link",
        prefix=PatternSpec(value="[", pattern=r"\[", antipattern=r"\!\["),
        suffix=URL_SUFFIX,
    ),
    "image": FormatDescriptor(name="image", prefix="![", suffix=URL_SUFFIX),
    "header1": FormatDescriptor(name="header1", prefix=_header(1)),
    "header2": FormatDescriptor(name="header2", prefix=_header(2)),
    "header3": FormatDescriptor(name="header3", prefix=_header(3)),
    "code": FormatDescriptor(name="code", prefix="```\n", suffix="\n```", block=True),
    "orderedList": FormatDescriptor(
        name="orderedList",
        prefix=PatternSpec(value=_list_number, pattern=r"[0-9]+\. "),
        multiline=True,
        block=True,
    ),
    "unorderedList": FormatDescriptor(name="unorderedList", prefix="- ", multiline=True, block=True),
    "blockquote": FormatDescriptor(name="blockquote", prefix="> ", multiline=True, block=True),
}

FORMATS: Mapping[str, FormatDescriptor] = MappingProxyType(_FORMATS)


def available_formats() -> List[str]:
    return list(FORMATS)


def get_format(fmt: FormatLike) -> FormatDescriptor:
    """
    Resolves a format name or an ad hoc descriptor.

    Args:
        fmt: A registry name ("bold"), a FormatDescriptor, or a mapping such as
             {"prefix": "**", "suffix": "**", "multiline": True}.

    Returns:
        A normalized FormatDescriptor. Registry entries are returned as-is (they are frozen).

    Raises:
        InvalidFormat: if `fmt` is a name missing from the registry.
    """
    if isinstance(fmt, FormatDescriptor):
        return fmt

    if isinstance(fmt, Mapping):
        return FormatDescriptor.model_validate(dict(fmt))

    descriptor = FORMATS.get(fmt)
    if descriptor is None:
        logger.warning("invalid_format", name=fmt, available=available_formats())
        raise InvalidFormat(fmt)
    return descriptor
