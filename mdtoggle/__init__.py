from importlib.metadata import PackageNotFoundError, version

from mdtoggle.buffer import RangeAccessor, SelectionAccessor, TextBuffer
from mdtoggle.engine import FormatEngine
from mdtoggle.exceptions import InvalidFormat
from mdtoggle.formats import FORMATS, available_formats, get_format
from mdtoggle.models import FormatDescriptor, FormatEdit, PatternSpec, SelectionTriple

try:
    __version__ = version("mdtoggle")
except PackageNotFoundError:
    # Running from a source checkout without an installed distribution.
    __version__ = "0.0.0-dev"

__all__ = [
    "FormatEngine",
    "TextBuffer",
    "SelectionAccessor",
    "RangeAccessor",
    "FormatDescriptor",
    "PatternSpec",
    "SelectionTriple",
    "FormatEdit",
    "FORMATS",
    "get_format",
    "available_formats",
    "InvalidFormat",
    "__version__",
]
