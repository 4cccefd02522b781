"""
Anchored marker matching.
Prefix checks anchor a PatternSpec at the start of the probed text, suffix checks at the very end.
"""

import re
from functools import lru_cache
from typing import Optional

from mdtoggle.models import PatternSpec


@lru_cache(maxsize=256)
def _compile_prefix(pattern: str) -> re.Pattern:
    return re.compile(pattern)


@lru_cache(maxsize=256)
def _compile_suffix(pattern: str) -> re.Pattern:
    # \Z rather than $, which would also accept a match sitting before a trailing newline
    return re.compile(f"(?:{pattern})\\Z")


def _prefix_match(text: str, pattern: Optional[str]) -> Optional[re.Match]:
    if pattern is None:
        return None
    return _compile_prefix(pattern).match(text)


def _suffix_match(text: str, pattern: Optional[str]) -> Optional[re.Match]:
    if pattern is None:
        return None
    return _compile_suffix(pattern).search(text)


def matches_prefix(text: str, spec: PatternSpec) -> bool:
    """True if `text` starts with the marker and the antipattern does not also match there."""
    if _prefix_match(text, spec.pattern) is None:
        return False
    return spec.antipattern is None or _prefix_match(text, spec.antipattern) is None


def matches_suffix(text: str, spec: PatternSpec) -> bool:
    """True if `text` ends with the marker and the antipattern does not also match there."""
    if _suffix_match(text, spec.pattern) is None:
        return False
    return spec.antipattern is None or _suffix_match(text, spec.antipattern) is None


def prefix_match_length(text: str, spec: PatternSpec) -> int:
    match = _prefix_match(text, spec.pattern)
    return len(match.group(0)) if match else 0


def suffix_match_length(text: str, spec: PatternSpec) -> int:
    match = _suffix_match(text, spec.pattern)
    return len(match.group(0)) if match else 0
