import re
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# A marker is either a literal string or a generator called as (line, index, *extra).
MarkerValue = Union[str, Callable[..., str]]


class PatternSpec(BaseModel):
    """
    A prefix or suffix marker.
    `value` is what gets inserted, `pattern` is the regex used to find an existing marker.
    Patterns carry no anchors; the matcher anchors them at the start or end of the probed text.
    """

    model_config = ConfigDict(frozen=True)

    value: MarkerValue = Field("", description="Literal marker text, or a generator (line, index, *extra) -> str.")
    pattern: Optional[str] = Field(None, description="Regex detecting the marker. Defaults to the escaped literal.")
    antipattern: Optional[str] = Field(
        None,
        description="Regex that disqualifies a pattern match at the same anchor (e.g. '![' for a '[' marker).",
    )

    @model_validator(mode="before")
    @classmethod
    def _default_pattern(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("pattern") is None:
            value = data.get("value", "")
            if isinstance(value, str):
                data = {**data, "pattern": re.escape(value)}
        return data

    @property
    def is_generated(self) -> bool:
        return callable(self.value)

    def render(self, line: str, index: int, *args: Any) -> str:
        """Marker text for the given line. `index` is 0-based."""
        if callable(self.value):
            return self.value(line, index, *args)
        return self.value


def _as_pattern_spec(value: Any) -> Any:
    if value is None:
        return PatternSpec()
    if isinstance(value, str) or callable(value):
        return PatternSpec(value=value)
    return value


class FormatDescriptor(BaseModel):
    """
    Configuration for one format: the markers wrapped around the selection
    and how lines and surrounding blank lines are handled.
    """

    model_config = ConfigDict(frozen=True)

    prefix: PatternSpec = Field(default_factory=PatternSpec)
    suffix: PatternSpec = Field(default_factory=PatternSpec)
    multiline: bool = Field(False, description="Format each line of the selection independently.")
    block: bool = Field(False, description="Separate the result from neighbouring text by a blank line.")
    name: Optional[str] = None

    @field_validator("prefix", "suffix", mode="before")
    @classmethod
    def _normalize_marker(cls, value: Any) -> Any:
        # Shorthand: "**" means PatternSpec(value="**", pattern=r"\*\*")
        return _as_pattern_spec(value)

    @property
    def label(self) -> str:
        return self.name or "<custom>"


class SelectionTriple(BaseModel):
    """The buffer text split around the selection: before + content + after."""

    before: str = ""
    content: str = ""
    after: str = ""

    @property
    def start(self) -> int:
        return len(self.before)

    @property
    def end(self) -> int:
        return len(self.before) + len(self.content)

    @property
    def text(self) -> str:
        return self.before + self.content + self.after


class FormatEdit(BaseModel):
    """
    Result of a transformation.
    Replace text[replace_start:replace_end] with `text`, then select [selection_start, selection_end].
    """

    replace_start: int
    replace_end: int
    text: str
    selection_start: int
    selection_end: int

    @property
    def selection(self) -> tuple[int, int]:
        return self.selection_start, self.selection_end

    def apply_to(self, source: str) -> str:
        return source[: self.replace_start] + self.text + source[self.replace_end :]
