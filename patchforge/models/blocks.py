from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass
class EditBlock:
    """One search/replace unit, in order of appearance in the edit text."""

    index: int
    search_text: str
    replace_text: str


class LineKind(str, Enum):
    CONTEXT = "context"
    ADD = "add"
    REMOVE = "remove"


@dataclass
class HunkLine:
    kind: LineKind
    text: str


@dataclass
class Hunk:
    """
    One region of change in a unified diff.

    `original_start`/`new_start` are 1-based as written in the header, or None
    for a bare `@@` separator that carries no line numbers.
    """

    index: int
    original_start: Optional[int]
    original_count: int
    new_start: Optional[int]
    new_count: int
    lines: List[HunkLine] = field(default_factory=list)
    header: str = "@@"
    old_missing_newline: bool = False
    new_missing_newline: bool = False

    @property
    def old_lines(self) -> List[str]:
        """Context + remove lines: what the hunk expects to find."""
        return [ln.text for ln in self.lines if ln.kind is not LineKind.ADD]

    @property
    def new_lines(self) -> List[str]:
        """Context + add lines: what the region looks like afterwards."""
        return [ln.text for ln in self.lines if ln.kind is not LineKind.REMOVE]

    @property
    def has_line_numbers(self) -> bool:
        return self.original_start is not None


@dataclass
class ParsedDiff:
    hunks: List[Hunk]
    warnings: List[str] = field(default_factory=list)
    old_path: Optional[str] = None
    new_path: Optional[str] = None
