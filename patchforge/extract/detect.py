# patchforge/extract/detect.py
from __future__ import annotations

import re
from enum import Enum

from ..errors import UnknownFormatError
from ..utils.text import normalize_eol

SEARCH_START_RE = re.compile(r"^<{5,9} SEARCH[ \t]*$", re.MULTILINE)
SEPARATOR_RE = re.compile(r"^={5,9}[ \t]*$", re.MULTILINE)
REPLACE_END_RE = re.compile(r"^>{5,9} REPLACE[ \t]*$", re.MULTILINE)

HUNK_HEADER_LINE_RE = re.compile(r"^@@", re.MULTILINE)
FILE_HEADER_LINE_RE = re.compile(r"^(?:--- |\+\+\+ |diff --git )", re.MULTILINE)


class DiffFormat(str, Enum):
    SEARCH_REPLACE = "search-replace"
    UNIFIED = "unified"

    @classmethod
    def coerce(cls, value: "DiffFormat | str") -> "DiffFormat":
        """Accept an enum member or its string value; raise UnknownFormatError otherwise."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower().replace("_", "-"))
        except ValueError:
            raise UnknownFormatError(f"Unknown diff format: {value}", format=str(value)) from None


def looks_like_search_replace(edit_text: str) -> bool:
    text = normalize_eol(edit_text)
    return bool(SEARCH_START_RE.search(text) and REPLACE_END_RE.search(text))


def looks_like_unified(edit_text: str) -> bool:
    text = normalize_eol(edit_text)
    return bool(HUNK_HEADER_LINE_RE.search(text) or FILE_HEADER_LINE_RE.search(text))


def detect_format(edit_text: str) -> DiffFormat:
    """
    Classify edit text as one of the two dialects.

    Search/replace wins whenever both its start and end markers are present, so
    a block whose body happens to contain diff-like lines is never routed to the
    unified applier.

    Raises:
        UnknownFormatError: if neither signature is present.
    """
    if looks_like_search_replace(edit_text):
        return DiffFormat.SEARCH_REPLACE
    if looks_like_unified(edit_text):
        return DiffFormat.UNIFIED
    raise UnknownFormatError("Unknown diff format: no SEARCH/REPLACE markers or unified diff headers found")
