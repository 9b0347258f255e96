from .apply import apply_edit_blocks, apply_hunks, apply_search_replace, apply_unified_diff
from .core import apply_auto, apply_with_format
from .errors import (
    AmbiguousMatchWarning,
    EditError,
    MatchNotFoundError,
    ParseError,
    UnknownFormatError,
)
from .extract import (
    DiffFormat,
    create_search_replace_diff,
    detect_format,
    parse_search_replace,
    parse_unified_diff,
    validate_search_replace_diff,
)
from .match import MatchingStrategy, find_best_match
from .models import (
    ApplyOutcome,
    EditBlock,
    FailedUnit,
    Hunk,
    HunkLine,
    LineKind,
    MatchCandidate,
    MatchRecord,
    ParsedDiff,
)
from .options import ApplyOptions
from .utils.text import cleanup_llm_output

__all__ = [
    "apply_auto",
    "apply_with_format",
    "apply_search_replace",
    "apply_edit_blocks",
    "apply_unified_diff",
    "apply_hunks",
    "detect_format",
    "parse_search_replace",
    "parse_unified_diff",
    "create_search_replace_diff",
    "validate_search_replace_diff",
    "find_best_match",
    "cleanup_llm_output",
    "ApplyOptions",
    "DiffFormat",
    "MatchingStrategy",
    "ApplyOutcome",
    "EditBlock",
    "FailedUnit",
    "Hunk",
    "HunkLine",
    "LineKind",
    "MatchCandidate",
    "MatchRecord",
    "ParsedDiff",
    "EditError",
    "ParseError",
    "UnknownFormatError",
    "MatchNotFoundError",
    "AmbiguousMatchWarning",
]
