from .blocks import EditBlock, Hunk, HunkLine, LineKind, ParsedDiff
from .outcome import ApplyOutcome, FailedUnit, MatchCandidate, MatchRecord

__all__ = [
    "EditBlock",
    "Hunk",
    "HunkLine",
    "LineKind",
    "ParsedDiff",
    "ApplyOutcome",
    "FailedUnit",
    "MatchCandidate",
    "MatchRecord",
]
