from __future__ import annotations

from .base import EditError


class MatchNotFoundError(EditError):
    """
    No configured strategy could locate a unit's target text.

    Internal only: appliers convert it into a FailedUnit and an `errors` entry.
    """

    def __init__(self, message: str, strategies_tried: tuple = ()):
        self.strategies_tried = tuple(strategies_tried)
        super().__init__(message)


class AmbiguousMatchWarning(UserWarning):
    """Several candidates tied at the top score; the earliest one was used."""

    def __init__(self, count: int, position: int, strategy: str, line: int | None = None):
        self.count = count
        self.position = position
        self.strategy = strategy
        self.line = line
        where = f"line {line}" if line is not None else f"offset {position}"
        super().__init__(
            f"{count} equally good matches ({strategy}); using the earliest at {where}"
        )
