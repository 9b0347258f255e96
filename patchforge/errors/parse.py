from __future__ import annotations

from .base import EditError


class ParseError(EditError):
    """
    Edit text is structurally invalid for its dialect.

    `block_index` is the 0-based index of the offending block or hunk, or None
    when the problem is not tied to a single unit (e.g. no units at all).
    """

    def __init__(self, message: str, block_index: int | None = None):
        self.message = message
        self.block_index = block_index
        if block_index is None:
            super().__init__(message)
        else:
            super().__init__(f"block {block_index + 1}: {message}")
