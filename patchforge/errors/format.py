from __future__ import annotations

from .base import EditError


class UnknownFormatError(EditError):
    """Edit text matches neither dialect, or an explicit format is not supported."""

    def __init__(self, message: str = "Unknown diff format", format: str | None = None):
        self.format = format
        super().__init__(message)
