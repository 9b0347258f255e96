# patchforge/utils/__init__.py
from .text import cleanup_llm_output, detect_eol, normalize_eol, restore_eol, snippet

__all__ = [
    "cleanup_llm_output",
    "detect_eol",
    "normalize_eol",
    "restore_eol",
    "snippet",
]
