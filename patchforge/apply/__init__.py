from .search_replace import apply_edit_blocks, apply_search_replace
from .unified import apply_hunks, apply_unified_diff

__all__ = [
    "apply_search_replace",
    "apply_edit_blocks",
    "apply_unified_diff",
    "apply_hunks",
]
