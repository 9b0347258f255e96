from .detect import DiffFormat, detect_format
from .search_replace import (
    create_search_replace_diff,
    parse_search_replace,
    validate_search_replace_diff,
)
from .unified import parse_unified_diff

__all__ = [
    "DiffFormat",
    "detect_format",
    "parse_search_replace",
    "create_search_replace_diff",
    "validate_search_replace_diff",
    "parse_unified_diff",
]
