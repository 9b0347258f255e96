from .engine import MatchResult, find_best_match, locate
from .strategies import DEFAULT_STRATEGIES, STRATEGIES, MatchingStrategy

__all__ = [
    "MatchingStrategy",
    "MatchResult",
    "STRATEGIES",
    "DEFAULT_STRATEGIES",
    "find_best_match",
    "locate",
]
