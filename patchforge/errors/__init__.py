from .base import EditError
from .format import UnknownFormatError
from .match import AmbiguousMatchWarning, MatchNotFoundError
from .parse import ParseError

__all__ = [
    "EditError",
    "ParseError",
    "UnknownFormatError",
    "MatchNotFoundError",
    "AmbiguousMatchWarning",
]
