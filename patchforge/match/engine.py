# patchforge/match/engine.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .._logging import resolve_logger
from ..errors import AmbiguousMatchWarning, MatchNotFoundError
from ..models.outcome import MatchCandidate
from .strategies import DEFAULT_STRATEGIES, STRATEGIES, MatchingStrategy

DEFAULT_FUZZY_THRESHOLD = 0.8


@dataclass
class MatchResult:
    candidate: MatchCandidate
    ambiguity: Optional[AmbiguousMatchWarning] = None


def _line_of(content: str, position: int) -> int:
    """1-based line number of a character offset."""
    return content.count("\n", 0, position) + 1


def find_best_match(
    content: str,
    search_text: str,
    strategies: Iterable[MatchingStrategy | str] = DEFAULT_STRATEGIES,
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
    *,
    logger=None,
    log: bool = False,
) -> MatchResult | None:
    """
    Locate *search_text* in *content* (both LF-normalized).

    Strategies are tried in order; the first one yielding candidates decides.
    Among its candidates the highest confidence wins and ties go to the
    earliest position, reported through an AmbiguousMatchWarning.

    A blank search text only matches a blank document, covering all of it.

    Returns None when no strategy finds a candidate.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__)

    if not search_text.strip():
        if content.strip():
            log.debug("Blank search text against non-blank content: no match")
            return None
        return MatchResult(MatchCandidate(0, len(content), MatchingStrategy.EXACT.value, 1.0))

    for raw in strategies:
        strategy = MatchingStrategy.coerce(raw)
        candidates = STRATEGIES[strategy](content, search_text, fuzzy_threshold)
        if log.isEnabledFor(logging.DEBUG):
            listing = ", ".join(f"{c.position}:{c.confidence:.2f}" for c in candidates[:10])
            log.debug(f"Strategy {strategy.value}: {len(candidates)} candidate(s) [{listing}]")
        if not candidates:
            continue

        top = max(c.confidence for c in candidates)
        best = [c for c in candidates if c.confidence == top]
        chosen = min(best, key=lambda c: c.position)
        ambiguity = None
        if len(best) > 1:
            ambiguity = AmbiguousMatchWarning(
                count=len(best),
                position=chosen.position,
                strategy=strategy.value,
                line=_line_of(content, chosen.position),
            )
            log.debug(f"  {ambiguity}")
        log.debug(f"  chose offset {chosen.position} (confidence={chosen.confidence:.3f})")
        return MatchResult(chosen, ambiguity)

    return None


def locate(
    content: str,
    search_text: str,
    strategies: Iterable[MatchingStrategy | str] = DEFAULT_STRATEGIES,
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
    *,
    logger=None,
    log: bool = False,
) -> MatchResult:
    """
    Same as find_best_match but raises instead of returning None.

    Raises:
        MatchNotFoundError: if no configured strategy locates the search text.
    """
    strategies = tuple(MatchingStrategy.coerce(s) for s in strategies)
    result = find_best_match(content, search_text, strategies, fuzzy_threshold, logger=logger, log=log)
    if result is None:
        tried = ", ".join(s.value for s in strategies)
        raise MatchNotFoundError(f"search text not found (tried: {tried})", strategies_tried=strategies)
    return result
