# patchforge/apply/search_replace.py
from __future__ import annotations

from typing import List

from .._logging import resolve_logger
from ..errors import MatchNotFoundError
from ..extract.search_replace import parse_search_replace
from ..match.engine import locate
from ..match.strategies import LINE_BASED, MatchingStrategy
from ..models.blocks import EditBlock
from ..models.outcome import ApplyOutcome, FailedUnit, MatchRecord
from ..options import ApplyOptions
from ..utils.text import detect_eol, normalize_eol, restore_eol, snippet
from ._common import first_nonblank, reindent_relative, strict_abort

__all__ = ["apply_search_replace", "apply_edit_blocks"]


def _fit_replacement(replace: str, search: str, matched: str, strategy: str, at_line_start: bool) -> str:
    """
    Adapt the replacement to the span it lands on (indentation, edge newlines).

    Line-based matches always start a line; whitespace-normalized ones are
    re-indented too when the span starts a line.
    """
    if search.endswith("\n") and not matched.endswith("\n") and replace.endswith("\n"):
        # Matched the last line of a document that has no final newline, or
        # stopped mid-line: keep the rest of the line where it is.
        replace = replace[:-1]
    if search.startswith("\n") and not matched.startswith("\n") and replace.startswith("\n"):
        # Matched at the very start of the document: no line break to restore.
        replace = replace[1:]

    kind = MatchingStrategy(strategy)
    reindent = kind in LINE_BASED or (kind is MatchingStrategy.WHITESPACE_NORMALIZED and at_line_start)
    if not reindent or not replace:
        return replace

    ends_nl = replace.endswith("\n")
    body = replace[:-1] if ends_nl else replace
    lines = reindent_relative(
        body.split("\n"),
        first_nonblank(search.split("\n")),
        first_nonblank(matched.split("\n")),
    )
    return "\n".join(lines) + ("\n" if ends_nl else "")


def apply_edit_blocks(
    content: str,
    blocks: List[EditBlock],
    options: ApplyOptions | None = None,
    *,
    logger=None,
    log: bool = False,
) -> ApplyOutcome:
    """
    Apply parsed SEARCH/REPLACE blocks in order, each against the content
    produced by the blocks before it.

    Lenient mode applies whatever matches and records the rest. Strict mode
    returns the original content with every block counted as failed as soon as
    one block cannot be located.
    """
    options = ApplyOptions.coerce(options)
    log = resolve_logger(logger=logger, enabled=log, name=__name__)

    eol = detect_eol(content)
    current = normalize_eol(content)
    outcome = ApplyOutcome(content=content, blocks_total=len(blocks))
    indices = [blk.index for blk in blocks]

    for blk in blocks:
        search = normalize_eol(blk.search_text)
        replace = normalize_eol(blk.replace_text)
        label = f"Block {blk.index + 1}"

        try:
            result = locate(
                current,
                search,
                options.matching_strategies,
                options.fuzzy_threshold,
                logger=log,
            )
        except MatchNotFoundError as e:
            failure = FailedUnit(index=blk.index, reason=str(e), snippet=snippet(search))
            message = f"{label}: {e}: {snippet(search, 60)!r}"
            log.warning(message)
            if options.strict:
                return strict_abort(content, indices, blk.index, failure, message, outcome.warnings, "block")
            outcome.failed.append(failure)
            outcome.errors.append(message)
            outcome.blocks_failed += 1
            continue

        cand = result.candidate
        if result.ambiguity is not None:
            outcome.warnings.append(f"{label}: {result.ambiguity}")

        matched = current[cand.position:cand.end]
        at_line_start = cand.position == 0 or current[cand.position - 1] == "\n" or matched.startswith("\n")
        new_text = _fit_replacement(replace, search, matched, cand.strategy_used, at_line_start)
        current = current[:cand.position] + new_text + current[cand.end:]
        outcome.blocks_applied += 1

        if options.enable_telemetry:
            outcome.matches.append(
                MatchRecord(index=blk.index, strategy=cand.strategy_used, confidence=cand.confidence, position=cand.position)
            )
            log.info(f"{label} applied via {cand.strategy_used} (confidence={cand.confidence:.3f}) at offset {cand.position}")

    # Untouched content is returned as given, byte for byte.
    if outcome.blocks_applied:
        outcome.content = restore_eol(current, eol)
    return outcome


def apply_search_replace(
    content: str,
    edit_text: str,
    options: ApplyOptions | None = None,
    *,
    logger=None,
    log: bool = False,
) -> ApplyOutcome:
    """
    Parse SEARCH/REPLACE edit text and apply it to *content*.

    Raises:
        ParseError: if the edit text is structurally invalid; no block is applied.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__)
    blocks = parse_search_replace(edit_text, logger=log)
    return apply_edit_blocks(content, blocks, options, logger=log)
