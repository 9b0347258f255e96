# patchforge/apply/unified.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from .._logging import resolve_logger
from ..errors import AmbiguousMatchWarning
from ..extract.unified import parse_unified_diff
from ..models.blocks import Hunk, LineKind, ParsedDiff
from ..models.outcome import ApplyOutcome, FailedUnit, MatchRecord
from ..options import ApplyOptions
from ..utils.text import detect_eol, normalize_eol, restore_eol, snippet
from ._common import first_nonblank, reindent_relative, strict_abort

__all__ = ["apply_unified_diff", "apply_hunks"]


@dataclass
class _Anchor:
    position: int
    level: str
    loose: bool
    confidence: float
    ambiguity: Optional[AmbiguousMatchWarning] = None


# ---------- core helpers ----------

def _eq_exact(a: str, b: str) -> bool:
    return a == b


def _eq_loose(a: str, b: str) -> bool:
    """Whitespace-insensitive equality for fuzzy/context matching."""
    return a == b or a.strip() == b.strip()


def _middle_out(expected: int, last: int) -> Iterator[int]:
    """Yield positions in [0, last] by distance from expected; the earlier one first on ties."""
    expected = max(0, min(expected, last))
    yield expected
    for d in range(1, max(expected, last - expected) + 1):
        if expected - d >= 0:
            yield expected - d
        if expected + d <= last:
            yield expected + d


def _mismatches(
    target: List[str],
    pos: int,
    hunk: Hunk,
    eq: Callable[[str, str], bool],
    fuzz: int,
) -> int:
    """
    Count mismatched context lines of the hunk's old side at *pos*, or -1 when a
    removed line differs or more than *fuzz* context lines differ.
    """
    bad = 0
    i = pos
    for ln in hunk.lines:
        if ln.kind is LineKind.ADD:
            continue
        if not eq(target[i], ln.text):
            if ln.kind is LineKind.REMOVE:
                return -1
            bad += 1
            if bad > fuzz:
                return -1
        i += 1
    return bad


def _expected_index(hunk: Hunk, offset: int, cursor: int) -> int:
    """Where the hunk should start in the current lines, from its header plus drift."""
    if not hunk.has_line_numbers:
        return cursor
    if hunk.original_start == 0 and hunk.original_count == 0 and hunk.new_start:
        # "-0,0 +c,d": pure insertion placed by its new-side line number.
        return hunk.new_start - 1
    declared = hunk.original_start - 1 if hunk.original_count > 0 else hunk.original_start
    return max(0, declared) + offset


def _find_anchor(target: List[str], hunk: Hunk, expected: int, max_fuzz: int, log) -> Optional[_Anchor]:
    """
    Locate the hunk's old side in *target*: exact lines, then whitespace-loose
    lines, then up to *max_fuzz* mismatched context lines. Each level scans
    middle-out from *expected*, so the declared position is tried first, then
    nearby lines, then the rest of the document. A loose match at the expected
    line itself is taken before any exact match elsewhere.
    """
    old = hunk.old_lines
    if not old:
        return _Anchor(max(0, min(expected, len(target))), "declared_position", False, 1.0)

    last = len(target) - len(old)
    if last < 0:
        return None
    context_count = sum(1 for ln in hunk.lines if ln.kind is LineKind.CONTEXT)

    # A whitespace-only drift at the declared line beats an exact copy elsewhere.
    declared = max(0, min(expected, last))
    drifted = _mismatches(target, declared, hunk, _eq_exact, 0) != 0
    if drifted and _mismatches(target, declared, hunk, _eq_loose, 0) == 0:
        log.debug(f"  anchored at declared line {declared + 1} via loose")
        return _Anchor(declared, "loose", True, 1.0)

    levels = [("exact", _eq_exact, 0), ("loose", _eq_loose, 0)]
    levels += [(f"fuzz_{f}", _eq_loose, f) for f in range(1, min(max_fuzz, context_count) + 1)]

    for level, eq, fuzz in levels:
        found = -1
        bad = 0
        for pos in _middle_out(expected, last):
            if found != -1 and abs(pos - expected) > abs(found - expected):
                break
            n_bad = _mismatches(target, pos, hunk, eq, fuzz)
            # At least one line must really match.
            if n_bad == -1 or n_bad >= len(old):
                continue
            if found == -1:
                found, bad = pos, n_bad
                continue
            # Same distance on the other side of expected: equally good.
            warning = AmbiguousMatchWarning(count=2, position=found, strategy=level, line=found + 1)
            log.debug(f"  {warning}")
            return _Anchor(found, level, level != "exact", 1.0 - bad / len(old), warning)
        if found != -1:
            log.debug(f"  anchored at line {found + 1} via {level} (expected {expected + 1})")
            if level == "exact" and found == max(0, min(expected, last)):
                level = "declared_position"
            return _Anchor(found, level, level not in ("exact", "declared_position"), 1.0 - bad / len(old))
    return None


def _surgical_rebuild(hunk: Hunk, matched: List[str], loose: bool) -> List[str]:
    """
    Rebuild the region *surgically*:
      - keep context lines exactly as they appear in the file
      - drop '-' lines
      - insert '+' lines (re-indented to match the file when the anchor was loose)
    """
    search_first = first_nonblank(hunk.old_lines)
    matched_first = first_nonblank(matched)
    out: List[str] = []
    seg_i = 0
    for ln in hunk.lines:
        if ln.kind is LineKind.CONTEXT:
            out.append(matched[seg_i])
            seg_i += 1
        elif ln.kind is LineKind.REMOVE:
            seg_i += 1
        elif loose and search_first:
            out.extend(reindent_relative([ln.text], search_first, matched_first))
        else:
            out.append(ln.text)
    return out


def _split_content(text: str) -> List[str]:
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


# ---------- public API ----------

def apply_hunks(
    content: str,
    parsed: ParsedDiff,
    options: ApplyOptions | None = None,
    *,
    logger=None,
    log: bool = False,
) -> ApplyOutcome:
    """
    Apply parsed hunks in order against the evolving content.

    Each hunk is expected at its declared original line plus the drift observed
    on earlier hunks (like patch(1)'s offset). When the old side is not there,
    the search widens middle-out over the whole document, first with exact
    lines, then whitespace-insensitive lines, then with up to `max_fuzz`
    mismatched context lines. Context lines keep the file's text.
    """
    options = ApplyOptions.coerce(options)
    log = resolve_logger(logger=logger, enabled=log, name=__name__)

    eol = detect_eol(content)
    text = normalize_eol(content)
    lines = _split_content(text)
    # Lines added to an empty document end with a newline unless a marker says otherwise.
    trailing_nl = text.endswith("\n") or not text

    outcome = ApplyOutcome(content=content, blocks_total=len(parsed.hunks), warnings=list(parsed.warnings))
    indices = [h.index for h in parsed.hunks]
    offset = 0
    cursor = 0

    for hunk in parsed.hunks:
        label = f"Hunk {hunk.index + 1}"
        old = hunk.old_lines
        expected = _expected_index(hunk, offset, cursor)
        log.debug(f"{label} {hunk.header}: {len(old)} old line(s), expected at line {expected + 1}")

        if all(ln.kind is LineKind.CONTEXT for ln in hunk.lines):
            anchor = None
            reason = "hunk has no added or removed lines"
        else:
            anchor = _find_anchor(lines, hunk, expected, options.max_fuzz, log)
            reason = (
                f"could not locate {len(old)} context/remove line(s) near line {expected + 1} "
                f"(max fuzz {options.max_fuzz})"
            )
        if anchor is None:
            failure = FailedUnit(index=hunk.index, reason=reason, snippet=snippet("\n".join(old)))
            message = f"{label} ({hunk.header}): {reason}"
            log.warning(message)
            if options.strict:
                return strict_abort(content, indices, hunk.index, failure, message, outcome.warnings, "hunk")
            outcome.failed.append(failure)
            outcome.errors.append(message)
            outcome.blocks_failed += 1
            continue

        pos = anchor.position
        if anchor.ambiguity is not None:
            outcome.warnings.append(f"{label}: {anchor.ambiguity}")
        if anchor.level.startswith("fuzz"):
            outcome.warnings.append(f"{label}: applied with {anchor.level.replace('_', ' ')} at line {pos + 1}")

        replacement = _surgical_rebuild(hunk, lines[pos:pos + len(old)], anchor.loose)
        lines[pos:pos + len(old)] = replacement
        outcome.blocks_applied += 1

        if pos + len(replacement) == len(lines):
            if hunk.new_missing_newline:
                trailing_nl = False
            elif hunk.old_missing_newline:
                trailing_nl = True

        if hunk.has_line_numbers:
            declared = _expected_index(hunk, 0, 0)
            offset = (pos - declared) + (len(replacement) - len(old))
        cursor = pos + len(replacement)

        if options.enable_telemetry:
            char_pos = sum(len(ln) + 1 for ln in lines[:pos])
            outcome.matches.append(
                MatchRecord(index=hunk.index, strategy=anchor.level, confidence=anchor.confidence, position=char_pos)
            )
            log.info(f"{label} applied via {anchor.level} (confidence={anchor.confidence:.3f}) at line {pos + 1}")

    if outcome.blocks_applied:
        new_text = "\n".join(lines) + ("\n" if trailing_nl and lines else "")
        outcome.content = restore_eol(new_text, eol)
    return outcome


def apply_unified_diff(
    content: str,
    edit_text: str,
    options: ApplyOptions | None = None,
    *,
    logger=None,
    log: bool = False,
) -> ApplyOutcome:
    """
    Parse a unified diff and apply its hunks to *content*.

    Raises:
        ParseError: if the diff is structurally invalid; no hunk is applied.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__)
    parsed = parse_unified_diff(edit_text, logger=log)
    return apply_hunks(content, parsed, options, logger=log)
