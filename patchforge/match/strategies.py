# patchforge/match/strategies.py
"""
Matching strategies for locating a search text inside the current content.

Each strategy is a pure function ``(content, search_text, threshold) ->
list[MatchCandidate]`` over LF-normalized text. STRATEGIES maps the tag to the
function; the engine walks them in the configured order.

Line-based strategies compare windows of whole lines. Their candidates start at
the beginning of the first line and include the final newline only when the
search text ends with one, so splicing a replacement keeps line structure.
"""
from __future__ import annotations

import difflib
import re
import textwrap
from enum import Enum
from typing import Callable, Dict, List, Tuple

from ..models.outcome import MatchCandidate


class MatchingStrategy(str, Enum):
    EXACT = "exact"
    LINE_TRIMMED = "line_trimmed"
    WHITESPACE_NORMALIZED = "whitespace_normalized"
    INDENTATION_AGNOSTIC = "indentation_agnostic"
    FUZZY = "fuzzy"

    @classmethod
    def coerce(cls, value: "MatchingStrategy | str") -> "MatchingStrategy":
        """Accept a member, its value or its name ('LINE_TRIMMED', 'line-trimmed')."""
        if isinstance(value, cls):
            return value
        key = re.sub(r"(?<=[a-z])(?=[A-Z])", "_", str(value)).strip().lower().replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"unknown matching strategy: {value!r}") from None


# Strategies whose candidates align on line boundaries (replacement may be re-indented).
LINE_BASED = frozenset({
    MatchingStrategy.LINE_TRIMMED,
    MatchingStrategy.INDENTATION_AGNOSTIC,
    MatchingStrategy.FUZZY,
})


# ---------- core helpers ----------

def _split_lines(text: str) -> Tuple[List[str], List[Tuple[int, int]]]:
    """Split LF text into lines and their (start, end) offsets, end excluding the LF."""
    lines: List[str] = []
    spans: List[Tuple[int, int]] = []
    pos = 0
    for ln in text.split("\n"):
        lines.append(ln)
        spans.append((pos, pos + len(ln)))
        pos += len(ln) + 1
    if text.endswith("\n"):
        lines.pop()
        spans.pop()
    return lines, spans


def _needle_lines(search_text: str) -> Tuple[List[str], bool]:
    """Return the search text's lines and whether it ends with a newline."""
    ends_nl = search_text.endswith("\n")
    body = search_text[:-1] if ends_nl else search_text
    return body.split("\n"), ends_nl


def _window_candidate(
    content: str,
    spans: List[Tuple[int, int]],
    start_line: int,
    size: int,
    with_newline: bool,
    strategy: MatchingStrategy,
    confidence: float,
) -> MatchCandidate:
    start = spans[start_line][0]
    end = spans[start_line + size - 1][1]
    if with_newline and end < len(content):
        end += 1
    return MatchCandidate(position=start, length=end - start, strategy_used=strategy.value, confidence=confidence)


def _normalize_quotes(s: str) -> str:
    """
    Normalize a few common Unicode quotes to ASCII to reduce spurious mismatches.
    """
    tbl = {
        "‘": "'", "’": "'", "‛": "'",
        "“": '"', "”": '"',
    }
    return "".join(tbl.get(ch, ch) for ch in s)


def _line_windows(
    content: str,
    search_text: str,
    normalize: Callable[[List[str]], List[str]],
    strategy: MatchingStrategy,
) -> List[MatchCandidate]:
    lines, spans = _split_lines(content)
    needle, ends_nl = _needle_lines(search_text)
    want = normalize(needle)
    k = len(want)
    first = want[0].strip()
    out: List[MatchCandidate] = []
    for i in range(len(lines) - k + 1):
        # Cheap first-line filter before normalizing the whole window.
        if lines[i].strip() != first:
            continue
        if normalize(lines[i:i + k]) == want:
            out.append(_window_candidate(content, spans, i, k, ends_nl, strategy, 1.0))
    return out


# ---------- strategies ----------

def match_exact(content: str, search_text: str, threshold: float = 1.0) -> List[MatchCandidate]:
    """Every literal occurrence of the search text (overlapping starts allowed)."""
    out: List[MatchCandidate] = []
    pos = content.find(search_text)
    while pos != -1:
        out.append(MatchCandidate(pos, len(search_text), MatchingStrategy.EXACT.value, 1.0))
        pos = content.find(search_text, pos + 1)
    return out


def match_line_trimmed(content: str, search_text: str, threshold: float = 1.0) -> List[MatchCandidate]:
    """Line windows equal after stripping leading/trailing whitespace per line."""
    return _line_windows(
        content, search_text, lambda ls: [x.strip() for x in ls], MatchingStrategy.LINE_TRIMMED
    )


def match_whitespace_normalized(content: str, search_text: str, threshold: float = 1.0) -> List[MatchCandidate]:
    """
    Token stream match where any run of whitespace equals any other run.

    Leading indentation of the search text is absorbed into the span, together
    with the preceding line break when the search text starts with a blank
    line. Trailing blanks are absorbed only up to the end of the line, plus that
    newline when the search text ends with one; a match ending mid-line keeps
    the rest of the line intact.
    """
    tokens = search_text.split()
    if not tokens:
        return []
    pattern = r"\s+".join(re.escape(t) for t in tokens)
    lead = search_text[: len(search_text) - len(search_text.lstrip())]
    trail = search_text[len(search_text.rstrip()):]
    if "\n" in lead:
        pattern = r"(?:^|\n)[ \t]*" + pattern
    elif lead:
        pattern = r"[ \t]*" + pattern
    if "\n" in trail:
        pattern += r"(?:[ \t]*(?:\n|\Z))?"
    elif trail:
        pattern += r"(?:[ \t]*(?=\n|\Z))?"
    return [
        MatchCandidate(m.start(), m.end() - m.start(), MatchingStrategy.WHITESPACE_NORMALIZED.value, 1.0)
        for m in re.finditer(pattern, content)
    ]


def _dedent_lines(lines: List[str]) -> List[str]:
    return textwrap.dedent("\n".join(lines)).split("\n")


def match_indentation_agnostic(content: str, search_text: str, threshold: float = 1.0) -> List[MatchCandidate]:
    """Line windows equal once the common indentation is removed from both sides."""
    return _line_windows(content, search_text, _dedent_lines, MatchingStrategy.INDENTATION_AGNOSTIC)


def match_fuzzy(content: str, search_text: str, threshold: float = 0.8) -> List[MatchCandidate]:
    """
    Sliding windows of the search text's line count scored with
    difflib.SequenceMatcher over stripped, quote-normalized lines.
    Windows scoring below *threshold* are discarded.
    """
    lines, spans = _split_lines(content)
    needle, ends_nl = _needle_lines(search_text)
    k = len(needle)
    if k > len(lines):
        return []

    have = [_normalize_quotes(x.strip()) for x in lines]
    target = "\n".join(_normalize_quotes(x.strip()) for x in needle)

    # seq2 is cached by SequenceMatcher, so the fixed needle goes there.
    sm = difflib.SequenceMatcher(None, autojunk=False)
    sm.set_seq2(target)

    out: List[MatchCandidate] = []
    for i in range(len(lines) - k + 1):
        sm.set_seq1("\n".join(have[i:i + k]))
        if sm.real_quick_ratio() < threshold or sm.quick_ratio() < threshold:
            continue
        ratio = sm.ratio()
        if ratio >= threshold:
            out.append(_window_candidate(content, spans, i, k, ends_nl, MatchingStrategy.FUZZY, ratio))
    return out


StrategyFn = Callable[[str, str, float], List[MatchCandidate]]

STRATEGIES: Dict[MatchingStrategy, StrategyFn] = {
    MatchingStrategy.EXACT: match_exact,
    MatchingStrategy.LINE_TRIMMED: match_line_trimmed,
    MatchingStrategy.WHITESPACE_NORMALIZED: match_whitespace_normalized,
    MatchingStrategy.INDENTATION_AGNOSTIC: match_indentation_agnostic,
    MatchingStrategy.FUZZY: match_fuzzy,
}

DEFAULT_STRATEGIES: Tuple[MatchingStrategy, ...] = tuple(STRATEGIES)
