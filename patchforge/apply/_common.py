# patchforge/apply/_common.py
from __future__ import annotations

import re
from typing import List, Sequence

from ..models.outcome import ApplyOutcome, FailedUnit

_LEADING_WS_RE = re.compile(r"^[\t ]*")


def _leading_ws(s: str) -> str:
    """Return the exact leading whitespace (tabs/spaces)."""
    m = _LEADING_WS_RE.match(s)
    return m.group(0) if m else ""


def first_nonblank(lines: Sequence[str]) -> str:
    for ln in lines:
        if ln.strip():
            return ln
    return ""


def reindent_relative(new_lines: List[str], search_first: str, matched_first: str) -> List[str]:
    """
    Adjust indentation of replacement lines so that the indentation of *search_first*
    is replaced by the indentation found at *matched_first*.

    The patch's base indentation unit is swapped for the target's, which also
    translates indentation style (e.g. 4 spaces -> tab). Blank lines stay blank.
    """
    if not new_lines:
        return new_lines
    ref_in = _leading_ws(search_first)
    ref_out = _leading_ws(matched_first)
    if ref_in == ref_out:
        return new_lines

    # Without a base indent in the patch there is nothing to swap; prepend the target's.
    if not ref_in:
        return [ref_out + ln if ln.strip() else ln for ln in new_lines]

    adjusted: List[str] = []
    for ln in new_lines:
        if not ln.strip():
            adjusted.append(ln)
            continue
        ws = _leading_ws(ln)
        body = ln[len(ws):]
        if ws.startswith(ref_in):
            ws = ref_out + ws[len(ref_in):]
        adjusted.append(ws + body)
    return adjusted


def strict_abort(
    original: str,
    indices: Sequence[int],
    failed_at: int,
    failure: FailedUnit,
    message: str,
    warnings: List[str],
    unit: str,
) -> ApplyOutcome:
    """
    Build the all-or-nothing outcome of a strict call that hit a failed unit:
    the original content untouched and every unit counted as failed.
    """
    failed: List[FailedUnit] = []
    rolled_back = 0
    for i in indices:
        if i == failed_at:
            failed.append(failure)
        elif i < failed_at:
            rolled_back += 1
            failed.append(FailedUnit(i, f"rolled back: strict mode aborted at {unit} {failed_at + 1}"))
        else:
            failed.append(FailedUnit(i, f"not attempted: strict mode aborted at {unit} {failed_at + 1}"))
    total = len(indices)
    return ApplyOutcome(
        content=original,
        blocks_total=total,
        blocks_applied=0,
        blocks_failed=total,
        errors=[
            message,
            f"Strict mode: aborted at {unit} {failed_at + 1}; {rolled_back} applied {unit}(s) rolled back, "
            f"content left unchanged",
        ],
        warnings=list(warnings),
        failed=failed,
    )
