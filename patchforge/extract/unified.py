# patchforge/extract/unified.py
from __future__ import annotations

import re
from typing import List, Optional

from .._logging import resolve_logger
from ..errors import ParseError
from ..models.blocks import Hunk, HunkLine, LineKind, ParsedDiff
from ..utils.text import normalize_eol

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$")
BARE_HUNK_RE = re.compile(r"^@@(?:\s*@@)?\s*$")
NO_NEWLINE_MARKER = "\\ No newline at end of file"

_TAGS = {" ": LineKind.CONTEXT, "+": LineKind.ADD, "-": LineKind.REMOVE}


def _header_path(line: str) -> Optional[str]:
    """Path named by a '--- ' / '+++ ' header, without a/ b/ prefixes; None for /dev/null."""
    path = line[4:].split("\t")[0].strip()
    if not path or path == "/dev/null":
        return None
    if path.startswith(("a/", "b/")):
        path = path[2:]
    return path.replace("\\", "/")


def _is_file_header(lines: List[str], i: int) -> bool:
    """A '--- ' line only starts a file header when '+++ ' follows it."""
    return lines[i].startswith("--- ") and i + 1 < len(lines) and lines[i + 1].startswith("+++ ")


def _changes_follow(lines: List[str], i: int) -> bool:
    """True when a '+'/'-' line comes after line *i* before the next hunk or file header."""
    for j in range(i + 1, len(lines)):
        line = lines[j]
        if line.startswith(("@@", "diff --git ")) or _is_file_header(lines, j):
            return False
        if line[:1] in ("+", "-"):
            return True
    return False


def _keeps_unprefixed(hunk: Hunk, lines: List[str], i: int) -> bool:
    """
    Models often drop the leading space of context lines. Such a line stays in
    the hunk while the header counts are not met yet (numbered hunks) or while
    more changes follow (bare hunks); otherwise it ends the hunk.
    """
    if hunk.has_line_numbers:
        return len(hunk.old_lines) < hunk.original_count or len(hunk.new_lines) < hunk.new_count
    return _changes_follow(lines, i)


def _finish_hunk(hunk: Hunk, warnings: List[str]) -> None:
    # Trailing raw blank lines are padding unless the header count needs them.
    while hunk.lines and hunk.lines[-1].kind is LineKind.CONTEXT and hunk.lines[-1].text == "":
        if hunk.has_line_numbers and len(hunk.old_lines) <= hunk.original_count:
            break
        hunk.lines.pop()
    if not hunk.lines:
        raise ParseError("hunk has no body lines", hunk.index)

    if not hunk.has_line_numbers:
        hunk.original_count = len(hunk.old_lines)
        hunk.new_count = len(hunk.new_lines)
        return

    old_seen = len(hunk.old_lines)
    new_seen = len(hunk.new_lines)
    if old_seen != hunk.original_count:
        warnings.append(
            f"Hunk {hunk.index + 1} ({hunk.header}): header declares {hunk.original_count} original "
            f"line(s) but body has {old_seen} context/remove line(s)"
        )
    if new_seen != hunk.new_count:
        warnings.append(
            f"Hunk {hunk.index + 1} ({hunk.header}): header declares {hunk.new_count} new "
            f"line(s) but body has {new_seen} context/add line(s)"
        )


def parse_unified_diff(edit_text: str, *, logger=None, log: bool = False) -> ParsedDiff:
    """
    Parse a unified diff into hunks.

    Accepts `diff --git`/`index`/`---`/`+++` headers, standard
    `@@ -a,b +c,d @@` hunk headers (omitted counts default to 1) and bare `@@`
    separators without line numbers. Raw empty lines inside a hunk are treated
    as empty context lines, and so are unprefixed lines while the hunk still
    expects body lines. Header/body count mismatches are recorded as
    warnings, not errors.

    Raises:
        ParseError: on a malformed `@@` header, an empty hunk, or no hunks.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__)

    text = normalize_eol(edit_text)
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    hunks: List[Hunk] = []
    warnings: List[str] = []
    old_path: Optional[str] = None
    new_path: Optional[str] = None
    targets: List[str] = []
    cur: Optional[Hunk] = None

    def close() -> None:
        nonlocal cur
        if cur is not None:
            _finish_hunk(cur, warnings)
            hunks.append(cur)
            cur = None

    i = 0
    while i < len(lines):
        line = lines[i]

        if line.startswith("@@"):
            close()
            idx = len(hunks)
            m = HUNK_HEADER_RE.match(line.rstrip())
            if m:
                cur = Hunk(
                    index=idx,
                    original_start=int(m.group(1)),
                    original_count=int(m.group(2) or "1"),
                    new_start=int(m.group(3)),
                    new_count=int(m.group(4) or "1"),
                    header=line[: line.index("@@", 2) + 2],
                )
            elif BARE_HUNK_RE.match(line):
                cur = Hunk(index=idx, original_start=None, original_count=0, new_start=None, new_count=0)
            else:
                raise ParseError(f"malformed hunk header: {line!r}", idx)
            i += 1
            continue

        if line.startswith("diff --git ") or _is_file_header(lines, i):
            close()
            if line.startswith("--- "):
                old_path = _header_path(line)
                new_path = _header_path(lines[i + 1])
                target = new_path or old_path
                if target and target not in targets:
                    targets.append(target)
                i += 2
                continue
            i += 1
            continue

        if cur is not None:
            if line == "":
                cur.lines.append(HunkLine(LineKind.CONTEXT, ""))
            elif line[0] in _TAGS:
                cur.lines.append(HunkLine(_TAGS[line[0]], line[1:]))
            elif line.startswith("\\"):
                # "\ No newline at end of file" applies to the side of the preceding line.
                if cur.lines:
                    prev = cur.lines[-1].kind
                    if prev is not LineKind.ADD:
                        cur.old_missing_newline = True
                    if prev is not LineKind.REMOVE:
                        cur.new_missing_newline = True
            elif _keeps_unprefixed(cur, lines, i):
                log.debug(f"Hunk {cur.index + 1}: unprefixed line {i + 1} read as context")
                cur.lines.append(HunkLine(LineKind.CONTEXT, line))
            else:
                close()
        i += 1

    close()

    if not hunks:
        raise ParseError("unified diff contains no hunks")
    if len(targets) > 1:
        warnings.append(
            f"Diff names {len(targets)} files ({', '.join(targets)}); all hunks are applied to the given content"
        )

    log.debug(f"Parsed {len(hunks)} hunk(s) with {len(warnings)} warning(s)")
    return ParsedDiff(hunks=hunks, warnings=warnings, old_path=old_path, new_path=new_path)
