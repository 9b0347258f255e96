# patchforge/extract/search_replace.py
from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple, Union

from .._logging import resolve_logger
from ..errors import ParseError
from ..models.blocks import EditBlock
from ..utils.text import normalize_eol
from .detect import REPLACE_END_RE, SEARCH_START_RE, SEPARATOR_RE

SEARCH_MARKER = "<<<<<<< SEARCH"
SEPARATOR_MARKER = "======="
REPLACE_MARKER = ">>>>>>> REPLACE"

_OUTSIDE, _IN_SEARCH, _IN_REPLACE = range(3)


def parse_search_replace(edit_text: str, *, logger=None, log: bool = False) -> List[EditBlock]:
    """
    Parse SEARCH/REPLACE blocks:

        <<<<<<< SEARCH
        old content
        =======
        new content
        >>>>>>> REPLACE

    The text between markers is captured exactly, including the newline that
    ends its last line. Anything outside a block (prose, file names, code
    fences) is ignored.

    Raises:
        ParseError: for an unterminated or misordered block, or when the text
            holds no block at all. Nothing is returned in that case.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__)

    blocks: List[EditBlock] = []
    state = _OUTSIDE
    search: list[str] = []
    replace: list[str] = []

    for lineno, line in enumerate(normalize_eol(edit_text).splitlines(keepends=True), 1):
        bare = line.rstrip("\n")
        idx = len(blocks)
        if state == _OUTSIDE:
            if SEARCH_START_RE.fullmatch(bare):
                state = _IN_SEARCH
                search, replace = [], []
            continue

        if state == _IN_SEARCH:
            if SEPARATOR_RE.fullmatch(bare):
                state = _IN_REPLACE
            elif SEARCH_START_RE.fullmatch(bare):
                raise ParseError(f"missing '{SEPARATOR_MARKER}' separator before line {lineno}", idx)
            elif REPLACE_END_RE.fullmatch(bare):
                raise ParseError(f"'{REPLACE_MARKER}' on line {lineno} before the '{SEPARATOR_MARKER}' separator", idx)
            else:
                search.append(line)
            continue

        # _IN_REPLACE
        if REPLACE_END_RE.fullmatch(bare):
            blocks.append(EditBlock(index=idx, search_text="".join(search), replace_text="".join(replace)))
            log.debug(f"Parsed block #{idx + 1}: {len(search)} search line(s), {len(replace)} replace line(s)")
            state = _OUTSIDE
        elif SEARCH_START_RE.fullmatch(bare):
            raise ParseError(f"missing '{REPLACE_MARKER}' before line {lineno}", idx)
        else:
            replace.append(line)

    if state == _IN_SEARCH:
        raise ParseError(f"unterminated block: missing '{SEPARATOR_MARKER}' and '{REPLACE_MARKER}'", len(blocks))
    if state == _IN_REPLACE:
        raise ParseError(f"unterminated block: missing '{REPLACE_MARKER}'", len(blocks))
    if not blocks:
        raise ParseError("no SEARCH/REPLACE blocks found")

    log.debug(f"Parsed {len(blocks)} SEARCH/REPLACE block(s)")
    return blocks


def create_search_replace_diff(
    blocks: Iterable[Union[EditBlock, Tuple[str, str], Sequence[str]]],
) -> str:
    """
    Serialize blocks (EditBlock instances or (search, replace) pairs) into
    SEARCH/REPLACE edit text. Sections that end with a newline read back verbatim
    through `parse_search_replace`; a missing final newline is added.
    """
    parts: list[str] = []
    for blk in blocks:
        if isinstance(blk, EditBlock):
            search, replace = blk.search_text, blk.replace_text
        else:
            search, replace = blk
        parts.append(SEARCH_MARKER + "\n")
        parts.append(_terminated(search))
        parts.append(SEPARATOR_MARKER + "\n")
        parts.append(_terminated(replace))
        parts.append(REPLACE_MARKER + "\n")
    return "".join(parts)


def _terminated(text: str) -> str:
    if not text or text.endswith("\n"):
        return text
    return text + "\n"


def validate_search_replace_diff(edit_text: str) -> List[str]:
    """Return a list of problems with *edit_text*; empty when it can be applied as-is."""
    try:
        blocks = parse_search_replace(edit_text)
    except ParseError as e:
        return [str(e)]

    problems: List[str] = []
    for blk in blocks:
        if not blk.search_text.strip():
            problems.append(f"block {blk.index + 1}: empty SEARCH section")
        elif blk.search_text == blk.replace_text:
            problems.append(f"block {blk.index + 1}: SEARCH and REPLACE sections are identical")
    return problems
