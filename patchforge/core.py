# patchforge/core.py
from __future__ import annotations

from typing import Any, Mapping, Union

from ._logging import resolve_logger
from .apply import apply_search_replace, apply_unified_diff
from .extract.detect import DiffFormat, detect_format
from .models.outcome import ApplyOutcome
from .options import ApplyOptions
from .utils.text import cleanup_llm_output

OptionsLike = Union[ApplyOptions, Mapping[str, Any], None]

_APPLIERS = {
    DiffFormat.SEARCH_REPLACE: apply_search_replace,
    DiffFormat.UNIFIED: apply_unified_diff,
}


def apply_with_format(
    content: str,
    edit_text: str,
    format: DiffFormat | str,
    options: OptionsLike = None,
    *,
    logger=None,
    log: bool = False,
) -> ApplyOutcome:
    """
    Apply *edit_text* to *content* using an explicitly chosen dialect.

    `format` is a DiffFormat or its value ("search-replace", "unified").

    Raises:
        UnknownFormatError: for any other format.
        ParseError: if the edit text is structurally invalid for the dialect.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__)
    fmt = DiffFormat.coerce(format)
    opts = ApplyOptions.coerce(options)
    log.debug(f"Applying {fmt.value} edit (strict={opts.strict})")
    return _APPLIERS[fmt](content, edit_text, opts, logger=log)


def apply_auto(
    content: str,
    edit_text: str,
    options: OptionsLike = None,
    *,
    logger=None,
    log: bool = False,
) -> ApplyOutcome:
    """
    Detect the dialect of *edit_text* and apply it to *content*.

    Model artifacts (<think> sections, a fence around the whole edit) are
    removed before detection. The outcome has the same shape for both
    dialects; per-unit failures are reported in it, never raised.

    Raises:
        UnknownFormatError: if the edit text matches neither dialect.
        ParseError: if the edit text is structurally invalid for its dialect.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__)
    cleaned = cleanup_llm_output(edit_text)
    fmt = detect_format(cleaned)
    log.debug(f"Detected {fmt.value} edit text")
    return apply_with_format(content, cleaned, fmt, options, logger=log)
