"""
Opt-in logging for the edit engine.

Every public entry point takes ``logger=None, log=False`` and calls::

    log = resolve_logger(logger=logger, enabled=log, name=__name__)

and hands the resolved object down to the parsers, the match engine and the
appliers, so one call logs through one logger. Records go to:

- the caller's logger, when one is passed (a retry harness usually does);
- ``logging.getLogger(name)`` when ``log=True``, propagating to the root so
  pytest's caplog sees it;
- nowhere otherwise. Library code never prints.

Debug output that is costly to build (per-candidate listings, hunk dumps) is
guarded with ``log.isEnabledFor(logging.DEBUG)``; NoopLogger answers False.
"""
from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "patchforge"


class NoopLogger:
    """Stands in for a Logger when the caller did not opt in."""

    def isEnabledFor(self, level: int) -> bool:
        return False

    def debug(self, *args, **kwargs):  # type: ignore[no-untyped-def]
        pass

    info = warning = error = exception = critical = debug


def resolve_logger(
    logger: logging.Logger | None = None,
    *,
    enabled: bool = False,
    name: str | None = None,
    level: int = logging.INFO,
) -> logging.Logger | NoopLogger:
    """
    Pick the logger for one call: the passed one, a named stdlib logger when
    *enabled*, else a NoopLogger.

    A passed logger is used untouched (its level and handlers belong to the
    caller). The named logger gets *level* and keeps propagating to the root.
    """
    if logger is not None:
        return logger
    if not enabled:
        return NoopLogger()
    lg = logging.getLogger(name or ROOT_LOGGER_NAME)
    lg.setLevel(level)
    lg.propagate = True
    return lg
