# patchforge/options.py
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Tuple

from .match.engine import DEFAULT_FUZZY_THRESHOLD
from .match.strategies import DEFAULT_STRATEGIES, MatchingStrategy

DEFAULT_MAX_FUZZ = 2

# camelCase keys used by callers that forward JSON options.
_OPTION_ALIASES = {
    "enableTelemetry": "enable_telemetry",
    "matchingStrategies": "matching_strategies",
    "fuzzyThreshold": "fuzzy_threshold",
    "maxFuzz": "max_fuzz",
}


@dataclass(frozen=True)
class ApplyOptions:
    """
    Per-call settings for applying an edit text.

    strict: abort on the first failed unit and return the content unmodified.
    enable_telemetry: record which strategy placed each applied unit.
    matching_strategies: search/replace strategy chain, tried in order.
    fuzzy_threshold: minimum similarity accepted by the fuzzy strategy.
    max_fuzz: unified hunks may have this many mismatched context lines.
    """

    strict: bool = False
    enable_telemetry: bool = False
    matching_strategies: Tuple[MatchingStrategy, ...] = DEFAULT_STRATEGIES
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD
    max_fuzz: int = DEFAULT_MAX_FUZZ

    def __post_init__(self) -> None:
        raw = self.matching_strategies
        if isinstance(raw, (str, MatchingStrategy)):
            raw = (raw,)
        strategies = tuple(MatchingStrategy.coerce(s) for s in raw)
        if not strategies:
            raise ValueError("matching_strategies must name at least one strategy")
        object.__setattr__(self, "matching_strategies", strategies)

        threshold = float(self.fuzzy_threshold)
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"fuzzy_threshold must be within [0, 1], got {self.fuzzy_threshold!r}")
        object.__setattr__(self, "fuzzy_threshold", threshold)

        if int(self.max_fuzz) < 0:
            raise ValueError(f"max_fuzz must be >= 0, got {self.max_fuzz!r}")
        object.__setattr__(self, "max_fuzz", int(self.max_fuzz))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ApplyOptions":
        """Build options from snake_case or camelCase keys; unknown keys raise ValueError."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"unknown option: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def coerce(cls, options: "ApplyOptions | Mapping[str, Any] | None") -> "ApplyOptions":
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, Mapping):
            return cls.from_mapping(options)
        raise TypeError(f"options must be ApplyOptions, a mapping or None, not {type(options).__name__}")
