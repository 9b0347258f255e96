from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class MatchCandidate:
    """A located span of the current content; confidence is in [0, 1]."""

    position: int
    length: int
    strategy_used: str
    confidence: float

    @property
    def end(self) -> int:
        return self.position + self.length


@dataclass
class FailedUnit:
    """A block or hunk that could not be applied. `snippet` is diagnostic only."""

    index: int
    reason: str
    snippet: str = ""


@dataclass
class MatchRecord:
    """Telemetry row: which strategy placed an applied unit."""

    index: int
    strategy: str
    confidence: float
    position: int


@dataclass
class ApplyOutcome:
    """
    Result of applying one edit text to one document.

    Identical in shape for both dialects. `failed` holds one FailedUnit per
    failed unit; `matches` is only populated when telemetry is enabled.
    """

    content: str
    blocks_total: int = 0
    blocks_applied: int = 0
    blocks_failed: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    failed: List[FailedUnit] = field(default_factory=list)
    matches: List[MatchRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.blocks_failed == 0

    def to_dict(self) -> Dict[str, Any]:
        """Render the camelCase result shape consumed by external harnesses."""
        return {
            "content": self.content,
            "results": {
                "blocksTotal": self.blocks_total,
                "blocksApplied": self.blocks_applied,
                "blocksFailed": self.blocks_failed,
                "errors": list(self.errors),
                "warnings": list(self.warnings),
            },
            "failedBlocks": [
                {"index": f.index, "reason": f.reason, "snippet": f.snippet}
                for f in self.failed
            ],
        }
