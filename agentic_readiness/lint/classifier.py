"""Readiness classification.

Only errors and warnings move the level. Info and hint findings are
reported but never change the outcome.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Iterable

from agentic_readiness.errors import InvalidInput
from agentic_readiness.lint.findings import Finding, Severity


@total_ordering
class ReadinessLevel(Enum):
    """How ready an API is to be driven by an AI agent."""

    LOW = "readiness_low"  # Passive
    MEDIUM = "readiness_medium"  # Proactive
    HIGH = "readiness_high"  # Autonomous

    @property
    def id(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, ReadinessLevel):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def from_id(cls, value_id: str) -> "ReadinessLevel":
        """Resolve a persisted allowed-value id back to a level."""
        for level in cls:
            if level.value == value_id:
                return level
        raise InvalidInput(f"Unknown readiness level id: {value_id!r}")


_DISPLAY_NAMES = {
    ReadinessLevel.LOW: "Low (Passive)",
    ReadinessLevel.MEDIUM: "Medium (Proactive)",
    ReadinessLevel.HIGH: "High (Autonomous)",
}

_RANKS = {ReadinessLevel.LOW: 0, ReadinessLevel.MEDIUM: 1, ReadinessLevel.HIGH: 2}


@dataclass
class LintSummary:
    """Severity counts for one lint run and the level they produce."""

    level: ReadinessLevel
    counts: dict[Severity, int] = field(default_factory=dict)

    @property
    def errors(self) -> int:
        return self.counts.get(Severity.ERROR, 0)

    @property
    def warnings(self) -> int:
        return self.counts.get(Severity.WARNING, 0)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def summary(self) -> str:
        return (
            f"{self.errors} error(s), {self.warnings} warning(s) "
            f"-> {self.level.display_name}"
        )


def _count(findings: Iterable[Finding]) -> Counter:
    counts: Counter = Counter()
    for finding in findings:
        if not isinstance(finding.severity, Severity):
            raise InvalidInput(f"Unrecognised severity on finding: {finding.severity!r}")
        counts[finding.severity] += 1
    return counts


def _level_for(counts: Counter) -> ReadinessLevel:
    if counts[Severity.ERROR] > 0:
        return ReadinessLevel.LOW
    if counts[Severity.WARNING] > 0:
        return ReadinessLevel.MEDIUM
    return ReadinessLevel.HIGH


def classify(findings: Iterable[Finding]) -> ReadinessLevel:
    """Map lint findings to a readiness level.

    Any error gives LOW; otherwise any warning gives MEDIUM; otherwise
    HIGH, including for an empty sequence.

    Raises:
        InvalidInput: a finding carries something other than a Severity.
    """
    return _level_for(_count(findings))


def summarize(findings: Iterable[Finding]) -> LintSummary:
    """Classify and keep the per-severity counts for reporting."""
    counts = _count(findings)
    return LintSummary(level=_level_for(counts), counts=dict(counts))
