"""Pipeline states and the typed result of a run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from agentic_readiness.lint.classifier import LintSummary, ReadinessLevel


class State(Enum):
    """Pipeline states, in the only order they can be visited."""

    START = "start"
    ATTRIBUTE_ENSURED = "attribute_ensured"
    LINTED = "linted"
    CLASSIFIED = "classified"
    RESOURCE_REGISTERED = "resource_registered"
    ASSIGNED = "assigned"
    DONE = "done"
    FAILED = "failed"


class Stage(Enum):
    """The step that was running when a run failed."""

    ENSURE_ATTRIBUTE = "ensure_attribute"
    LINT_EXECUTION = "lint_execution"
    CLASSIFY = "classify"
    REGISTER = "register"
    ASSIGN = "assign"


@dataclass
class PipelineSuccess:
    level: ReadinessLevel
    api_id: str
    version_id: str
    summary: LintSummary
    states: list[State] = field(default_factory=list)

    ok = True

    def describe(self) -> str:
        return (
            f"{self.api_id}/{self.version_id}: {self.level.display_name} "
            f"({self.summary.errors} error(s), {self.summary.warnings} warning(s))"
        )


@dataclass
class PipelineFailure:
    stage: Stage
    cause: Exception
    states: list[State] = field(default_factory=list)

    ok = False

    def describe(self) -> str:
        return f"Failed at {self.stage.value}: {self.cause}"


PipelineResult = Union[PipelineSuccess, PipelineFailure]
