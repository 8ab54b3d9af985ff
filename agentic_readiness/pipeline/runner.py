"""Sequential runner for the readiness pipeline.

Start -> AttributeEnsured -> Linted -> Classified -> ResourceRegistered
-> Assigned -> Done, or Failed(stage, cause) from any step. A spec that
lints with errors is not a failure; it is classified LOW and recorded.
Only a linter that cannot run, or output it cannot parse (including an
unknown severity), aborts the lint step.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Protocol, Sequence

from agentic_readiness.errors import ReadinessError
from agentic_readiness.hub.models import (
    READINESS_ATTRIBUTE,
    AssignmentResult,
    AttributeDefinition,
    EnsureOutcome,
)
from agentic_readiness.hub.registration import RegistrationTarget
from agentic_readiness.lint.classifier import summarize
from agentic_readiness.lint.findings import Finding
from agentic_readiness.logger import get_logger
from agentic_readiness.pipeline.result import (
    PipelineFailure,
    PipelineResult,
    PipelineSuccess,
    Stage,
    State,
)

logger = get_logger(__name__)


class AttributeStore(Protocol):
    def ensure_attribute(self, definition: AttributeDefinition) -> EnsureOutcome: ...

    def assign_attribute(
        self, api_id: str, version_id: str, attribute_id: str, value_id: str
    ) -> AssignmentResult: ...


class FindingSource(Protocol):
    def lint(self, spec_path: str | Path) -> Sequence[Finding]: ...


class Registrar(Protocol):
    def register(self, target: RegistrationTarget) -> tuple[str, str]: ...


class _StageFailed(Exception):
    def __init__(self, stage: Stage, cause: Exception):
        super().__init__(str(cause))
        self.stage = stage
        self.cause = cause


class ReadinessPipeline:
    """Runs one classification for one spec and one API version.

    Args:
        store: Attribute store with ``ensure_attribute`` and
            ``assign_attribute`` (normally an ApiHubClient).
        finding_source: Object with ``lint(spec_path) -> list[Finding]``.
        registrar: Object with ``register(target) -> (api_id, version_id)``.
        attribute: The attribute definition to ensure and assign.
    """

    def __init__(
        self,
        store: AttributeStore,
        finding_source: FindingSource,
        registrar: Registrar,
        attribute: AttributeDefinition = READINESS_ATTRIBUTE,
    ):
        self.store = store
        self.finding_source = finding_source
        self.registrar = registrar
        self.attribute = attribute

    def run(self, spec_path: str | Path, target: RegistrationTarget) -> PipelineResult:
        states = [State.START]

        def advance(state: State) -> None:
            states.append(state)
            logger.debug("Pipeline state: %s", state.value)

        try:
            outcome = self._step(Stage.ENSURE_ATTRIBUTE, self.store.ensure_attribute, self.attribute)
            logger.info("Attribute %s: %s", self.attribute.attribute_id, outcome.value)
            advance(State.ATTRIBUTE_ENSURED)

            findings = self._step(Stage.LINT_EXECUTION, self.finding_source.lint, spec_path)
            advance(State.LINTED)

            summary = self._step(Stage.CLASSIFY, summarize, findings)
            logger.info("Lint results: %s", summary.summary())
            advance(State.CLASSIFIED)

            api_id, version_id = self._step(Stage.REGISTER, self.registrar.register, target)
            advance(State.RESOURCE_REGISTERED)

            self._step(
                Stage.ASSIGN,
                self.store.assign_attribute,
                api_id,
                version_id,
                self.attribute.attribute_id,
                summary.level.id,
            )
            advance(State.ASSIGNED)
        except _StageFailed as failed:
            states.append(State.FAILED)
            logger.error("Pipeline failed at %s: %s", failed.stage.value, failed.cause)
            return PipelineFailure(stage=failed.stage, cause=failed.cause, states=states)

        advance(State.DONE)
        return PipelineSuccess(
            level=summary.level,
            api_id=api_id,
            version_id=version_id,
            summary=summary,
            states=states,
        )

    @staticmethod
    def _step(stage: Stage, func: Callable, *args):
        try:
            return func(*args)
        except ReadinessError as exc:
            raise _StageFailed(stage, exc) from exc
