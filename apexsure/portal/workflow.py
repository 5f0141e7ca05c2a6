"""
Portal workflow - drives one application from the dashboard to a decision.

States: DASHBOARD -> WIZARD -> PROCESSING -> SUCCESS | REFERRED, with any
failure sending the user back to WIZARD with an error. ``reset`` is always
available and returns to DASHBOARD.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Union

from apexsure.integrations.clients.real_http.policy_submission import PolicySubmissionClient
from apexsure.integrations.contracts.interfaces import (
    ApplicationInput,
    IntegrationEndpoint,
    IntegrationModeKind,
    IntegrationModes,
)
from apexsure.integrations.contracts.submission import (
    ClassifiedError,
    ErrorKind,
    PolicyIssued,
    PolicyReferred,
    SubmissionFailed,
    SubmissionOutcome,
)
from apexsure.integrations.policy.error_classifier import classify
from apexsure.portal.progress import ProgressSimulator, ProgressStep
from apexsure.portal.traffic import TrafficLogEntry, TrafficRecorder
from apexsure.portal.validation import ApplicationValidationError, validate_application

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY = 0.5
DEFAULT_REFERRAL_REASON = "Your application requires manual review by our underwriting team."
DEFAULT_POLICY_ID = "POL-XXXXXX"


class WorkflowState(str, Enum):
    DASHBOARD = "dashboard"
    WIZARD = "wizard"
    PROCESSING = "processing"
    SUCCESS = "success"
    REFERRED = "referred"


class WorkflowStateError(RuntimeError):
    def __init__(self, action: str, state: WorkflowState) -> None:
        super().__init__(f"Cannot {action} while in state '{state.value}'")
        self.action = action
        self.state = state


def log_celebration(outcome: PolicyIssued) -> None:
    logger.info("🎉 Policy %s issued", outcome.policy_id or DEFAULT_POLICY_ID)


class PortalWorkflow:
    def __init__(
        self,
        modes: IntegrationModes,
        mode: IntegrationModeKind = IntegrationModeKind.DIRECT_INTEGRATOR,
        client: Optional[PolicySubmissionClient] = None,
        progress: Optional[ProgressSimulator] = None,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        on_success: Optional[Callable[[PolicyIssued], Any]] = log_celebration,
    ) -> None:
        self.modes = modes
        self.client = client or PolicySubmissionClient()
        self.recorder: TrafficRecorder = self.client.recorder
        self.progress_simulator = progress or ProgressSimulator()
        self.settle_delay = settle_delay
        self.on_success = on_success

        self._mode = IntegrationModeKind(mode)
        self._state = WorkflowState.DASHBOARD
        self._application: Optional[ApplicationInput] = None
        self._outcome: Optional[SubmissionOutcome] = None
        self._error: Optional[ClassifiedError] = None
        self._generation = 0
        self._progress_task: Optional[asyncio.Task] = None

    # -- observers --

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def mode(self) -> IntegrationModeKind:
        return self._mode

    @property
    def endpoint(self) -> IntegrationEndpoint:
        return self.modes.endpoint_for(self._mode)

    @property
    def application(self) -> Optional[ApplicationInput]:
        return self._application

    @property
    def progress(self) -> List[ProgressStep]:
        return self.progress_simulator.steps

    @property
    def outcome(self) -> Optional[SubmissionOutcome]:
        return self._outcome

    @property
    def error(self) -> Optional[ClassifiedError]:
        return self._error

    @property
    def last_traffic(self) -> Optional[TrafficLogEntry]:
        return self.recorder.last_entry()

    @property
    def referral_reason(self) -> Optional[str]:
        if isinstance(self._outcome, PolicyReferred):
            return self._outcome.reason or DEFAULT_REFERRAL_REASON
        return None

    # -- transitions --

    def start(self) -> None:
        if self._state is not WorkflowState.DASHBOARD:
            raise WorkflowStateError("start an application", self._state)
        self._state = WorkflowState.WIZARD

    def select_mode(self, mode: IntegrationModeKind) -> None:
        self._mode = IntegrationModeKind(mode)
        logger.info("Integration mode set to %s", self._mode.name)

    def reset(self) -> None:
        self._generation += 1
        self.progress_simulator.reset()
        if self._progress_task is not None and not self._progress_task.done():
            self._progress_task.cancel()
        self._progress_task = None
        self._state = WorkflowState.DASHBOARD
        self._application = None
        self._outcome = None
        self._error = None
        self.recorder.clear()

    async def submit(self, form_data: Union[ApplicationInput, Mapping[str, Any]]) -> Optional[SubmissionOutcome]:
        if self._state is not WorkflowState.WIZARD:
            raise WorkflowStateError("submit", self._state)

        try:
            application = validate_application(form_data)
        except ApplicationValidationError as e:
            logger.info("Application rejected before dispatch: %s", e.field_errors)
            self._error = ClassifiedError(kind=ErrorKind.VALIDATION, title=e.message, detail=e.detail)
            return None

        endpoint = self.endpoint
        generation = self._generation
        self._application = application
        self._error = None
        self._outcome = None
        self._state = WorkflowState.PROCESSING
        self._progress_task = asyncio.create_task(self.progress_simulator.run())

        try:
            outcome = await self.client.submit(application, endpoint)
        except Exception as e:
            logger.exception("Policy client raised instead of returning an outcome")
            raw_message = str(e) or type(e).__name__
            outcome = SubmissionFailed(
                error=classify(None, None, raw_message, mode=endpoint.kind, url=endpoint.base_url),
                raw_status=None,
            )
        if generation != self._generation:
            logger.info("Discarding outcome of a submission abandoned by reset")
            return outcome

        if isinstance(outcome, SubmissionFailed):
            self._finish_failed(outcome)
            return outcome

        await self._wait_for_progress(generation)
        if generation != self._generation:
            return outcome
        self.progress_simulator.complete_all()

        await asyncio.sleep(self.settle_delay)
        if generation != self._generation:
            return outcome

        self._outcome = outcome
        if isinstance(outcome, PolicyReferred):
            self._state = WorkflowState.REFERRED
        else:
            self._state = WorkflowState.SUCCESS
            self._celebrate(outcome)
        return outcome

    def _finish_failed(self, outcome: SubmissionFailed) -> None:
        self.progress_simulator.reset()
        if self._progress_task is not None:
            self._progress_task.cancel()
            self._progress_task = None
        self._outcome = outcome
        self._error = outcome.error
        self._state = WorkflowState.WIZARD

    async def _wait_for_progress(self, generation: int) -> None:
        task = self._progress_task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            # reset() cancelled the run; the caller checks the generation next
            if generation == self._generation:
                raise

    def _celebrate(self, outcome: PolicyIssued) -> None:
        if self.on_success is None:
            return
        try:
            self.on_success(outcome)
        except Exception:
            logger.exception("Success effect failed")
