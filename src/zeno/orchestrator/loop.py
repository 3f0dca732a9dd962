"""Conversation orchestrator: the propose-confirm-execute loop.

Provides the Orchestrator class that handles one user message at a time:
stream the model's response, gate any requested action through the
operator, execute it, fold the outcome back into the transcript, and
repeat until the model answers in text.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from zeno.exceptions import OrchestratorError
from zeno.llm.errors import LLMClientError
from zeno.models.events import ActionRequest, StreamEnd, TextFragment
from zeno.models.transcript import ModelActionRequest, ModelText, ToolOutcome, UserText
from zeno.orchestrator.config import OrchestratorConfig, OrchestratorState
from zeno.orchestrator.models import StepResult, TurnResult
from zeno.prompts.explain import build_explanation_turn

if TYPE_CHECKING:
    from collections.abc import Sequence

    from zeno.llm.protocols import ModelTransport
    from zeno.models.transcript import Transcript
    from zeno.orchestrator.gate import ConfirmationGate
    from zeno.orchestrator.models import ConfirmationDecision
    from zeno.session import SessionContext
    from zeno.toolkit.dispatcher import ToolDispatcher
    from zeno.toolkit.models import ToolDefinition

logger = logging.getLogger(__name__)

DENIED_OUTCOME = "User denied execution of this action."

_PROTOCOL_ERRORS = (LLMClientError, httpx.HTTPError)


class TurnObserver:
    """Receives progress from the orchestrator. Every hook is a no-op here.

    The CLI subclasses this to render streaming text and notices; the
    orchestrator itself never writes to the terminal.
    """

    def on_stream_start(self, purpose: str) -> None:
        """A response started streaming. ``purpose`` is "reply" or "explanation"."""

    def on_text(self, text: str) -> None:
        """A text fragment arrived."""

    def on_stream_end(self, purpose: str) -> None:
        """The response finished streaming."""

    def on_step(self, step: StepResult) -> None:
        """An action request was decided (and executed, if approved)."""

    def on_notice(self, message: str) -> None:
        """The model produced no text; ``message`` says why."""

    def on_error(self, message: str) -> None:
        """A protocol error ended the request."""


class _Response:
    """What one streamed response contained."""

    def __init__(self) -> None:
        self.fragments: list[str] = []
        self.request: ActionRequest | None = None
        self.end: StreamEnd | None = None

    @property
    def text(self) -> str:
        return "".join(self.fragments)


class Orchestrator:
    """Drives the conversation for one session.

    The transcript is owned here: every turn is appended by this class,
    in order, and nothing is ever edited or removed.

    Usage::

        orch = Orchestrator(transcript, session, transport, gate, dispatcher)
        result = orch.send("create hello.txt saying hi")
        print(result.final_text)
    """

    def __init__(
        self,
        transcript: Transcript,
        session: SessionContext,
        transport: ModelTransport,
        gate: ConfirmationGate,
        dispatcher: ToolDispatcher,
        config: OrchestratorConfig | None = None,
        observer: TurnObserver | None = None,
    ) -> None:
        self._transcript = transcript
        self._session = session
        self._transport = transport
        self._gate = gate
        self._dispatcher = dispatcher
        self._config = config or OrchestratorConfig()
        self._observer = observer or TurnObserver()
        self._state = OrchestratorState.IDLE

    @property
    def state(self) -> OrchestratorState:
        """Return the current orchestrator state."""
        return self._state

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    def send(self, user_text: str) -> TurnResult:
        """Handle one user message through to the model's final answer.

        Protocol errors are reported in the result rather than raised.
        The user's turn stays in the transcript either way.

        Raises:
            OrchestratorError: If called while a message is still in flight.
        """
        if self._state != OrchestratorState.IDLE:
            raise OrchestratorError(
                f"Cannot send a message while the orchestrator is {self._state.value}."
            )
        self._transcript.append(UserText(text=user_text))
        steps: list[StepResult] = []
        rounds = 0
        try:
            while True:
                max_rounds = self._config.max_rounds
                if max_rounds is not None and rounds >= max_rounds:
                    notice = f"Stopped after {max_rounds} model round trips."
                    logger.warning(notice)
                    self._observer.on_notice(notice)
                    return TurnResult(steps=steps, notice=notice)
                rounds += 1

                try:
                    response = self._stream(self._dispatcher.definitions(), "reply")
                except _PROTOCOL_ERRORS as exc:
                    return TurnResult(steps=steps, error=self._report(exc))

                if response.request is not None:
                    # Text streamed alongside an action is shown but not recorded.
                    steps.append(self._handle_action(response.request, len(steps) + 1))
                    continue

                if response.text.strip():
                    self._transcript.append(ModelText(text=response.text))
                    return TurnResult(final_text=response.text, steps=steps)

                notice = response.end.reason if response.end else None
                if notice:
                    self._observer.on_notice(notice)
                return TurnResult(steps=steps, notice=notice)
        finally:
            self._state = OrchestratorState.IDLE

    # ------------------------------------------------------------------
    # Streaming
    # ------------------------------------------------------------------

    def _stream(self, tools: Sequence[ToolDefinition], purpose: str) -> _Response:
        self._state = OrchestratorState.STREAMING
        response = _Response()
        self._observer.on_stream_start(purpose)
        try:
            for event in self._transport.stream(self._transcript.turns, tools):
                if isinstance(event, TextFragment):
                    response.fragments.append(event.text)
                    self._observer.on_text(event.text)
                elif isinstance(event, ActionRequest):
                    if not tools:
                        logger.debug("Ignoring action %s requested without tools", event.name)
                    elif response.request is None:
                        response.request = event
                    else:
                        logger.warning(
                            "Ignoring extra action %s in the same response", event.name
                        )
                elif isinstance(event, StreamEnd):
                    response.end = event
        finally:
            self._observer.on_stream_end(purpose)
        return response

    def _report(self, exc: BaseException) -> str:
        message = str(exc) or type(exc).__name__
        logger.debug("Protocol error: %s", message, exc_info=True)
        self._observer.on_error(message)
        return message

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _handle_action(self, request: ActionRequest, step_num: int) -> StepResult:
        proposal = ModelActionRequest(name=request.name, arguments=request.arguments)
        self._transcript.append(proposal)

        self._state = OrchestratorState.AWAITING_CONFIRMATION
        decision: ConfirmationDecision = self._gate.review(
            request,
            self._session.active_directory,
            self._explain,
        )

        if decision.explanation_requested:
            # Keeps each outcome directly after its request.
            self._transcript.append(proposal.model_copy())

        result = None
        if decision.approved:
            self._state = OrchestratorState.EXECUTING
            logger.info("Executing %s", request.name)
            result = self._dispatcher.execute(request)
            outcome = result.text
        else:
            logger.info("Operator denied %s", request.name)
            outcome = DENIED_OUTCOME

        self._transcript.append(ToolOutcome(name=request.name, result=outcome))
        step = StepResult(
            step=step_num,
            request=request,
            decision=decision,
            result=result,
            outcome=outcome,
        )
        self._observer.on_step(step)
        return step

    def _explain(self, request: ActionRequest) -> str:
        """Ask the model to justify ``request``, with no actions on offer."""
        self._transcript.append(
            UserText(text=build_explanation_turn(request.name, request.arguments))
        )
        try:
            response = self._stream((), "explanation")
        except _PROTOCOL_ERRORS as exc:
            return f"Could not get an explanation: {self._report(exc)}"
        finally:
            self._state = OrchestratorState.AWAITING_CONFIRMATION

        if not response.text.strip():
            reason = response.end.reason if response.end else None
            notice = reason or "The model gave no explanation."
            self._observer.on_notice(notice)
            return notice
        self._transcript.append(ModelText(text=response.text))
        return response.text
