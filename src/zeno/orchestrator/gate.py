"""Confirmation gate: the human decision between a proposed and an executed action.

The gate owns no side effects. How the proposal is presented, how the
operator is asked, and how the explanation is obtained are all injected.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from zeno.orchestrator.models import ConfirmationDecision, GateState

if TYPE_CHECKING:
    from collections.abc import Callable

    from zeno.models.events import ActionRequest

logger = logging.getLogger(__name__)

AUTO_APPROVED_ACTIONS = frozenset({"web_search"})

CONFIRM_PROMPT = "Confirm? (1: Yes, 2: No, 3: Explain action) "
CONFIRM_AFTER_EXPLAIN_PROMPT = "Confirm? (1: Yes, 2: No) "


def _ignore(*args: object) -> None:
    return None


class ConfirmationGate:
    """Asks the operator whether a proposed action may run.

    ``web_search`` is approved without asking. Any other action is shown
    via ``present`` and decided through ``prompt``:

    - ``1`` approves, ``2`` denies;
    - ``3`` (first round only) fetches an explanation, then asks again
      with ``1`` and ``2`` only;
    - anything else is reported through ``on_invalid`` and asked again;
    - closed input (EOF or interrupt) denies.

    Args:
        prompt: Reads one answer, given the prompt text.
        present: Shows the proposal, given the request and the working
            directory (None for actions that do not use one).
        on_invalid: Reports an unrecognized answer.
    """

    def __init__(
        self,
        prompt: Callable[[str], str],
        present: Callable[[ActionRequest, str | None], None] | None = None,
        on_invalid: Callable[[str], None] | None = None,
    ) -> None:
        self._prompt = prompt
        self._present = present or _ignore
        self._on_invalid = on_invalid or _ignore
        self.state: GateState | None = None

    def review(
        self,
        request: ActionRequest,
        working_directory: str | None,
        explain: Callable[[ActionRequest], str],
    ) -> ConfirmationDecision:
        """Decide on ``request``.

        Args:
            request: The proposed action.
            working_directory: Directory the action would run in.
            explain: Returns the model's explanation for ``request``.
        """
        if request.name in AUTO_APPROVED_ACTIONS:
            self.state = GateState.APPROVED
            logger.debug("Auto-approved %s", request.name)
            return ConfirmationDecision(approved=True)

        self.state = GateState.PROPOSED
        self._present(request, working_directory)

        explanation: str | None = None
        try:
            while True:
                explaining = self.state == GateState.EXPLAINING
                answer = self._prompt(
                    CONFIRM_AFTER_EXPLAIN_PROMPT if explaining else CONFIRM_PROMPT
                ).strip()

                if answer == "1":
                    return self._decide(True, explaining, explanation)
                if answer == "2":
                    return self._decide(False, explaining, explanation)
                if answer == "3" and not explaining:
                    self.state = GateState.EXPLAINING
                    explanation = explain(request)
                    continue

                valid = "1 or 2" if explaining else "1, 2, or 3"
                self._on_invalid(f"Invalid choice. Enter {valid}.")
        except (EOFError, KeyboardInterrupt):
            logger.info("Input closed while confirming %s; denying", request.name)
            return self._decide(False, self.state == GateState.EXPLAINING, explanation)

    def _decide(
        self, approved: bool, explained: bool, explanation: str | None
    ) -> ConfirmationDecision:
        self.state = GateState.APPROVED if approved else GateState.DENIED
        return ConfirmationDecision(
            approved=approved,
            explanation_requested=explained,
            explanation=explanation,
        )
