"""
Pagination / retry engine

A single "repeat until done" driver used by every multi-round-trip operation
(list tables, scan, batch get, table status polling). Each operation supplies
three small functions:

- step(state)          -> OperationRequest built from the current payload
- handle(state, data)  -> invokes callbacks, folds the continuation marker
                          into state.payload
- is_complete(state)   -> True when the operation has reached its end

Round trips are strictly sequential: a request is only built after the
previous response has been fully handled. The loop is unbounded unless the
RetryPolicy sets ``max_rounds``.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from ..config import RetryPolicy
from ..exceptions import PaginationLimitError
from ..models import OperationRequest

logger = logging.getLogger(__name__)

StepFn = Callable[['PageState'], OperationRequest]
HandleFn = Callable[['PageState', Dict[str, Any]], None]
CompleteFn = Callable[['PageState'], bool]
SendFn = Callable[[OperationRequest], Dict[str, Any]]


@dataclass
class PageState:
    """Mutable cursor owned by a single engine run.

    Attributes:
        operation: Wire operation name, used in logs and errors
        payload: Request payload for the next round
        token: Last continuation marker (or polled result) seen
        rounds: Completed round trips
        count: Running total maintained by the handler (items seen, etc.)
        finished: Set once the completion predicate holds
    """

    operation: str
    payload: Dict[str, Any] = field(default_factory=dict)
    token: Any = None
    rounds: int = 0
    count: int = 0
    finished: bool = False


class PaginationEngine:
    """Drives an operation to logical completion."""

    def __init__(
        self,
        send: SendFn,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the engine.

        Args:
            send: Issues one request and returns the decoded response body
            policy: Round ceiling and pause between rounds (default unbounded, no pause)
            sleep: Sleep function, replaceable in tests
        """
        self.send = send
        self.policy = policy or RetryPolicy()
        self.sleep = sleep

    def run(self, state: PageState, step: StepFn, handle: HandleFn, is_complete: CompleteFn) -> PageState:
        """Repeat request/handle rounds until ``is_complete(state)``.

        Returns:
            The final state, with ``finished`` set

        Raises:
            PaginationLimitError: If the policy's ``max_rounds`` is reached
                before the operation completes
            TransportError, ServiceError: Propagated from ``send``/``handle``
                unchanged; no further rounds are attempted
        """
        while True:
            request = step(state)
            data = self.send(request)
            state.rounds += 1
            handle(state, data)

            if is_complete(state):
                state.finished = True
                logger.debug(f"{state.operation} complete after {state.rounds} round(s)")
                return state

            max_rounds = self.policy.max_rounds
            if max_rounds is not None and state.rounds >= max_rounds:
                raise PaginationLimitError(
                    f"Gave up after {state.rounds} round(s) without completing",
                    rounds=state.rounds,
                    operation=state.operation,
                )

            delay = self.policy.delay_for(state.rounds)
            logger.debug(f"{state.operation} round {state.rounds} incomplete, continuing in {delay:.2f}s")
            if delay > 0:
                self.sleep(delay)
