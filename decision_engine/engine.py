"""
Decision Engine - Engine.

============================================================
RESPONSIBILITY
============================================================
Runs the decide-and-reveal procedure over a ChoiceList.

- Rejects decisions with fewer than two choices (returned, not raised)
- Draws a uniform index at decide() time
- Enters DECIDING synchronously, SETTLED after the configured delay
- A new decide() supersedes any pending resolution

============================================================
RESOLUTION
============================================================
The list is read by reference twice: when decide() validates and draws,
and again when the delay elapses. If it shrank beneath the drawn index
in between:
- empty list: fail with ChoicesChangedDuringDecisionError, back to IDLE
- CLAMP policy: take the last remaining entry
- FAIL policy: fail with ChoicesChangedDuringDecisionError, back to IDLE

============================================================
"""

from typing import List, Optional
import logging

from core.clock import ClockProtocol
from core.exceptions import ChoicesChangedDuringDecisionError, InsufficientChoicesError
from core.random_source import PythonRandomSource, RandomIndexSource
from core.scheduler import AsyncioScheduler, ScheduledHandle, SchedulerProtocol

from .choice_list import ChoiceList
from .config import DecisionEngineConfig, get_config
from .decision_state import DecisionListener, DecisionStateTracker
from .models import (
    MIN_CHOICES,
    DecisionOutcome,
    DecisionState,
    DecisionTransition,
    Option,
    ShrinkPolicy,
)


logger = logging.getLogger(__name__)


class DecisionEngine:
    """
    Owns the decision lifecycle.

    Usage:
        engine = DecisionEngine()
        engine.register_listener(render)

        outcome = engine.decide(choices)
        if not outcome.accepted:
            show(outcome.error.message)

    With the default AsyncioScheduler, decide() must be called while an
    event loop is running; the Settled transition is delivered from that
    loop once the delay elapses.
    """

    def __init__(
        self,
        config: Optional[DecisionEngineConfig] = None,
        scheduler: Optional[SchedulerProtocol] = None,
        random_source: Optional[RandomIndexSource] = None,
        clock: Optional[ClockProtocol] = None,
    ) -> None:
        self.config = config or get_config()
        self._scheduler = scheduler or AsyncioScheduler()
        self._random = random_source or PythonRandomSource(self.config.random_seed)
        self._tracker = DecisionStateTracker(
            clock=clock,
            max_history=self.config.history_limit,
        )

        # Current attempt
        self._attempt_count = 0
        self._pending: Optional[ScheduledHandle] = None
        self._choice_list: Optional[ChoiceList] = None
        self._drawn_index: Optional[int] = None

    # --------------------------------------------------------
    # State access
    # --------------------------------------------------------

    @property
    def state(self) -> DecisionState:
        return self._tracker.state

    @property
    def result(self) -> Optional[Option]:
        """Winning option while SETTLED, otherwise None."""
        return self._tracker.state.result

    @property
    def is_deciding(self) -> bool:
        return self._tracker.state.is_deciding

    @property
    def attempt_count(self) -> int:
        """Number of accepted decide() calls so far."""
        return self._attempt_count

    @property
    def last_transition(self) -> Optional[DecisionTransition]:
        return self._tracker.last_transition

    def get_history(self, limit: int = 10) -> List[DecisionTransition]:
        return self._tracker.get_history(limit)

    def register_listener(self, listener: DecisionListener) -> None:
        self._tracker.register_listener(listener)

    def unregister_listener(self, listener: DecisionListener) -> None:
        self._tracker.unregister_listener(listener)

    # --------------------------------------------------------
    # Decide
    # --------------------------------------------------------

    def decide(self, choice_list: ChoiceList) -> DecisionOutcome:
        """
        Start (or restart) a decision over choice_list.

        Returns:
            Accepted outcome with the drawn index, or a rejected outcome
            carrying InsufficientChoicesError (state unchanged). If a
            listener re-entered decide() while this attempt was being
            announced, the outcome is marked superseded.

        Raises:
            SchedulerError: If the delayed resolution cannot be scheduled
        """
        count = len(choice_list)
        if count < MIN_CHOICES:
            error = InsufficientChoicesError(available=count, required=MIN_CHOICES)
            logger.warning(f"Decision rejected: {error.message} (have {count})")
            return DecisionOutcome.rejected(error)

        drawn_index = self._random.next_index(count)
        attempt = self._attempt_count + 1

        # Schedule before touching state so a scheduling failure leaves
        # the previous decision intact.
        handle = self._scheduler.call_later(
            self.config.decision_delay_seconds,
            self._resolve,
            attempt,
        )

        restarted = self._pending is not None
        if self._pending is not None:
            self._pending.cancel()

        self._attempt_count = attempt
        self._pending = handle
        self._choice_list = choice_list
        self._drawn_index = drawn_index

        if restarted:
            logger.info(f"Decision restarted: attempt={attempt} choices={count}")
        else:
            logger.info(f"Decision started: attempt={attempt} choices={count}")

        self._tracker.transition_to(
            DecisionState.deciding(),
            attempt=attempt,
            reason="restart" if restarted else "decide",
        )

        # A listener may have called decide() again during the notification
        superseded = self._attempt_count != attempt
        if superseded:
            logger.debug(f"Attempt {attempt} superseded by {self._attempt_count} during notification")

        return DecisionOutcome.started(attempt, drawn_index, restarted, superseded)

    def _resolve(self, attempt: int) -> None:
        """Delayed callback: settle the given attempt."""
        if attempt != self._attempt_count or not self._tracker.state.is_deciding:
            logger.debug(f"Ignoring superseded resolution for attempt={attempt}")
            return

        choice_list = self._choice_list
        index = self._drawn_index
        self._pending = None
        self._choice_list = None
        self._drawn_index = None

        entries = choice_list.entries()

        if index >= len(entries):
            if entries and self.config.shrink_policy == ShrinkPolicy.CLAMP:
                logger.warning(
                    f"Choices shrank during decision: clamping index {index} "
                    f"to {len(entries) - 1}"
                )
                index = len(entries) - 1
            else:
                error = ChoicesChangedDuringDecisionError(
                    drawn_index=index,
                    current_length=len(entries),
                )
                logger.warning(f"Decision abandoned: {error.message}")
                self._tracker.transition_to(
                    DecisionState.idle(),
                    attempt=attempt,
                    reason="choices changed",
                    error=error,
                )
                return

        result = entries[index]
        logger.info(f"Decision settled: attempt={attempt} result={result!r}")
        self._tracker.transition_to(
            DecisionState.settled(result),
            attempt=attempt,
            reason="delay elapsed",
        )


__all__ = ["DecisionEngine"]
