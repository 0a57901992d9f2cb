"""
Decision Engine - Decision State.

============================================================
RESPONSIBILITY
============================================================
Tracks the current decision state and applies transitions.

- Validates every transition against the transition table
- Records a bounded transition history
- Notifies listeners once per applied transition

============================================================
STATE MACHINE
============================================================

    IDLE ──decide──► DECIDING ──delay──► SETTLED
                      │  ▲                  │
                      │  └──────decide──────┘
                      │  └──decide (restart)
                      │
                      └──choices vanished──► IDLE

- IDLE is initial; there is no terminal state
- decide() with fewer than two choices is not a transition

============================================================
"""

from typing import Callable, Dict, List, Optional, Set
import logging

from core.clock import ClockFactory, ClockProtocol
from core.exceptions import DecisionError, StateTransitionError

from .models import DecisionPhase, DecisionState, DecisionTransition


logger = logging.getLogger(__name__)


# ============================================================
# STATE TRANSITIONS
# ============================================================

VALID_TRANSITIONS: Dict[DecisionPhase, Set[DecisionPhase]] = {
    DecisionPhase.IDLE: {
        DecisionPhase.DECIDING,
    },
    DecisionPhase.DECIDING: {
        DecisionPhase.DECIDING,  # Restart
        DecisionPhase.SETTLED,
        DecisionPhase.IDLE,      # Resolution failed
    },
    DecisionPhase.SETTLED: {
        DecisionPhase.DECIDING,
    },
}


DecisionListener = Callable[[DecisionTransition], None]


# ============================================================
# STATE TRACKER
# ============================================================

class DecisionStateTracker:
    """
    Holds the decision state with history and listener notification.

    Listeners run synchronously after the transition is fully applied,
    so state read from inside a listener is already the new state.
    """

    def __init__(
        self,
        clock: Optional[ClockProtocol] = None,
        max_history: int = 100,
    ):
        """
        Initialize tracker in IDLE.

        Args:
            clock: Timestamp source (defaults to global clock)
            max_history: Transitions kept for get_history()
        """
        self._state = DecisionState.idle()
        self._clock = clock or ClockFactory.get_clock()
        self._transition_count = 0
        self._last_transition: Optional[DecisionTransition] = None
        self._history: List[DecisionTransition] = []
        self._max_history = max_history
        self._listeners: List[DecisionListener] = []

    @property
    def state(self) -> DecisionState:
        return self._state

    @property
    def last_transition(self) -> Optional[DecisionTransition]:
        return self._last_transition

    @property
    def transition_count(self) -> int:
        return self._transition_count

    def get_history(self, limit: int = 10) -> List[DecisionTransition]:
        """Get the most recent transitions, oldest first."""
        if limit <= 0:
            return []
        return self._history[-limit:]

    def can_transition_to(self, target: DecisionPhase) -> bool:
        return target in VALID_TRANSITIONS.get(self._state.phase, set())

    def transition_to(
        self,
        target: DecisionState,
        attempt: int,
        reason: str,
        error: Optional[DecisionError] = None,
    ) -> DecisionTransition:
        """
        Apply a transition and notify listeners.

        Raises:
            StateTransitionError: If the transition is not in the table
        """
        if not self.can_transition_to(target.phase):
            raise StateTransitionError(
                message=f"Invalid decision transition: {self._state} -> {target}",
                from_state=self._state.phase.value,
                to_state=target.phase.value,
                reason=reason,
            )

        self._transition_count += 1
        transition = DecisionTransition(
            transition_id=f"transition_{self._transition_count}",
            attempt=attempt,
            from_state=self._state,
            to_state=target,
            reason=reason,
            timestamp=self._clock.now(),
            error=error,
        )

        old_state = self._state
        self._state = target
        self._last_transition = transition

        self._history.append(transition)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

        logger.debug(
            f"Decision transition: {old_state} -> {target} "
            f"| attempt={attempt} | reason={reason}"
        )

        self._notify_listeners(transition)
        return transition

    def register_listener(self, listener: DecisionListener) -> None:
        """Register a state change listener."""
        self._listeners.append(listener)

    def unregister_listener(self, listener: DecisionListener) -> None:
        """Unregister a state change listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify_listeners(self, transition: DecisionTransition) -> None:
        for listener in list(self._listeners):
            try:
                listener(transition)
            except Exception as e:
                logger.error(
                    f"Decision listener error: {e}",
                    exc_info=True,
                )


__all__ = [
    "VALID_TRANSITIONS",
    "DecisionListener",
    "DecisionStateTracker",
]
