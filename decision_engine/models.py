"""
Decision Engine - Data Models.

Value types shared by the choice list and the decision engine. All of
them are immutable once created; observers may keep references safely.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from core.exceptions import DecisionError


# A single candidate: non-empty text with surrounding whitespace removed.
Option = str

MIN_CHOICES = 2
"""Fewest options a decision can be made from."""

DEFAULT_DECISION_DELAY_MS = 1000
"""Simulated thinking time between Deciding and Settled."""


# ============================================================
# ENUMS
# ============================================================

class DecisionPhase(Enum):
    """Lifecycle phase of the decision engine."""

    IDLE = "idle"
    """No decision in flight, no result."""

    DECIDING = "deciding"
    """Decision requested, result withheld."""

    SETTLED = "settled"
    """Decision completed with a winning option."""


class ShrinkPolicy(Enum):
    """What to do when the list shrank beneath the drawn index."""

    CLAMP = "clamp"
    """Select the last remaining entry instead."""

    FAIL = "fail"
    """Abandon the decision and return to Idle."""


class ChangeKind(Enum):
    """Kind of choice list mutation."""
    ADDED = "added"
    REMOVED = "removed"


# ============================================================
# DECISION STATE
# ============================================================

@dataclass(frozen=True)
class DecisionState:
    """Idle | Deciding | Settled(result)."""

    phase: DecisionPhase
    result: Optional[Option] = None

    @classmethod
    def idle(cls) -> "DecisionState":
        return cls(DecisionPhase.IDLE)

    @classmethod
    def deciding(cls) -> "DecisionState":
        return cls(DecisionPhase.DECIDING)

    @classmethod
    def settled(cls, result: Option) -> "DecisionState":
        return cls(DecisionPhase.SETTLED, result)

    @property
    def is_idle(self) -> bool:
        return self.phase == DecisionPhase.IDLE

    @property
    def is_deciding(self) -> bool:
        return self.phase == DecisionPhase.DECIDING

    @property
    def is_settled(self) -> bool:
        return self.phase == DecisionPhase.SETTLED

    def __str__(self) -> str:
        if self.is_settled:
            return f"settled({self.result!r})"
        return self.phase.value


# ============================================================
# NOTIFICATIONS
# ============================================================

@dataclass(frozen=True)
class DecisionTransition:
    """Record of one applied decision state transition."""

    transition_id: str
    attempt: int
    from_state: DecisionState
    to_state: DecisionState
    reason: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error: Optional[DecisionError] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "transition_id": self.transition_id,
            "attempt": self.attempt,
            "from_phase": self.from_state.phase.value,
            "to_phase": self.to_state.phase.value,
            "result": self.to_state.result,
            "reason": self.reason,
            "timestamp": self.timestamp.isoformat(),
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass(frozen=True)
class ChoiceListChange:
    """Notification payload for a choice list mutation."""

    kind: ChangeKind
    index: int
    option: Option
    size: int
    """List length after the change."""


# ============================================================
# DECIDE() OUTCOME
# ============================================================

@dataclass(frozen=True)
class DecisionOutcome:
    """
    Synchronous result of DecisionEngine.decide().

    An accepted outcome means the engine is now Deciding; the winning
    option arrives later through the Settled transition. A rejected
    outcome carries the validation error and means nothing changed.

    superseded is set when a listener started another attempt while this
    one was being announced; only the newer attempt can settle.
    """

    accepted: bool
    attempt: Optional[int] = None
    drawn_index: Optional[int] = None
    restarted: bool = False
    superseded: bool = False
    error: Optional[DecisionError] = None

    @classmethod
    def started(
        cls,
        attempt: int,
        drawn_index: int,
        restarted: bool,
        superseded: bool = False,
    ) -> "DecisionOutcome":
        return cls(
            accepted=True,
            attempt=attempt,
            drawn_index=drawn_index,
            restarted=restarted,
            superseded=superseded,
        )

    @classmethod
    def rejected(cls, error: DecisionError) -> "DecisionOutcome":
        return cls(accepted=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accepted": self.accepted,
            "attempt": self.attempt,
            "drawn_index": self.drawn_index,
            "restarted": self.restarted,
            "superseded": self.superseded,
            "error": self.error.to_dict() if self.error else None,
        }


__all__ = [
    "Option",
    "MIN_CHOICES",
    "DEFAULT_DECISION_DELAY_MS",
    "DecisionPhase",
    "ShrinkPolicy",
    "ChangeKind",
    "DecisionState",
    "DecisionTransition",
    "ChoiceListChange",
    "DecisionOutcome",
]
