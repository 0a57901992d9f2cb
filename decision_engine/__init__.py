"""
Decision Engine Package.

Holds the candidate options and picks one of them uniformly at random
after a short simulated thinking delay.

Modules:
- choice_list: Ordered option collection with change notifications
- engine: Decide-and-reveal procedure
- decision_state: State tracking and transition table
- config: Timing and resolution settings
- models: Shared value types

Usage:
    from decision_engine import ChoiceList, DecisionEngine

    choices = ChoiceList()
    choices.add("Pizza")
    choices.add("Tacos")

    engine = DecisionEngine()
    engine.register_listener(lambda t: print(t.to_state))
    engine.decide(choices)      # inside a running event loop
"""

from .choice_list import ChoiceList, ChoiceListListener, normalize_option
from .config import DecisionEngineConfig, get_config, set_config
from .decision_state import VALID_TRANSITIONS, DecisionListener, DecisionStateTracker
from .engine import DecisionEngine
from .models import (
    DEFAULT_DECISION_DELAY_MS,
    MIN_CHOICES,
    ChangeKind,
    ChoiceListChange,
    DecisionOutcome,
    DecisionPhase,
    DecisionState,
    DecisionTransition,
    Option,
    ShrinkPolicy,
)


__all__ = [
    # Components
    "ChoiceList",
    "DecisionEngine",
    "DecisionStateTracker",

    # Listener types
    "ChoiceListListener",
    "DecisionListener",

    # Models
    "Option",
    "DecisionPhase",
    "DecisionState",
    "DecisionTransition",
    "DecisionOutcome",
    "ChoiceListChange",
    "ChangeKind",
    "ShrinkPolicy",
    "MIN_CHOICES",
    "DEFAULT_DECISION_DELAY_MS",
    "VALID_TRANSITIONS",

    # Config
    "DecisionEngineConfig",
    "get_config",
    "set_config",

    # Helpers
    "normalize_option",
]


__version__ = "1.0.0"
