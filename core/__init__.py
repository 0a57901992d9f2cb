"""
Core Module Package.

This package contains the infrastructure components the decision
engine depends on.

Components:
- clock: Unified time abstraction
- scheduler: Cancellable delayed callbacks
- random_source: Injectable uniform index source
- exceptions: Custom exception hierarchy
- logging_config: Root logger setup
"""

from .clock import ClockFactory, ClockProtocol, MockClock, SystemClock, now_utc
from .exceptions import (
    ChoicesChangedDuringDecisionError,
    ConfigurationError,
    DecidereException,
    DecisionError,
    InsufficientChoicesError,
    InvalidConfigError,
    SchedulerError,
    Severity,
    StateTransitionError,
)
from .logging_config import configure_logging
from .random_source import PythonRandomSource, RandomIndexSource
from .scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    ManualTimer,
    ScheduledHandle,
    SchedulerProtocol,
)


__all__ = [
    # Clock
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "ClockFactory",
    "now_utc",

    # Scheduler
    "ScheduledHandle",
    "SchedulerProtocol",
    "AsyncioScheduler",
    "ManualScheduler",
    "ManualTimer",

    # Randomness
    "RandomIndexSource",
    "PythonRandomSource",

    # Logging
    "configure_logging",

    # Exceptions
    "Severity",
    "DecidereException",
    "ConfigurationError",
    "InvalidConfigError",
    "DecisionError",
    "InsufficientChoicesError",
    "ChoicesChangedDuringDecisionError",
    "StateTransitionError",
    "SchedulerError",
]
