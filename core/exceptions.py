"""
Core Module - Exceptions.

============================================================
RESPONSIBILITY
============================================================
Defines all custom exceptions for the decision system.

- Provides clear exception hierarchy
- Separates returned validation errors from raised faults
- Includes context for debugging

============================================================
EXCEPTION HIERARCHY
============================================================
DecidereException (base)
├── ConfigurationError
│   └── InvalidConfigError
├── DecisionError              (returned as values, never raised)
│   ├── InsufficientChoicesError
│   └── ChoicesChangedDuringDecisionError
├── StateTransitionError
└── SchedulerError

============================================================
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# ============================================================
# SEVERITY LEVELS
# ============================================================

class Severity(Enum):
    """Exception severity levels."""

    LOW = "low"
    """User-correctable issue, informational."""

    MEDIUM = "medium"
    """Moderate issue, requires attention."""

    HIGH = "high"
    """Programming or configuration fault."""


# ============================================================
# BASE EXCEPTION
# ============================================================

class DecidereException(Exception):
    """
    Base exception for all decision system errors.

    All exceptions carry:
    - severity: for log levels
    - context: for debugging
    - recoverable: whether the caller can simply retry
    - timestamp: when the error occurred
    """

    default_severity: Severity = Severity.MEDIUM
    default_recoverable: bool = True

    def __init__(
        self,
        message: str,
        severity: Optional[Severity] = None,
        context: Optional[Dict[str, Any]] = None,
        recoverable: Optional[bool] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)

        self.message = message
        self.severity = severity or self.default_severity
        self.context = context or {}
        self.recoverable = recoverable if recoverable is not None else self.default_recoverable
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

        if cause:
            self.context["cause_type"] = type(cause).__name__
            self.context["cause_message"] = str(cause)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for logging."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.value,
            "recoverable": self.recoverable,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def to_log_format(self) -> str:
        """Format exception for structured logging."""
        line = (
            f"[{self.severity.value.upper()}] {type(self).__name__}: {self.message}"
            f" | recoverable={self.recoverable}"
        )
        ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        if ctx_str:
            line += f" | {ctx_str}"
        return line


# ============================================================
# CONFIGURATION ERRORS
# ============================================================

class ConfigurationError(DecidereException):
    """Error in configuration."""

    default_severity = Severity.HIGH
    default_recoverable = False

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if config_key:
            context["config_key"] = config_key
        if actual_value is not None:
            context["actual_value"] = str(actual_value)[:100]

        super().__init__(message, context=context, **kwargs)


class InvalidConfigError(ConfigurationError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid configuration for {key}: {reason}",
            config_key=key,
            actual_value=value,
            context={"reason": reason},
        )


# ============================================================
# DECISION ERRORS
# ============================================================

class DecisionError(DecidereException):
    """
    Base class for decision outcomes that did not produce a result.

    These are user-facing validation results. The engine returns them
    inside outcomes and transition records; it never raises them.
    """

    default_severity = Severity.LOW
    default_recoverable = True


class InsufficientChoicesError(DecisionError):
    """A decision was requested with fewer options than required."""

    def __init__(self, available: int, required: int = 2):
        super().__init__(
            message=f"Please add at least {required} choices",
            context={"available": available, "required": required},
        )
        self.available = available
        self.required = required


class ChoicesChangedDuringDecisionError(DecisionError):
    """The options shrank beneath the drawn index before resolution."""

    def __init__(self, drawn_index: int, current_length: int):
        super().__init__(
            message=(
                f"Choices changed during decision: drawn index {drawn_index} "
                f"no longer valid for {current_length} choices"
            ),
            context={"drawn_index": drawn_index, "current_length": current_length},
        )
        self.drawn_index = drawn_index
        self.current_length = current_length


# ============================================================
# SYSTEM ERRORS
# ============================================================

class StateTransitionError(DecidereException):
    """Invalid state transition."""

    default_severity = Severity.HIGH
    default_recoverable = False

    def __init__(
        self,
        message: str,
        from_state: Optional[str] = None,
        to_state: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs,
    ):
        context = kwargs.pop("context", {})

        if from_state:
            context["from_state"] = from_state
        if to_state:
            context["to_state"] = to_state
        if reason:
            context["reason"] = reason

        super().__init__(message, context=context, **kwargs)


class SchedulerError(DecidereException):
    """A delayed callback could not be scheduled."""

    default_severity = Severity.HIGH
    default_recoverable = False


__all__ = [
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
