"""
Decision Engine Configuration - Timing and resolution settings.

The decision delay is the only behavioral tunable; the default matches
the original one-second "thinking" pause. Values can be loaded from
environment variables (with .env support) or from a YAML file.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
import logging
import os

import yaml
from dotenv import load_dotenv

from core.exceptions import ConfigurationError, InvalidConfigError

from .models import DEFAULT_DECISION_DELAY_MS, ShrinkPolicy


logger = logging.getLogger(__name__)


ENV_PREFIX = "DECIDERE_"


@dataclass
class DecisionEngineConfig:
    """Main configuration for the decision engine."""

    # Timing
    decision_delay_ms: int = DEFAULT_DECISION_DELAY_MS

    # Resolution when choices shrink while deciding
    shrink_policy: ShrinkPolicy = ShrinkPolicy.CLAMP

    # Transition history kept in memory
    history_limit: int = 100

    # None = unseeded
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if isinstance(self.shrink_policy, str):
            self.shrink_policy = _parse_policy(self.shrink_policy)
        if not isinstance(self.shrink_policy, ShrinkPolicy):
            raise InvalidConfigError("shrink_policy", self.shrink_policy, "must be a ShrinkPolicy")

        if isinstance(self.decision_delay_ms, bool) or not isinstance(self.decision_delay_ms, int):
            raise InvalidConfigError("decision_delay_ms", self.decision_delay_ms, "must be an integer")
        if self.decision_delay_ms < 0:
            raise InvalidConfigError("decision_delay_ms", self.decision_delay_ms, "must not be negative")
        if isinstance(self.history_limit, bool) or not isinstance(self.history_limit, int):
            raise InvalidConfigError("history_limit", self.history_limit, "must be an integer")
        if self.history_limit < 1:
            raise InvalidConfigError("history_limit", self.history_limit, "must be at least 1")
        if self.random_seed is not None and (
            isinstance(self.random_seed, bool) or not isinstance(self.random_seed, int)
        ):
            raise InvalidConfigError("random_seed", self.random_seed, "must be an integer")

    @property
    def decision_delay_seconds(self) -> float:
        return self.decision_delay_ms / 1000.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "decision_delay_ms": self.decision_delay_ms,
            "shrink_policy": self.shrink_policy.value,
            "history_limit": self.history_limit,
            "random_seed": self.random_seed,
        }

    # --------------------------------------------------------
    # Loaders
    # --------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DecisionEngineConfig":
        """Build from a plain mapping; unknown keys are ignored."""
        config = cls()
        kwargs: Dict[str, Any] = {
            "decision_delay_ms": data.get("decision_delay_ms", config.decision_delay_ms),
            "shrink_policy": data.get("shrink_policy", config.shrink_policy),
            "history_limit": data.get("history_limit", config.history_limit),
            "random_seed": data.get("random_seed", config.random_seed),
        }
        unknown = set(data) - set(kwargs)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "DecisionEngineConfig":
        """Load configuration from YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}", cause=e) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file must contain a mapping: {path}",
                actual_value=type(data).__name__,
            )

        logger.info(f"Loaded decision engine config from {path}")
        return cls.from_mapping(data)

    @classmethod
    def from_env(cls, dotenv_path: Optional[Union[str, Path]] = None) -> "DecisionEngineConfig":
        """
        Load configuration from environment variables.

        Reads a .env file first (existing variables win). Recognized:
        DECIDERE_DECISION_DELAY_MS, DECIDERE_SHRINK_POLICY,
        DECIDERE_HISTORY_LIMIT, DECIDERE_RANDOM_SEED.
        """
        load_dotenv(dotenv_path)

        data: Dict[str, Any] = {}
        for key in ("decision_delay_ms", "history_limit", "random_seed"):
            raw = os.getenv(f"{ENV_PREFIX}{key.upper()}")
            if raw is not None and raw.strip():
                data[key] = _parse_int(key, raw)

        policy = os.getenv(f"{ENV_PREFIX}SHRINK_POLICY")
        if policy is not None and policy.strip():
            data["shrink_policy"] = policy

        return cls.from_mapping(data)


def _parse_int(key: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as e:
        raise InvalidConfigError(key, raw, "must be an integer") from e


def _parse_policy(raw: str) -> ShrinkPolicy:
    try:
        return ShrinkPolicy(raw.strip().lower())
    except ValueError as e:
        choices = ", ".join(p.value for p in ShrinkPolicy)
        raise InvalidConfigError("shrink_policy", raw, f"must be one of: {choices}") from e


# Default configuration instance
_default_config: Optional[DecisionEngineConfig] = None


def get_config() -> DecisionEngineConfig:
    """Get the default configuration."""
    global _default_config
    if _default_config is None:
        _default_config = DecisionEngineConfig()
    return _default_config


def set_config(config: Optional[DecisionEngineConfig]) -> None:
    """Set the default configuration. None restores defaults lazily."""
    global _default_config
    _default_config = config


__all__ = [
    "DecisionEngineConfig",
    "ENV_PREFIX",
    "get_config",
    "set_config",
]
