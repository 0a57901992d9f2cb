"""
Core Module - Random Index Source.

Injectable source of uniform random indices. Production code uses an
unseeded generator; tests pass a seed (or a scripted source) so that
selections are reproducible without touching engine logic.
"""

from abc import ABC, abstractmethod
from typing import Optional
import random


class RandomIndexSource(ABC):
    """Draws integers uniformly from [0, upper)."""

    @abstractmethod
    def next_index(self, upper: int) -> int:
        pass


class PythonRandomSource(RandomIndexSource):
    """
    Thin wrapper around a private random.Random instance.

    Avoids the module-level global generator so two engines never share
    state.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def next_index(self, upper: int) -> int:
        if upper <= 0:
            raise ValueError(f"upper must be positive, got {upper}")
        return self._rng.randrange(upper)


__all__ = [
    "RandomIndexSource",
    "PythonRandomSource",
]
