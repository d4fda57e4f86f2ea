"""
Configuration and type definitions for circle relaxation packing.
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple
from enum import Enum

# Type aliases
Point = np.ndarray
Circle = Tuple[float, float, float]  # (x, y, radius)


class PackingAlgorithm(Enum):
    """Available collision-resolution strategies."""
    SIMPLE = "simple"
    FAST = "fast"
    DOUBLE = "double"
    RANDOM = "random"

    @property
    def shuffles(self) -> bool:
        """Random order instead of farthest-first order."""
        return self is PackingAlgorithm.RANDOM

    @property
    def mutual(self) -> bool:
        """Both circles of a colliding pair move."""
        return self is PackingAlgorithm.DOUBLE

    @property
    def contracts(self) -> bool:
        return self is not PackingAlgorithm.SIMPLE

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @classmethod
    def parse(cls, name) -> "PackingAlgorithm":
        """Look up an algorithm by (case-insensitive) name."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            valid = ", ".join(a.value for a in cls)
            raise ValueError(f"Unknown packing algorithm {name!r} (expected one of: {valid})") from None


_DESCRIPTIONS = {
    PackingAlgorithm.FAST: (
        "Fast: prevents collisions by moving one circle away from all its "
        "intersectors. After every collision iteration, all circles are moved "
        "towards the centre of the packing to reduce the amount of wasted "
        "space. Collision detection proceeds from the outside inwards."
    ),
    PackingAlgorithm.DOUBLE: (
        "Double: similar to Fast, except that both circles are moved in case "
        "of a collision."
    ),
    PackingAlgorithm.RANDOM: (
        "Random: similar to Fast, except that collision detection is "
        "randomized rather than sorted."
    ),
    PackingAlgorithm.SIMPLE: (
        "Simple: similar to Fast, but without a contraction pass after every "
        "collision iteration."
    ),
}


@dataclass
class PackingConfig:
    """
    Configuration parameters for a packing session.

    Circle set:
        count: Number of circles (at least 2)
        min_radius: Smallest radius, also the spread of the initial placement
        max_radius: Largest radius

    Iteration:
        algorithm: Collision-resolution strategy
        iteration_limit: Maximum number of passes
        damping: Initial contraction factor
        damping_decay: Multiplier applied to damping after every pass
        tolerance: Scene precision; overlaps smaller than this are ignored

    Other:
        seed: Seed for the random generator (None for fresh entropy)
        verbose: Print progress while packing
    """
    # Circle set
    count: int = 100
    min_radius: float = 0.1
    max_radius: float = 1.0

    # Iteration
    algorithm: PackingAlgorithm = PackingAlgorithm.FAST
    iteration_limit: int = 10000
    damping: float = 0.1
    damping_decay: float = 0.98
    tolerance: float = 0.001

    # Other
    seed: Optional[int] = None
    verbose: bool = False

    def validate(self) -> None:
        """Raise ValueError if any parameter is out of range."""
        self.algorithm = PackingAlgorithm.parse(self.algorithm)
        if self.count < 2:
            raise ValueError(f"count must be at least 2, got {self.count}")
        if not (math.isfinite(self.min_radius) and self.min_radius > 0):
            raise ValueError(f"min_radius must be positive, got {self.min_radius}")
        if not (math.isfinite(self.max_radius) and self.max_radius >= self.min_radius):
            raise ValueError(
                f"max_radius must be at least min_radius ({self.min_radius}), got {self.max_radius}"
            )
        if self.iteration_limit < 1:
            raise ValueError(f"iteration_limit must be positive, got {self.iteration_limit}")
        if not (math.isfinite(self.damping) and self.damping >= 0) or not (
            math.isfinite(self.tolerance) and self.tolerance >= 0
        ):
            raise ValueError("damping and tolerance must be finite and non-negative")
        if not 0 < self.damping_decay <= 1:
            raise ValueError(f"damping_decay must be in (0, 1], got {self.damping_decay}")


@dataclass
class PackingProgress:
    """Tracks the current state of a packing session."""
    iteration: int = 0
    iteration_limit: int = 10000
    damping: float = 0.0
    moving: int = 0

    @property
    def progress_ratio(self) -> float:
        """How much of the iteration budget is used (0.0 = just started, 1.0 = done)."""
        return self.iteration / self.iteration_limit if self.iteration_limit > 0 else 0

    def __str__(self) -> str:
        return (
            f"Iteration: {self.iteration}/{self.iteration_limit} ({self.progress_ratio:.0%}) | "
            f"Moving: {self.moving} | Damping: {self.damping:.4f}"
        )
