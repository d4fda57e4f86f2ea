"""
diskrelax - Iterative relaxation packing of randomly sized circles.

Usage:
    from diskrelax import CirclePacker, PackingAlgorithm

    # Drive the packer yourself
    packer = CirclePacker((0, 0), count=100, min_radius=0.1, max_radius=1.0)
    damping = 0.1
    for _ in range(10000):
        if not packer.pack(PackingAlgorithm.FAST, damping, tolerance=0.001):
            break
        damping *= 0.98
    circles = packer.to_circles()

    # Or let the driver loop do it
    from diskrelax import PackingConfig, run_packing
    result = run_packing((0, 0), PackingConfig(count=50, seed=1))

Packing algorithms:
    - Simple: farthest-first order, one circle moves, no contraction
    - Fast: like Simple, plus a contraction towards the center
    - Double: like Fast, but both circles of a colliding pair move
    - Random: like Fast, but in a random order every pass
"""

from .config import PackingConfig, PackingProgress, PackingAlgorithm, Circle, Point
from .geometry import BoundingBox, PackingCircle
from .packer import CirclePacker
from .driver import PackingResult, PackingSession, PackingStatus, run_packing

__all__ = [
    "CirclePacker",
    "PackingCircle",
    "PackingConfig",
    "PackingProgress",
    "PackingAlgorithm",
    "BoundingBox",
    "PackingResult",
    "PackingSession",
    "PackingStatus",
    "run_packing",
    "Circle",
    "Point",
]

__version__ = "0.1.0"
