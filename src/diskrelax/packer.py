import math
import numpy as np
from typing import List, Optional, Tuple

from .config import Circle, PackingAlgorithm, Point
from .geometry import BoundingBox, PackingCircle, OVERLAP_TOLERANCE_FACTOR, as_point

# Contraction factors below this are treated as no motion
MIN_DAMPING = 0.01


class CirclePacker:
    """Relaxes a fixed set of random circles into a tight, overlap-free cluster."""

    def __init__(
        self,
        reference_point,
        count: int,
        min_radius: float,
        max_radius: float,
        rng: Optional[np.random.Generator] = None,
    ):
        if count < 2:
            raise ValueError(f"At least 2 circles are required, got {count}")
        if not (math.isfinite(min_radius) and min_radius > 0):
            raise ValueError(f"min_radius must be positive, got {min_radius}")
        if not (math.isfinite(max_radius) and max_radius >= min_radius):
            raise ValueError(f"max_radius must be at least min_radius, got {max_radius}")

        self.reference_point: Point = as_point(reference_point)
        self.rng = rng if rng is not None else np.random.default_rng()
        self._circles: List[PackingCircle] = self._create_circles(count, min_radius, max_radius)

        # Cache for the overall bounding box
        self._bbox: BoundingBox = BoundingBox.unset()
        self._cache_valid = False

    def _create_circles(self, count: int, min_radius: float, max_radius: float) -> List[PackingCircle]:
        offsets = self.rng.uniform(0.0, min_radius, size=(count, 2))
        radii = self.rng.uniform(min_radius, max_radius, size=count)
        circles = []
        for (dx, dy), radius in zip(offsets, radii):
            center = self.reference_point + np.array([dx, dy, 0.0])
            circles.append(PackingCircle(center, radius))
        return circles

    @property
    def circles(self) -> Tuple[PackingCircle, ...]:
        return tuple(self._circles)

    def __len__(self) -> int:
        return len(self._circles)

    def to_circles(self) -> List[Circle]:
        """Current circles as (x, y, radius) tuples, in packing order."""
        return [c.as_tuple() for c in self._circles]

    def moving_count(self) -> int:
        """Number of circles moved by the most recent pass."""
        return sum(1 for c in self._circles if c.in_motion)

    # =========================================================================
    # Ordering
    # =========================================================================

    def _sort(self) -> None:
        """Reorder circles from farthest to nearest the reference point."""
        centers = np.array([c.center for c in self._circles])
        distances = np.linalg.norm(centers[:, :2] - self.reference_point[:2], axis=1)
        order = np.argsort(-distances)
        self._circles = [self._circles[i] for i in order]

    def _jiggle(self) -> None:
        """Shuffle circles into a uniformly random order."""
        order = self.rng.permutation(len(self._circles))
        self._circles = [self._circles[i] for i in order]

    # =========================================================================
    # Motion
    # =========================================================================

    def _contract(self, damping: float) -> None:
        """Pull every circle towards the reference point by a fraction of the distance."""
        if damping < MIN_DAMPING:
            return
        for c in self._circles:
            c.translate((self.reference_point - c.center) * damping)

    def _invalidate_cache(self) -> None:
        self._cache_valid = False

    def pack(self, algorithm, damping: float, tolerance: float) -> bool:
        """
        Run a single packing iteration.

        Args:
            algorithm: PackingAlgorithm (or its name) selecting order and resolution
            damping: Contraction factor applied after collision resolution
            tolerance: Scene precision; overlaps below 0.01 * tolerance are ignored

        Returns:
            True if any pair of circles collided during this pass.
        """
        algorithm = PackingAlgorithm.parse(algorithm)
        if not (math.isfinite(damping) and damping >= 0) or not (math.isfinite(tolerance) and tolerance >= 0):
            raise ValueError("damping and tolerance must be finite and non-negative")

        for c in self._circles:
            c.in_motion = False

        if algorithm.shuffles:
            self._jiggle()
        else:
            self._sort()

        collided = False
        n = len(self._circles)
        for i in range(n - 1):
            first = self._circles[i]
            resolve = first.resolve_mutual if algorithm.mutual else first.resolve_single
            for j in range(i + 1, n):
                collided |= resolve(self._circles[j], tolerance)

        if algorithm.contracts:
            self._contract(damping)

        self._invalidate_cache()
        return collided

    # =========================================================================
    # Queries
    # =========================================================================

    def bounding_box(self) -> BoundingBox:
        """Union of all circle bounding boxes, recomputed after every pass."""
        if not self._cache_valid:
            self._bbox = BoundingBox.union_of(c.bounding_box() for c in self._circles)
            self._cache_valid = True
        return self._bbox

    def _penetrations(self, tolerance: float) -> np.ndarray:
        """Penetration depth of every colliding pair, without moving anything."""
        centers = np.array([c.center[:2] for c in self._circles])
        radii = np.array([c.radius for c in self._circles])

        d = np.sum((centers[:, np.newaxis, :] - centers[np.newaxis, :, :]) ** 2, axis=2)
        r = radii[:, np.newaxis] + radii[np.newaxis, :]
        upper = np.triu(np.ones_like(d, dtype=bool), k=1)
        colliding = upper & (d < r * r - OVERLAP_TOLERANCE_FACTOR * tolerance)

        return r[colliding] - np.sqrt(d[colliding])

    def collisions(self, tolerance: float) -> bool:
        """Whether any pair currently meets the collision condition."""
        return self._penetrations(tolerance).size > 0

    def total_overlap(self, tolerance: float = 0.0) -> float:
        """Sum of penetration depths over all colliding pairs."""
        return float(np.sum(self._penetrations(tolerance)))
