"""
Geometry primitives for circle relaxation packing.

Contains:
- BoundingBox: axis-aligned box with an unset state and union
- PackingCircle: a single circle that can resolve overlaps with another
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Iterable

from .config import Point

# Fraction of the scene tolerance by which circles may overlap
OVERLAP_TOLERANCE_FACTOR = 0.01

# Separating direction used when two centers coincide exactly
COINCIDENT_DIRECTION = np.array([1.0, 0.0, 0.0])


def as_point(values) -> Point:
    """Convert a 2D or 3D coordinate sequence into a 3D float point."""
    point = np.zeros(3)
    coords = np.asarray(values, dtype=float).ravel()
    if coords.size not in (2, 3):
        raise ValueError(f"Expected 2 or 3 coordinates, got {coords.size}")
    point[:coords.size] = coords
    return point


@dataclass(eq=False)
class BoundingBox:
    """Axis-aligned 3D box. A box with min > max is unset (empty)."""
    min_coords: np.ndarray = field(default_factory=lambda: np.full(3, np.inf))
    max_coords: np.ndarray = field(default_factory=lambda: np.full(3, -np.inf))

    @classmethod
    def unset(cls) -> "BoundingBox":
        return cls()

    @classmethod
    def union_of(cls, boxes: Iterable["BoundingBox"]) -> "BoundingBox":
        result = cls.unset()
        for box in boxes:
            result = result.union(box)
        return result

    @property
    def is_valid(self) -> bool:
        return bool(np.all(self.min_coords <= self.max_coords))

    @property
    def center(self) -> Point:
        return (self.min_coords + self.max_coords) / 2

    def union(self, other: "BoundingBox") -> "BoundingBox":
        if not other.is_valid:
            return BoundingBox(self.min_coords.copy(), self.max_coords.copy())
        if not self.is_valid:
            return BoundingBox(other.min_coords.copy(), other.max_coords.copy())
        return BoundingBox(
            np.minimum(self.min_coords, other.min_coords),
            np.maximum(self.max_coords, other.max_coords),
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        if not self.is_valid and not other.is_valid:
            return True
        return (np.array_equal(self.min_coords, other.min_coords)
                and np.array_equal(self.max_coords, other.max_coords))

    def __repr__(self) -> str:
        if not self.is_valid:
            return "BoundingBox(unset)"
        return f"BoundingBox(min={self.min_coords.tolist()}, max={self.max_coords.tolist()})"


class PackingCircle:
    """A circle with a fixed radius whose center moves while packing."""

    def __init__(self, center, radius: float):
        if not radius > 0:
            raise ValueError(f"Circle radius must be positive, got {radius}")
        self._center = as_point(center)
        self._radius = float(radius)
        self.in_motion = False

    @property
    def center(self) -> Point:
        return self._center.copy()

    @property
    def radius(self) -> float:
        return self._radius

    def translate(self, offset) -> None:
        self._center += as_point(offset)

    def bounding_box(self) -> BoundingBox:
        extent = np.array([self._radius, self._radius, 0.0])
        return BoundingBox(self._center - extent, self._center + extent)

    def as_tuple(self):
        return (float(self._center[0]), float(self._center[1]), self._radius)

    def _separation(self, other: "PackingCircle", tolerance: float):
        """
        Return the correction vector that moves self out of other, or None.

        Only the planar coordinates take part; the third axis is carried
        through unchanged.
        """
        offset = self._center - other._center
        offset[2] = 0.0
        d = float(offset[0] ** 2 + offset[1] ** 2)
        r = self._radius + other._radius

        if d >= r * r - OVERLAP_TOLERANCE_FACTOR * tolerance:
            return None

        if d == 0:
            direction = COINCIDENT_DIRECTION
        else:
            direction = offset / np.sqrt(d)
        return direction * (r - np.sqrt(d))

    def resolve_single(self, other: "PackingCircle", tolerance: float) -> bool:
        """Move this circle (only) away from other if they overlap."""
        correction = self._separation(other, tolerance)
        if correction is None:
            return False
        self._center += correction
        self.in_motion = True
        return True

    def resolve_mutual(self, other: "PackingCircle", tolerance: float) -> bool:
        """Move both circles apart by half the overlap each."""
        correction = self._separation(other, tolerance)
        if correction is None:
            return False
        half = 0.5 * correction
        self._center += half
        other._center -= half
        self.in_motion = True
        other.in_motion = True
        return True

    def __repr__(self) -> str:
        x, y, r = self.as_tuple()
        return f"PackingCircle(center=({x:.4g}, {y:.4g}), radius={r:.4g})"
