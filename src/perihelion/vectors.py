'''2D position vectors for the orbital plane.
All positions are in kilometers with the primary star at the origin.'''

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """
    Immutable point or offset in the orbital plane [km].

    Positions are derived each tick and never treated as ground truth, so
    Vec2 is a plain value type: arithmetic returns new instances.
    """
    x: float
    y: float

    def __add__(self, other: "Vec2") -> "Vec2":
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scale: float) -> "Vec2":
        return Vec2(self.x * scale, self.y * scale)

    __rmul__ = __mul__

    def __iter__(self):
        yield self.x
        yield self.y

    @property
    def norm(self) -> float:
        """Distance from the origin [km]"""
        return math.hypot(self.x, self.y)

    def distance_to(self, other: "Vec2") -> float:
        """Euclidean distance to another point [km]"""
        return euclidean_distance(self, other)

    def lerp(self, other: "Vec2", t: float) -> "Vec2":
        """Linear interpolation toward ``other`` (t=0 -> self, t=1 -> other)."""
        return lerp(self, other, t)

    def to_dict(self) -> dict:
        return {'x': self.x, 'y': self.y}

    @classmethod
    def from_dict(cls, data: dict) -> "Vec2":
        return cls(float(data['x']), float(data['y']))


ORIGIN = Vec2(0.0, 0.0)


def euclidean_distance(a: Vec2, b: Vec2) -> float:
    """Euclidean distance between two 2D points."""
    dx = a.x - b.x
    dy = a.y - b.y
    return math.sqrt(dx * dx + dy * dy)


def lerp(a: Vec2, b: Vec2, t: float) -> Vec2:
    """Linear interpolation between two 2D points."""
    return Vec2(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)
