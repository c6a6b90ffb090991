"""Plane vectors and the 2D camera used to map the world onto the screen."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator


@dataclass(frozen=True)
class Vec2:
    """An immutable 2D vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vec2:
        return Vec2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Vec2:
        return Vec2(self.x / divisor, self.y / divisor)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def lerp(self, other: Vec2, t: float) -> Vec2:
        """Linear interpolation from this vector towards ``other``."""
        return Vec2(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def normalized(self) -> Vec2:
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.length()
        if length > 0.0:
            return Vec2(self.x / length, self.y / length)
        return Vec2()

    def dot(self, other: Vec2) -> float:
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance(self, other: Vec2) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


def _rotate(vector: Vec2, degrees: float) -> Vec2:
    if not degrees:
        return vector
    rad = math.radians(degrees)
    cos, sin = math.cos(rad), math.sin(rad)
    return Vec2(vector.x * cos - vector.y * sin, vector.x * sin + vector.y * cos)


@dataclass
class Camera:
    """A 2D camera: ``target`` in the world appears at ``offset`` on screen."""

    offset: Vec2 = field(default_factory=Vec2)
    target: Vec2 = field(default_factory=Vec2)
    rotation: float = 0.0
    zoom: float = 1.0

    def world_to_screen(self, point: Vec2) -> Vec2:
        return _rotate(point - self.target, self.rotation) * self.zoom + self.offset

    def screen_to_world(self, point: Vec2) -> Vec2:
        return _rotate((point - self.offset) / self.zoom, -self.rotation) + self.target