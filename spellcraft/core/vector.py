"""
Wektor 2D dla pozycji i kierunków pocisków.

Silnik nie symuluje ruchu ani kolizji - potrzebuje jedynie
pozycji (origin, target, punkt trafienia) oraz podstawowych
operacji na kierunkach: normalizacji, obrotu o kąt i odległości.

Przykład użycia:
    >>> a = Vec2(0, 0)
    >>> b = Vec2(3, 4)
    >>> a.distance(b)
    5.0
    >>> Vec2(1, 0).rotated(90).y
    1.0
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Tuple


@dataclass(frozen=True)
class Vec2:
    """
    Niemutowalny wektor (x, y).

    Może być używany jako klucz w słowniku lub element zbioru.
    """
    x: float = 0.0
    y: float = 0.0

    # ─────────────────────────────────────────────────────────────────────────
    # ARYTMETYKA
    # ─────────────────────────────────────────────────────────────────────────

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    # ─────────────────────────────────────────────────────────────────────────
    # GEOMETRIA
    # ─────────────────────────────────────────────────────────────────────────

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance(self, other: Vec2) -> float:
        """Odległość euklidesowa."""
        return (self - other).length()

    def dot(self, other: Vec2) -> float:
        return self.x * other.x + self.y * other.y

    def normalized(self) -> Vec2:
        """
        Wektor jednostkowy w tym samym kierunku.

        Wektor zerowy zostaje zerowy (brak kierunku).
        """
        length = self.length()
        if length == 0:
            return Vec2(0.0, 0.0)
        return Vec2(self.x / length, self.y / length)

    def angle_degrees(self) -> float:
        """Kąt względem osi X w stopniach."""
        return math.degrees(math.atan2(self.y, self.x))

    def rotated(self, degrees: float) -> Vec2:
        """Obrót o podany kąt (przeciwnie do ruchu wskazówek zegara)."""
        rad = math.radians(degrees)
        cos_a = math.cos(rad)
        sin_a = math.sin(rad)
        return Vec2(self.x * cos_a - self.y * sin_a, self.x * sin_a + self.y * cos_a)

    @classmethod
    def from_angle(cls, degrees: float) -> Vec2:
        """Wektor jednostkowy o danym kącie."""
        rad = math.radians(degrees)
        return cls(math.cos(rad), math.sin(rad))

    @property
    def xy(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self) -> str:
        return f"Vec2({self.x:g}, {self.y:g})"
