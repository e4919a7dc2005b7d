# -*- coding: utf-8 -*-
########################
# coord.py
########################
# Purpose:
# - 2D position value type used by pad layouts and the step generator.
#
# Design notes:
# - Immutable. Units are "panel units" specific to a layout.
# - angle() never returns a raw atan2 value. It unwraps the bearing so it stays
#   continuous with the previously committed angle.
#
########################
# Interfaces:
# Public dataclasses:
# - Coord(x: float, y: float)
#   - dist(other: Coord) -> float
#   - angle(other: Coord, prev: float) -> float
#   - __add__, __sub__ (component-wise), __mul__ (scalar)
#
########################

from __future__ import annotations

import math
from dataclasses import dataclass


_TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class Coord:
    x: float
    y: float

    def __add__(self, other: Coord) -> Coord:
        return Coord(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Coord) -> Coord:
        return Coord(self.x - other.x, self.y - other.y)

    def __mul__(self, scale: float) -> Coord:
        return Coord(self.x * float(scale), self.y * float(scale))

    __rmul__ = __mul__

    def dist(self, other: Coord) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    def angle(self, other: Coord, prev: float) -> float:
        """Bearing from self to other, in (prev - pi, prev + pi].

        The result is congruent to atan2(dy, dx) modulo 2 pi. At exactly
        prev + pi the upper representative is returned.
        """
        raw = math.atan2(other.y - self.y, other.x - self.x)
        turns = math.floor((float(prev) - raw + math.pi) / _TWO_PI)
        return raw + turns * _TWO_PI


def _run_unit_tests() -> None:
    a = Coord(0.0, 1.0)
    b = Coord(2.0, 1.0)
    assert a.dist(b) == b.dist(a) == 2.0
    assert a.dist(a) == 0.0
    assert a + b == Coord(2.0, 2.0)
    assert b - a == Coord(2.0, 0.0)
    assert (b - a) * 0.5 == Coord(1.0, 0.0)

    assert a.angle(b, 0.0) == 0.0
    assert abs(b.angle(a, 3.0) - math.pi) < 1e-9
    assert abs(b.angle(a, -3.0) - (-math.pi)) < 1e-9
    assert a.angle(Coord(1.0, 2.0), 0.2) == a.angle(Coord(1.0, 2.0), 0.221)
    assert abs(a.angle(b, 2.0 * math.pi) - 2.0 * math.pi) < 1e-9


if __name__ == "__main__":
    _run_unit_tests()
    print("coord.py: ok")
