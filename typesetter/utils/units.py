"""Dimension units used by the typesetter and the conversion rules between them.

All paragraph layout is measured in scaled points (sp), an integer unit small
enough that rounding errors stay invisible, so every computation is integer
arithmetic and the output is identical on every machine. Millimeters and
points only appear at the boundary, for humans.

The conversion rules are 1 in = 72.27 pt = 2.54 cm and 1 pt = 65,536 sp.
"""
from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Union

SP_PER_POINT = 65536
POINTS_PER_INCH = 72.27
MM_PER_INCH = 25.4

Number = Union[int, float]


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties going away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True, slots=True, order=True)
class Sp:
    """Scaled point, equal to 1/65,536 of a point."""

    value: int

    def __add__(self, other: object) -> "Sp":
        if not isinstance(other, Sp):
            return NotImplemented
        return Sp(self.value + other.value)

    def __sub__(self, other: object) -> "Sp":
        if not isinstance(other, Sp):
            return NotImplemented
        return Sp(self.value - other.value)

    def __neg__(self) -> "Sp":
        return Sp(-self.value)

    def __repr__(self) -> str:
        return f"{self.value} sp"


@dataclass(frozen=True, slots=True, order=True)
class Pt:
    """Typographic point, the rendering unit."""

    value: float

    def __add__(self, other: object) -> "Pt":
        if not isinstance(other, Pt):
            return NotImplemented
        return Pt(self.value + other.value)

    def __sub__(self, other: object) -> "Pt":
        if not isinstance(other, Pt):
            return NotImplemented
        return Pt(self.value - other.value)

    def __mul__(self, factor: Number) -> "Pt":
        if isinstance(factor, (Sp, Pt, Mm)):
            return NotImplemented
        return Pt(self.value * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: Number) -> "Pt":
        if isinstance(divisor, (Sp, Pt, Mm)):
            return NotImplemented
        return Pt(self.value / divisor)

    def __repr__(self) -> str:
        return f"{self.value} pt"


@dataclass(frozen=True, slots=True, order=True)
class Mm:
    """Millimeters."""

    value: float

    def __add__(self, other: object) -> "Mm":
        if not isinstance(other, Mm):
            return NotImplemented
        return Mm(self.value + other.value)

    def __sub__(self, other: object) -> "Mm":
        if not isinstance(other, Mm):
            return NotImplemented
        return Mm(self.value - other.value)

    def __repr__(self) -> str:
        return f"{self.value} mm"


# Anything beyond these bounds is considered infinite.
PLUS_INFINITY = Sp(10_000_000_000)
MINUS_INFINITY = Sp(-10_000_000_000)


def mm_to_sp(mm: Mm) -> Sp:
    """Convert millimeters to scaled points, rounding to the nearest unit."""
    return Sp(round_half_away_from_zero((POINTS_PER_INCH / MM_PER_INCH) * 65536.0 * mm.value))


def sp_to_mm(sp: Sp) -> Mm:
    """Convert scaled points to millimeters."""
    return Mm((MM_PER_INCH / (POINTS_PER_INCH * 65536.0)) * float(sp.value))


def pt_to_sp(pt: Pt) -> Sp:
    """Convert points to scaled points, rounding to the nearest unit."""
    return Sp(round_half_away_from_zero(65536.0 * pt.value))


def sp_to_pt(sp: Sp) -> Pt:
    """Convert scaled points to points."""
    return Pt(float(sp.value) / 65536.0)


def pt_to_mm(pt: Pt) -> Mm:
    """Convert points to millimeters."""
    return Mm((MM_PER_INCH / POINTS_PER_INCH) * pt.value)


def mm_to_pt(mm: Mm) -> Pt:
    """Convert millimeters to points."""
    return Pt((POINTS_PER_INCH / MM_PER_INCH) * mm.value)


def nearly_equal(a: float, b: float) -> bool:
    """Return True when two real-valued measures are close enough to be equal.

    Only meant for comparing independently computed millimeter or point
    values in tests and diagnostics; layout decisions never go through it.

    >>> nearly_equal(3.0, 2.99999)
    True
    >>> nearly_equal(4.0, 3.999)
    False
    """
    abs_a = abs(a)
    abs_b = abs(b)
    diff = abs(a - b)

    if a == b:
        # Handles infinities.
        return True
    if a == 0.0 or b == 0.0 or diff < sys.float_info.min:
        # Close to zero, relative error is meaningless.
        return diff < (sys.float_info.epsilon * sys.float_info.min)
    return (diff / min(abs_a + abs_b, sys.float_info.max)) < 10e-5
