# loads.py - Member loads and fixed-end moments
"""
MEMBER LOADS AND FIXED-END MOMENTS
==================================

Three member load types are supported, all measured from the member START
along the member axis:

    PointLoad(position, magnitude)
    UniformLoad(start, span, intensity)
    TrapezoidalLoad(high_magnitude, high_position, low_magnitude, low_position)

SIGN CONVENTION:
----------------
A positive magnitude acts along the member's right-hand normal, i.e. the
member axis turned a quarter turn clockwise:

- Beam drawn left → right: positive load points DOWN (gravity)
- Column drawn bottom → top: positive load points RIGHT

Fixed-end moments are anticlockwise-positive moments acting ON the member
end. For a downward point load P at distance a from the start (b = L - a):

    FEM_start = +P·a·b²/L²
    FEM_end   = -P·a²·b/L²

Distributed loads integrate the point-load formula over their extent in
closed form, with contributions summed by ``math.fsum``.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Tuple, Union


def _power_integral(n: int, s1: float, s2: float) -> float:
    """∫ s^n ds over [s1, s2]."""
    return (s2 ** (n + 1) - s1 ** (n + 1)) / (n + 1)


@dataclass(frozen=True)
class _LinearSegment:
    """Load intensity varying linearly from q1 at s1 to q2 at s2 (s1 < s2)."""
    q1: float
    s1: float
    q2: float
    s2: float

    @property
    def gradient(self) -> float:
        return (self.q2 - self.q1) / (self.s2 - self.s1)

    def _alpha_beta(self) -> Tuple[float, float]:
        # q(s) = alpha + beta*s
        beta = self.gradient
        return self.q1 - beta * self.s1, beta

    def total(self) -> float:
        return 0.5 * (self.q1 + self.q2) * (self.s2 - self.s1)

    def first_moment(self) -> float:
        alpha, beta = self._alpha_beta()
        return math.fsum([alpha * _power_integral(1, self.s1, self.s2),
                          beta * _power_integral(2, self.s1, self.s2)])

    def fixed_end_moments(self, L: float) -> Tuple[float, float]:
        alpha, beta = self._alpha_beta()
        I = [_power_integral(n, self.s1, self.s2) for n in range(5)]
        # s(L-s)^2 = L^2 s - 2L s^2 + s^3
        start = math.fsum([
            alpha * L * L * I[1], -2.0 * alpha * L * I[2], alpha * I[3],
            beta * L * L * I[2], -2.0 * beta * L * I[3], beta * I[4],
        ]) / (L * L)
        # s^2(L-s) = L s^2 - s^3
        end = math.fsum([
            alpha * L * I[2], -alpha * I[3],
            beta * L * I[3], -beta * I[4],
        ]) / (L * L)
        return start, -end

    def cut(self, x: float) -> Tuple[float, float]:
        """Force and moment about x of the part of the load left of x."""
        if x <= self.s1:
            return 0.0, 0.0
        u = min(x, self.s2) - self.s1
        g = self.gradient
        force = self.q1 * u + 0.5 * g * u * u
        moment_about_s1 = 0.5 * self.q1 * u * u + g * u ** 3 / 3.0
        return force, force * (x - self.s1) - moment_about_s1


@dataclass(frozen=True)
class PointLoad:
    position: float
    magnitude: float

    def extent(self) -> Tuple[float, float]:
        return self.position, self.position

    def total(self) -> float:
        return self.magnitude

    def first_moment(self) -> float:
        return self.magnitude * self.position

    def resultant(self) -> "PointLoad":
        return self

    def fixed_end_moments(self, L: float) -> Tuple[float, float]:
        a = self.position
        b = L - a
        P = self.magnitude
        return P * a * b * b / (L * L), -P * a * a * b / (L * L)

    def cut(self, x: float, include_at: bool = True) -> Tuple[float, float]:
        """
        Force and moment about x of this load if it lies left of x.

        A load exactly at x counts only when ``include_at`` is True, which
        gives the "after" side of the shear jump.
        """
        if self.position < x or (include_at and self.position == x):
            return self.magnitude, self.magnitude * (x - self.position)
        return 0.0, 0.0


@dataclass(frozen=True)
class UniformLoad:
    """Constant intensity over [start, start + span]."""
    start: float
    span: float
    intensity: float

    def __post_init__(self):
        if self.span <= 0.0:
            raise ValueError(f"UniformLoad span must be positive, got {self.span}")
        if self.start < 0.0:
            raise ValueError(f"UniformLoad start must be non-negative, got {self.start}")

    @property
    def end(self) -> float:
        return self.start + self.span

    def _segment(self) -> _LinearSegment:
        return _LinearSegment(self.intensity, self.start, self.intensity, self.end)

    def extent(self) -> Tuple[float, float]:
        return self.start, self.end

    def total(self) -> float:
        return self.intensity * self.span

    def first_moment(self) -> float:
        return self.total() * (self.start + 0.5 * self.span)

    def resultant(self) -> PointLoad:
        return PointLoad(self.start + 0.5 * self.span, self.total())

    def fixed_end_moments(self, L: float) -> Tuple[float, float]:
        return self._segment().fixed_end_moments(L)

    def cut(self, x: float, include_at: bool = True) -> Tuple[float, float]:
        return self._segment().cut(x)


@dataclass(frozen=True)
class TrapezoidalLoad:
    """
    Linearly varying load from ``low_magnitude`` at ``low_position`` to
    ``high_magnitude`` at ``high_position``. The high ordinate may lie on
    either side of the low one; a full-span triangle is the special case
    ``low_magnitude == 0``.
    """
    high_magnitude: float
    high_position: float
    low_magnitude: float = 0.0
    low_position: float = 0.0

    def __post_init__(self):
        if self.high_position == self.low_position:
            raise ValueError("TrapezoidalLoad needs distinct high and low positions")
        if min(self.high_position, self.low_position) < 0.0:
            raise ValueError("TrapezoidalLoad positions must be non-negative")

    @property
    def rising(self) -> bool:
        """True when the high ordinate is nearer the member end."""
        return self.high_position > self.low_position

    def _segment(self) -> _LinearSegment:
        if self.rising:
            return _LinearSegment(self.low_magnitude, self.low_position,
                                  self.high_magnitude, self.high_position)
        return _LinearSegment(self.high_magnitude, self.high_position,
                              self.low_magnitude, self.low_position)

    def extent(self) -> Tuple[float, float]:
        return min(self.high_position, self.low_position), max(self.high_position, self.low_position)

    def total(self) -> float:
        return self._segment().total()

    def first_moment(self) -> float:
        return self._segment().first_moment()

    def resultant(self) -> PointLoad:
        total = self.total()
        if total == 0.0:
            # antisymmetric ordinates: no net force, report at mid-extent
            s1, s2 = self.extent()
            return PointLoad(0.5 * (s1 + s2), 0.0)
        return PointLoad(self.first_moment() / total, total)

    def fixed_end_moments(self, L: float) -> Tuple[float, float]:
        return self._segment().fixed_end_moments(L)

    def cut(self, x: float, include_at: bool = True) -> Tuple[float, float]:
        return self._segment().cut(x)


MemberLoad = Union[PointLoad, UniformLoad, TrapezoidalLoad]


@dataclass(frozen=True)
class FEMPair:
    """Fixed-end moments of one member (anticlockwise positive)."""
    start: float
    end: float


def fixed_end_moments(loads: Iterable[MemberLoad], length: float) -> FEMPair:
    """Sum the fixed-end moments of every load on a member of the given length."""
    if length <= 0.0:
        raise ValueError(f"Member length must be positive, got {length}")
    starts, ends = [], []
    for load in loads:
        s, e = load.fixed_end_moments(length)
        starts.append(s)
        ends.append(e)
    return FEMPair(math.fsum(starts), math.fsum(ends))


def fixed_end_moment(loads: Iterable[MemberLoad], length: float, end: str) -> float:
    """Fixed-end moment at ``end`` ('start' or 'end')."""
    pair = fixed_end_moments(loads, length)
    if end == "start":
        return pair.start
    if end == "end":
        return pair.end
    raise ValueError(f"end must be 'start' or 'end', got {end!r}")


def load_totals(loads: Iterable[MemberLoad]) -> Tuple[float, float]:
    """(Σ force, Σ first moment about the member start)."""
    loads = list(loads)
    return (math.fsum(l.total() for l in loads),
            math.fsum(l.first_moment() for l in loads))


def check_load_within(load: MemberLoad, length: float, tol: float = 1e-9) -> None:
    s1, s2 = load.extent()
    if s1 < -tol or s2 > length + tol:
        raise ValueError(f"{load} lies outside member length {length}")


def reversed_load(load: MemberLoad, length: float) -> MemberLoad:
    """
    The same physical load on the member drawn end → start.

    Positions are measured from the other end and, because the positive-load
    normal turns over with the member, magnitudes change sign.
    """
    if isinstance(load, PointLoad):
        return PointLoad(length - load.position, -load.magnitude)
    if isinstance(load, UniformLoad):
        return UniformLoad(max(0.0, length - load.end), load.span, -load.intensity)
    if isinstance(load, TrapezoidalLoad):
        return TrapezoidalLoad(-load.high_magnitude, length - load.high_position,
                               -load.low_magnitude, length - load.low_position)
    raise TypeError(f"Unsupported load type {type(load).__name__}")
