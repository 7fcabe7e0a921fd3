"""
TEST: Fixed-End Moments and Load Resultants
===========================================

Checks the closed-form fixed-end moments against textbook results and
against a brute-force sum of many small point loads.
"""

import numpy as np
import pytest

from slopedeflect.loads import (
    PointLoad,
    TrapezoidalLoad,
    UniformLoad,
    fixed_end_moment,
    fixed_end_moments,
    load_totals,
    reversed_load,
)


def _as_point_loads(load, n=4000):
    """Midpoint-rule discretization of a distributed load."""
    s1, s2 = load.extent()
    ds = (s2 - s1) / n
    points = []
    for i in range(n):
        s = s1 + (i + 0.5) * ds
        force, _ = load.cut(s + 0.5 * ds)
        prev, _ = load.cut(s - 0.5 * ds)
        points.append(PointLoad(s, force - prev))
    return points


def test_point_load_fem_textbook():
    """P·a·b²/L² at the start, -P·a²·b/L² at the end."""
    fem = fixed_end_moments([PointLoad(2.0, 12.0)], 6.0)
    assert np.isclose(fem.start, 12.0 * 2.0 * 16.0 / 36.0)
    assert np.isclose(fem.end, -12.0 * 4.0 * 4.0 / 36.0)


def test_midspan_point_load_is_pl_over_8():
    fem = fixed_end_moments([PointLoad(5.0, 8.0)], 10.0)
    assert np.isclose(fem.start, 8.0 * 10.0 / 8.0)
    assert np.isclose(fem.end, -8.0 * 10.0 / 8.0)


def test_full_span_udl_is_wl2_over_12():
    w, L = 3.0, 20.0
    fem = fixed_end_moments([UniformLoad(0.0, L, w)], L)
    assert np.isclose(fem.start, w * L**2 / 12)
    assert np.isclose(fem.end, -w * L**2 / 12)


def test_partial_udl_matches_point_load_integration():
    """A UDL over part of the span equals the sum of its slices."""
    load = UniformLoad(1.5, 3.0, 7.0)
    L = 8.0
    exact = fixed_end_moments([load], L)
    approx = fixed_end_moments(_as_point_loads(load), L)
    assert np.isclose(exact.start, approx.start, rtol=1e-6)
    assert np.isclose(exact.end, approx.end, rtol=1e-6)


def test_triangular_load_rising_to_end():
    """0 at the start to w at the end: wL²/30 and -wL²/20."""
    w, L = 6.0, 5.0
    fem = fixed_end_moments([TrapezoidalLoad(w, L, 0.0, 0.0)], L)
    assert np.isclose(fem.start, w * L**2 / 30)
    assert np.isclose(fem.end, -w * L**2 / 20)


def test_triangular_load_falling_to_end_mirrors():
    w, L = 6.0, 5.0
    fem = fixed_end_moments([TrapezoidalLoad(w, 0.0, 0.0, L)], L)
    assert np.isclose(fem.start, w * L**2 / 20)
    assert np.isclose(fem.end, -w * L**2 / 30)


def test_partial_trapezoid_matches_point_load_integration():
    load = TrapezoidalLoad(high_magnitude=9.0, high_position=2.0, low_magnitude=3.0, low_position=6.5)
    L = 7.0
    exact = fixed_end_moments([load], L)
    approx = fixed_end_moments(_as_point_loads(load), L)
    assert np.isclose(exact.start, approx.start, rtol=1e-6)
    assert np.isclose(exact.end, approx.end, rtol=1e-6)


def test_trapezoid_with_equal_ordinates_is_uniform():
    L = 9.0
    trap = fixed_end_moments([TrapezoidalLoad(4.0, 7.0, 4.0, 2.0)], L)
    udl = fixed_end_moments([UniformLoad(2.0, 5.0, 4.0)], L)
    assert np.isclose(trap.start, udl.start)
    assert np.isclose(trap.end, udl.end)


def test_fems_add_over_loads():
    L = 6.0
    loads = [PointLoad(2.0, 5.0), UniformLoad(0.0, 6.0, 2.0)]
    total = fixed_end_moments(loads, L)
    parts = [fixed_end_moments([ld], L) for ld in loads]
    assert np.isclose(total.start, sum(p.start for p in parts))
    assert np.isclose(fixed_end_moment(loads, L, "end"), sum(p.end for p in parts))


def test_fixed_end_moment_rejects_bad_end():
    with pytest.raises(ValueError):
        fixed_end_moment([PointLoad(1.0, 1.0)], 2.0, "middle")


def test_degenerate_loads_raise():
    with pytest.raises(ValueError):
        TrapezoidalLoad(5.0, 2.0, 1.0, 2.0)
    with pytest.raises(ValueError):
        UniformLoad(0.0, 0.0, 5.0)


def test_resultants():
    udl = UniformLoad(1.0, 4.0, 2.5)
    r = udl.resultant()
    assert np.isclose(r.magnitude, 10.0)
    assert np.isclose(r.position, 3.0)

    # triangle 0 → 6 over [0, 3]: 9 at two thirds of the way
    tri = TrapezoidalLoad(6.0, 3.0, 0.0, 0.0)
    r = tri.resultant()
    assert np.isclose(r.magnitude, 9.0)
    assert np.isclose(r.position, 2.0)

    trap = TrapezoidalLoad(4.0, 0.0, 2.0, 3.0)
    r = trap.resultant()
    assert np.isclose(r.magnitude, 9.0)
    # 4 at s=0 falling to 2 at s=3: centroid L(a + 2b)/(3(a + b)) from s=0
    assert np.isclose(r.position, 3.0 * (4.0 + 2 * 2.0) / (3.0 * (4.0 + 2.0)))

    total, first = load_totals([udl, tri])
    assert np.isclose(total, 19.0)
    assert np.isclose(first, 10.0 * 3.0 + 9.0 * 2.0)


def test_reversed_load_preserves_fems():
    """Drawing the member the other way swaps the FEMs."""
    L = 8.0
    for load in (PointLoad(3.0, 4.0), UniformLoad(1.0, 5.0, 2.0), TrapezoidalLoad(3.0, 6.0, 1.0, 2.0)):
        fwd = fixed_end_moments([load], L)
        rev = fixed_end_moments([reversed_load(load, L)], L)
        assert np.isclose(rev.start, fwd.end)
        assert np.isclose(rev.end, fwd.start)
