"""
TEST: Portal Frame Equilibrium and Sway
=======================================

This test validates that the frame solver:
1. Reproduces the classical fixed-base portal under a lateral load
2. Recognises a braced (closed) frame as non-sway
3. Satisfies global equilibrium (reactions balance the applied loads)
4. Reports a frame with no horizontal restraint as a mechanism
5. Keeps a lateral load in balance when the frame is only kinematically
   braced, or hangs from a single support
"""

import numpy as np
import pytest

from slopedeflect import FrameSolver, MechanismError, Structure, Support, UniformLoad
from slopedeflect.post import equilibrium_residual


def _portal(base="fixed", fx=10.0, beam_loads=()):
    s = Structure()
    s.add_node("A", 0.0, 0.0, Support(base))
    s.add_node("B", 0.0, 4.0, fx=fx)
    s.add_node("C", 6.0, 4.0)
    s.add_node("D", 6.0, 0.0, Support(base))
    s.add_column("AB", "A", "B", E=1.0, I=1.0)
    s.add_beam("BC", "B", "C", E=1.0, I=1.0, loads=beam_loads)
    s.add_column("DC", "D", "C", E=1.0, I=1.0)
    return s


def test_fixed_portal_lateral_load_moments():
    """Lateral 10 at B: column base 12, column top 8, antisymmetric beam."""
    result = FrameSolver(_portal()).solve()
    m = result.moments

    assert m["MOMENTAB"] == pytest.approx(12.0)
    assert m["MOMENTBA"] == pytest.approx(8.0)
    assert m["MOMENTBC"] == pytest.approx(-8.0)
    assert m["MOMENTCB"] == pytest.approx(-8.0)
    assert m["MOMENTCD"] == pytest.approx(8.0)
    assert m["MOMENTDC"] == pytest.approx(12.0)

    assert result.mode == "sway"
    assert set(result.unknowns) == {"THETA_B", "THETA_C", "DELTA_1"}
    assert result.unknowns["DELTA_1"] == pytest.approx(128.0 / 3.0)
    assert result.is_side_sway()


def test_fixed_portal_lateral_load_reactions():
    result = FrameSolver(_portal()).solve()
    ra, rd = result.reactions["A"], result.reactions["D"]

    assert ra.x_reaction == pytest.approx(5.0)
    assert rd.x_reaction == pytest.approx(5.0)
    assert ra.y_reaction == pytest.approx(-8.0 / 3.0)
    assert rd.y_reaction == pytest.approx(8.0 / 3.0)
    assert ra.moment_reaction == pytest.approx(12.0)
    assert rd.moment_reaction == pytest.approx(12.0)


def test_joint_moment_balance():
    result = FrameSolver(_portal(fx=7.0, beam_loads=[UniformLoad(0.0, 6.0, 3.0)])).solve()
    for node in ("B", "C"):
        total = sum(
            result.moment(node, m.other_end(node))
            for m, _ in result.structure.incident_ends(node)
        )
        assert total == pytest.approx(0.0, abs=1e-9)


def test_portal_global_equilibrium():
    for base in ("fixed", "pinned"):
        result = FrameSolver(_portal(base, fx=5.0, beam_loads=[UniformLoad(1.0, 3.0, 20.0)])).solve()
        rx, ry = equilibrium_residual(result.structure, result.reactions)
        assert rx == pytest.approx(0.0, abs=1e-6)
        assert ry == pytest.approx(0.0, abs=1e-6)


def test_symmetric_gravity_portal_does_not_sway():
    """Sway susceptible, but a symmetric gravity load produces no translation."""
    result = FrameSolver(_portal(fx=0.0, beam_loads=[UniformLoad(0.0, 6.0, 10.0)])).solve()
    assert result.mode == "sway"
    assert "DELTA_1" in result.unknowns
    assert not result.is_side_sway()
    assert result.moment("A", "B") == pytest.approx(-result.moment("D", "C"))


def test_closed_frame_is_non_sway():
    """A ground beam closes the portal: no DELTA unknowns at all."""
    s = Structure()
    s.add_node("A", 0.0, 0.0, Support("fixed"))
    s.add_node("B", 0.0, 4.0)
    s.add_node("C", 6.0, 4.0)
    s.add_node("D", 6.0, 0.0, Support("fixed"))
    s.add_column("AB", "A", "B", E=1.0, I=1.0)
    s.add_beam("BC", "B", "C", E=1.0, I=1.0, loads=[UniformLoad(0.0, 6.0, 10.0)])
    s.add_column("CD", "C", "D", E=1.0, I=1.0)
    s.add_beam("AD", "A", "D", E=1.0, I=1.0)

    solver = FrameSolver(s)
    assert solver.analysis_mode() == "non-sway"
    result = solver.solve()

    assert not any(name.startswith("DELTA") for name in result.unknowns)
    assert not result.is_side_sway()
    assert result.moment("B", "C") == pytest.approx(22.5)
    assert result.moment("B", "A") == pytest.approx(-22.5)
    assert result.moment("A", "B") == pytest.approx(-11.25)
    assert result.moment("C", "D") == pytest.approx(22.5)
    assert result.reactions["A"].y_reaction == pytest.approx(30.0)
    assert result.reactions["D"].y_reaction == pytest.approx(30.0)
    assert result.reactions["A"].x_reaction == pytest.approx(-result.reactions["D"].x_reaction)


def test_frame_on_rollers_is_a_mechanism():
    """Nothing resists a horizontal rigid-body translation."""
    with pytest.raises(MechanismError):
        FrameSolver(_portal(base="roller")).solve()


def test_repeated_solves_are_identical():
    solver = FrameSolver(_portal(beam_loads=[UniformLoad(0.0, 6.0, 2.0)]))
    first = solver.solve()
    second = solver.solve()
    assert first.moments == second.moments
    assert solver.final_moments() == first.moments
    assert np.isclose(solver.reactions()["A"].x_reaction, first.reactions["A"].x_reaction)


def _closed_frame(fx=0.0, beam_loads=()):
    s = Structure()
    s.add_node("A", 0.0, 0.0, Support("fixed"))
    s.add_node("B", 0.0, 4.0, fx=fx)
    s.add_node("C", 6.0, 4.0)
    s.add_node("D", 6.0, 0.0, Support("fixed"))
    s.add_column("AB", "A", "B", E=1.0, I=1.0)
    s.add_beam("BC", "B", "C", E=1.0, I=1.0, loads=beam_loads)
    s.add_column("CD", "C", "D", E=1.0, I=1.0)
    s.add_beam("AD", "A", "D", E=1.0, I=1.0)
    return s


def test_closed_frame_under_lateral_load_is_resolved_with_sway():
    """
    The ground beam makes the frame kinematically non-sway, but nothing stops
    the top beam translating: a lateral load must still reach the supports.
    """
    solver = FrameSolver(_closed_frame(fx=10.0))
    assert solver.analysis_mode() == "non-sway"
    result = solver.solve()

    assert result.mode == "sway"
    assert result.is_side_sway()
    assert result.unknowns["DELTA_1"] == pytest.approx(128.0 / 3.0)

    # the fixed-fixed ground beam is unloaded, so the portal values carry over
    open_portal = FrameSolver(_portal()).solve()
    for (a, b), value in open_portal.end_moments.items():
        assert result.moment(a, b) == pytest.approx(value, abs=1e-9)

    assert result.reactions["A"].x_reaction == pytest.approx(5.0)
    assert result.reactions["D"].x_reaction == pytest.approx(5.0)
    rx, ry = result.equilibrium_residual()
    assert abs(rx) < 1e-6
    assert abs(ry) < 1e-6
    assert result.is_balanced()


def test_closed_frame_under_symmetric_gravity_stays_non_sway():
    result = FrameSolver(_closed_frame(beam_loads=[UniformLoad(0.0, 6.0, 10.0)])).solve()
    assert result.mode == "non-sway"
    assert result.deltas() == {}
    assert result.is_balanced()


def test_portal_with_one_base_support_sways():
    """
    Fixed A, the right-hand column hangs free from C. The frame is a
    cantilever: the whole lateral load goes to A and the beam carries no
    bending.
    """
    s = Structure()
    s.add_node("A", 0.0, 0.0, Support("fixed"))
    s.add_node("B", 0.0, 4.0, fx=10.0)
    s.add_node("C", 6.0, 4.0)
    s.add_node("D", 6.0, 0.0)
    s.add_column("AB", "A", "B", E=1.0, I=1.0)
    s.add_beam("BC", "B", "C", E=1.0, I=1.0)
    s.add_column("DC", "D", "C", E=1.0, I=1.0)

    solver = FrameSolver(s)
    assert solver.is_sway_susceptible()
    result = solver.solve()

    assert result.mode == "sway"
    assert abs(result.unknowns["DELTA_1"]) > 1e-6
    assert result.is_side_sway()
    assert abs(result.lifts()["LIFT_1"]) > 1e-6

    assert result.moment("A", "B") == pytest.approx(40.0)
    assert result.moment("B", "A") == pytest.approx(0.0, abs=1e-9)
    assert result.moment("B", "C") == pytest.approx(0.0, abs=1e-9)
    assert result.moment("C", "B") == pytest.approx(0.0, abs=1e-9)

    ra = result.reactions["A"]
    assert ra.x_reaction == pytest.approx(10.0)
    assert ra.y_reaction == pytest.approx(0.0, abs=1e-9)
    assert ra.moment_reaction == pytest.approx(40.0)
    rx, ry = result.equilibrium_residual()
    assert abs(rx) < 1e-6
    assert abs(ry) < 1e-6
