"""
TEST: Cantilevers
=================

A member with one free end is statically determinate: the root moment and
reactions follow from statics alone and no rotation unknowns are needed.
"""

import numpy as np

from slopedeflect import FrameSolver, PointLoad, Structure, Support, UniformLoad


def _beam_cantilever(loads, tip_moment=0.0, tip_fy=0.0):
    s = Structure()
    s.add_node("A", 0.0, 0.0, Support("fixed"))
    s.add_node("B", 5.0, 0.0, fy=tip_fy, moment=tip_moment)
    s.add_beam("AB", "A", "B", E=1.0, I=1.0, loads=loads)
    return s


def test_cantilever_point_load_root_moment():
    """12 kN at 3 m on a 5 m cantilever: root moment 36, reaction 12."""
    result = FrameSolver(_beam_cantilever([PointLoad(3.0, 12.0)])).solve()

    assert np.isclose(result.moments["MOMENTAB"], 36.0)
    assert np.isclose(result.moments["MOMENTBA"], 0.0)
    assert result.unknowns == {}

    r = result.reactions["A"]
    assert np.isclose(r.y_reaction, 12.0)
    assert np.isclose(r.x_reaction, 0.0, atol=1e-9)
    assert np.isclose(r.moment_reaction, 36.0)


def test_cantilever_udl():
    w, L = 4.0, 5.0
    result = FrameSolver(_beam_cantilever([UniformLoad(0.0, L, w)])).solve()
    assert np.isclose(result.moment("A", "B"), w * L**2 / 2)
    assert np.isclose(result.reactions["A"].y_reaction, w * L)


def test_cantilever_tip_loads():
    """Loads applied at the free node reach the root."""
    result = FrameSolver(_beam_cantilever([], tip_moment=7.0, tip_fy=2.0)).solve()
    # 2·5 from the tip force, plus the clockwise tip couple carried through
    assert np.isclose(result.moment("A", "B"), 17.0)
    assert np.isclose(result.moment("B", "A"), -7.0)
    assert np.isclose(result.reactions["A"].y_reaction, 2.0)
    assert np.isclose(result.reactions["A"].moment_reaction, 17.0)


def test_cantilever_drawn_from_the_tip():
    """Same cantilever with the member drawn free end → fixed end."""
    s = Structure()
    s.add_node("B", 5.0, 0.0)
    s.add_node("A", 0.0, 0.0, Support("fixed"))
    # load 12 at 3 m from A is 2 m from B; positive load points up for a right-to-left beam
    s.add_beam("BA", "B", "A", E=1.0, I=1.0, loads=[PointLoad(2.0, -12.0)])
    result = FrameSolver(s).solve()

    assert np.isclose(result.moment("A", "B"), 36.0)
    assert np.isclose(result.moment("B", "A"), 0.0)
    assert np.isclose(result.reactions["A"].y_reaction, 12.0)


def test_cantilever_column_with_lateral_tip_load():
    s = Structure()
    s.add_node("A", 0.0, 0.0, Support("fixed"))
    s.add_node("B", 0.0, 4.0, fx=5.0)
    s.add_column("AB", "A", "B", E=1.0, I=1.0)
    result = FrameSolver(s).solve()

    assert np.isclose(result.moment("A", "B"), 20.0)
    r = result.reactions["A"]
    assert np.isclose(r.x_reaction, 5.0)
    assert np.isclose(r.y_reaction, 0.0, atol=1e-9)
    assert np.isclose(r.moment_reaction, 20.0)
