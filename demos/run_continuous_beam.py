# File: demos/run_continuous_beam.py
"""
DEMO: THREE-SPAN CONTINUOUS BEAM
================================

A three-span beam on a pinned support and three rollers, with a UDL, a
point load and a triangular load, plus a settlement of one interior
support. Prints the support moments either side of each support, the
reactions, and the sagging / hogging extremes of each span.
"""

from slopedeflect import BeamSolver, PointLoad, Structure, Support, TrapezoidalLoad, UniformLoad
from slopedeflect.diagrams import diagram_to_frame


def main():
    print("=" * 70)
    print("DEMO: THREE-SPAN CONTINUOUS BEAM")
    print("=" * 70)
    print()

    E, I = 200e6, 1.2e-4  # kN/m², m⁴

    s = Structure()
    s.add_node("A", 0.0, 0.0, Support("pinned"))
    s.add_node("B", 5.0, 0.0, Support("roller", settlement=0.005))
    s.add_node("C", 11.0, 0.0, Support("roller"))
    s.add_node("D", 15.0, 0.0, Support("roller"))
    s.add_beam("AB", "A", "B", E, I, loads=[UniformLoad(0.0, 5.0, 15.0)])
    s.add_beam("BC", "B", "C", E, I, loads=[PointLoad(2.0, 40.0)])
    s.add_beam("CD", "C", "D", E, I, loads=[TrapezoidalLoad(20.0, 4.0, 0.0, 0.0)])

    result = BeamSolver(s).solve()

    print("Support moments (kN·m)")
    print("-" * 70)
    for nid, sm in result.support_moments.items():
        print(f"  {nid}: left {sm.left: 9.3f}   right {sm.right: 9.3f}")

    print()
    print("Support reactions (kN)")
    print("-" * 70)
    for nid, r in result.support_reactions.items():
        print(f"  {nid}: {r.y_reaction: 9.3f}")

    print()
    print("Span extremes (kN·m)")
    print("-" * 70)
    for mid, ext in result.all_span_extremes().items():
        print(f"  {mid}: sagging {ext.max_sagging: 8.3f}   hogging {ext.max_hogging: 8.3f}")

    print()
    print("Span BC samples")
    print("-" * 70)
    print(diagram_to_frame(result.diagram("BC", steps=6), member_id="BC").to_string(index=False))
    print()


if __name__ == "__main__":
    main()
