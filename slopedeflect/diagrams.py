# slopedeflect/diagrams.py
"""
INTERNAL FORCE DIAGRAMS
=======================

This module samples shear, bending moment and axial force along a member
once its end moments are known. Everything follows from statics of the
member as a free body, so samples are a pure function of the solved end
forces and the member loads.

KEY RELATIONS (x measured from the member start):
-------------------------------------------------
    V(x) = R_start - Σ loads left of x
    M(x) = -M_start + R_start·x - Σ (moments of loads left of x about x)
    N(x) = N

SIGN CONVENTIONS:
-----------------
- Positive M: sagging (tension on the side the positive load points to)
- Positive V: R_start sense, i.e. opposing a positive load at the left cut
- Positive N: tension

With these conventions M(0) = -M_start and M(L) = M_end, so a hogging
support moment reads negative.

At every point load the diagram carries two samples at the same x: the
"before" value and the "after" value, so the shear jump is explicit.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .model import Member
from .post import MemberEndForces
from .loads import PointLoad


@dataclass(frozen=True)
class DiagramPoint:
    """A single point on a force diagram."""
    x: float            # Position along member (0 to L)
    shear: float
    moment: float
    axial: float


@dataclass(frozen=True)
class SpanExtremes:
    max_sagging: float  # >= 0
    max_hogging: float  # <= 0
    max_shear: float    # largest |V|


def _sample_positions(member: Member, L: float, steps: int) -> List[float]:
    xs = [L * i / steps for i in range(steps + 1)]
    for load in member.loads:
        xs.extend(load.extent())
    xs = sorted(min(max(x, 0.0), L) for x in xs)
    out = []
    for x in xs:
        if not out or x - out[-1] > 1e-12 * max(L, 1.0):
            out.append(x)
    return out


def _point_at(member: Member, f: MemberEndForces, x: float, include_at: bool) -> DiagramPoint:
    forces, moments = [], []
    for load in member.loads:
        p, mo = load.cut(x, include_at)
        forces.append(p)
        moments.append(mo)
    shear = f.r_start - math.fsum(forces)
    moment = math.fsum([-f.m_start, f.r_start * x, -math.fsum(moments)])
    return DiagramPoint(x, shear, moment, f.axial)


def sample_member(member: Member, forces: MemberEndForces, steps: int = 100) -> List[DiagramPoint]:
    """
    Sample V, M, N along a member.

    Parameters:
    -----------
    member : Member
        The member, with its loads
    forces : MemberEndForces
        Solved end moments, transverse end reactions and axial force
    steps : int
        Number of equal intervals; load boundaries are always added

    Returns:
    --------
    List[DiagramPoint]
        Ordered by x; a point-load position yields a before/after pair
    """
    L = forces.length
    point_positions = {ld.position for ld in member.loads if isinstance(ld, PointLoad)}
    points = []
    for x in _sample_positions(member, L, steps):
        if any(abs(x - a) <= 1e-12 * max(L, 1.0) for a in point_positions):
            points.append(_point_at(member, forces, x, include_at=False))
        points.append(_point_at(member, forces, x, include_at=True))
    return points


def span_extremes(points: Sequence[DiagramPoint]) -> SpanExtremes:
    """Largest sagging (clamped at 0) and hogging (clamped at 0) moments."""
    if not points:
        return SpanExtremes(0.0, 0.0, 0.0)
    moments = [p.moment for p in points]
    return SpanExtremes(
        max_sagging=max(0.0, max(moments)),
        max_hogging=min(0.0, min(moments)),
        max_shear=max(abs(p.shear) for p in points),
    )


def diagram_to_frame(points: Iterable[DiagramPoint], member_id: Optional[object] = None) -> pd.DataFrame:
    """Tabulate diagram samples (one row per sample)."""
    df = pd.DataFrame(
        [{'x': p.x, 'shear': p.shear, 'moment': p.moment, 'axial': p.axial} for p in points],
        columns=['x', 'shear', 'moment', 'axial'],
    )
    if member_id is not None:
        df.insert(0, 'member', member_id)
    return df
