# Member geometry, stiffness factors and per-kind behaviour

import math
from dataclasses import dataclass
from typing import Dict, Hashable, Tuple

from .model import Member, MemberKind, Node


@dataclass(frozen=True)
class MemberGeometry:
    """
    Geometry of a member drawn from its start node to its end node.

    c, s are the direction cosines of start → end (x right, y up).
    """
    length: float
    c: float
    s: float

    @property
    def angle(self) -> float:
        return math.atan2(self.s, self.c)

    @property
    def normal(self) -> Tuple[float, float]:
        """Right-hand normal in physical axes: the positive member-load direction."""
        return self.s, -self.c

    @property
    def load_direction(self) -> Tuple[float, float]:
        """Positive member-load direction in load axes (x right, y down)."""
        return self.s, self.c

    @property
    def axis_load(self) -> Tuple[float, float]:
        """Unit start → end axis in load axes (x right, y down)."""
        return self.c, -self.s

    @property
    def rises(self) -> bool:
        """End node above start node."""
        return self.s > 0.0


def member_geometry(nodes: Dict[Hashable, Node], m: Member) -> MemberGeometry:
    ni = nodes[m.ni]
    nj = nodes[m.nj]
    dx = nj.x - ni.x
    dy = nj.y - ni.y
    L = math.hypot(dx, dy)
    if L <= 0.0:
        raise ValueError(f"Member {m.id} has zero length.")
    return MemberGeometry(L, dx / L, dy / L)


def stiffness_factor(m: Member, L: float) -> float:
    """k = 2EI/L."""
    return 2.0 * m.EI / L


def chord_factor(m: Member, L: float) -> float:
    """6EI/L², multiplies a transverse end displacement."""
    return 6.0 * m.EI / (L * L)


@dataclass(frozen=True)
class KindBehavior:
    in_frame_analysis: bool   # takes part in slope-deflection equations
    links_sway_group: bool    # ties its end nodes into one sway group
    carries_sway_term: bool   # end moments depend on DELTA unknowns
    links_lift_group: bool    # ties its end nodes into one vertical group
    carries_lift_term: bool   # end moments depend on LIFT unknowns


KIND_BEHAVIOR = {
    MemberKind.BEAM: KindBehavior(
        in_frame_analysis=True, links_sway_group=True, carries_sway_term=False,
        links_lift_group=False, carries_lift_term=True,
    ),
    MemberKind.COLUMN: KindBehavior(
        in_frame_analysis=True, links_sway_group=False, carries_sway_term=True,
        links_lift_group=True, carries_lift_term=False,
    ),
    MemberKind.INCLINED: KindBehavior(
        in_frame_analysis=False, links_sway_group=False, carries_sway_term=False,
        links_lift_group=False, carries_lift_term=False,
    ),
}


def behavior(m: Member) -> KindBehavior:
    return KIND_BEHAVIOR[m.kind]
