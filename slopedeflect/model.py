# Support, Node, Member, Structure (dataclasses)
"""
Structural model for slope-deflection analysis.

Nodes and members live in a ``Structure`` arena keyed by id. Members refer to
their end nodes by id; the members incident on a node are derived from the
arena on demand, so there are no back references to keep in sync.

Nodal load axes: ``fx`` positive rightward, ``fy`` positive DOWNWARD,
``moment`` positive clockwise. Imposed displacements ``dx``/``dy`` are in
physical axes (rightward / upward). Support settlement is positive downward.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Hashable, Iterable, List, Optional, Tuple

from .config import AnalysisConfig, DEFAULT_CONFIG
from .loads import MemberLoad, check_load_within

logger = logging.getLogger(__name__)


class ModelError(ValueError):
    """Invalid structure definition."""
    pass


class UnsupportedMemberError(ModelError):
    """Member kind that the requested analysis cannot handle."""
    pass


class InconsistentModelError(RuntimeError):
    """Constraints or equilibrium conditions that cannot all hold."""
    pass


class SupportType(str, Enum):
    FIXED = "fixed"
    PINNED = "pinned"
    ROLLER = "roller"


# (x, y, rotation)
RESTRAINTS = {
    SupportType.FIXED: (True, True, True),
    SupportType.PINNED: (True, True, False),
    SupportType.ROLLER: (False, True, False),
}


@dataclass(frozen=True)
class Support:
    type: SupportType
    settlement: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "type", SupportType(self.type))

    @property
    def restrains_x(self) -> bool:
        return RESTRAINTS[self.type][0]

    @property
    def restrains_y(self) -> bool:
        return RESTRAINTS[self.type][1]

    @property
    def restrains_rotation(self) -> bool:
        return RESTRAINTS[self.type][2]

    @property
    def is_horizontal_restraint(self) -> bool:
        """Fixed or pinned: anchors a sway group."""
        return self.type in (SupportType.FIXED, SupportType.PINNED)


@dataclass(frozen=True)
class Node:
    id: Hashable
    x: float
    y: float
    support: Optional[Support] = None
    fx: float = 0.0
    fy: float = 0.0
    moment: float = 0.0
    dx: float = 0.0
    dy: float = 0.0

    @property
    def is_supported(self) -> bool:
        return self.support is not None

    @property
    def is_fixed(self) -> bool:
        return self.support is not None and self.support.type is SupportType.FIXED

    def restrains(self, axis: str) -> bool:
        if self.support is None:
            return False
        return self.support.restrains_x if axis == "x" else self.support.restrains_y


class MemberKind(Enum):
    BEAM = "beam"
    COLUMN = "column"
    INCLINED = "inclined"


@dataclass(frozen=True)
class Member:
    """
    Prismatic member between two nodes (flexurally deformable, axially rigid).
    """
    id: Hashable
    ni: Hashable
    nj: Hashable
    E: float
    I: float
    kind: MemberKind
    loads: Tuple[MemberLoad, ...] = ()

    @property
    def EI(self) -> float:
        return self.E * self.I

    def other_end(self, node_id: Hashable) -> Hashable:
        if node_id == self.ni:
            return self.nj
        if node_id == self.nj:
            return self.ni
        raise KeyError(f"Node {node_id} is not an end of member {self.id}")


@dataclass
class Structure:
    """Arena of nodes and members with validating builders."""
    config: AnalysisConfig = DEFAULT_CONFIG
    nodes: Dict[Hashable, Node] = field(default_factory=dict)
    members: List[Member] = field(default_factory=list)

    # Nodes

    def add_node(self, id: Hashable, x: float, y: float, support: Optional[Support] = None, **loads) -> Node:
        if id in self.nodes:
            raise ModelError(f"Duplicate node id {id!r}")
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ModelError(f"Node {id!r} has non-finite coordinates")
        node = Node(id, float(x), float(y), support, **loads)
        self.nodes[id] = node
        return node

    def node(self, node_id: Hashable) -> Node:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise ModelError(f"Unknown node id {node_id!r}") from None

    def set_support(self, node_id: Hashable, support: Optional[Support]) -> Node:
        node = replace(self.node(node_id), support=support)
        self.nodes[node_id] = node
        return node

    def add_nodal_load(self, node_id: Hashable, fx: float = 0.0, fy: float = 0.0, moment: float = 0.0) -> Node:
        """Accumulate a nodal load (fx right, fy down, moment clockwise)."""
        n = self.node(node_id)
        node = replace(n, fx=n.fx + fx, fy=n.fy + fy, moment=n.moment + moment)
        self.nodes[node_id] = node
        return node

    def add_imposed_displacement(self, node_id: Hashable, dx: float = 0.0, dy: float = 0.0) -> Node:
        n = self.node(node_id)
        node = replace(n, dx=n.dx + dx, dy=n.dy + dy)
        self.nodes[node_id] = node
        return node

    # Members

    def member(self, member_id: Hashable) -> Member:
        for m in self.members:
            if m.id == member_id:
                return m
        raise ModelError(f"Unknown member id {member_id!r}")

    def add_beam(self, id, ni, nj, E: float, I: float, loads: Iterable[MemberLoad] = ()) -> Member:
        return self._add_member(id, ni, nj, E, I, MemberKind.BEAM, loads)

    def add_column(self, id, ni, nj, E: float, I: float, loads: Iterable[MemberLoad] = ()) -> Member:
        return self._add_member(id, ni, nj, E, I, MemberKind.COLUMN, loads)

    def add_inclined_member(self, id, ni, nj, E: float, I: float, loads: Iterable[MemberLoad] = ()) -> Member:
        return self._add_member(id, ni, nj, E, I, MemberKind.INCLINED, loads)

    def add_member_load(self, member_id: Hashable, load: MemberLoad) -> Member:
        m = self.member(member_id)
        check_load_within(load, self.length(m))
        updated = replace(m, loads=m.loads + (load,))
        self.members[self.members.index(m)] = updated
        return updated

    def _add_member(self, id, ni, nj, E, I, kind: MemberKind, loads) -> Member:
        if any(m.id == id for m in self.members):
            raise ModelError(f"Duplicate member id {id!r}")
        a, b = self.node(ni), self.node(nj)
        if ni == nj:
            raise ModelError(f"Member {id!r} connects node {ni!r} to itself")
        if not E * I > 0.0:
            raise ModelError(f"Member {id!r} needs positive E*I, got E={E}, I={I}")

        dx, dy = b.x - a.x, b.y - a.y
        L = math.hypot(dx, dy)
        tol = self.config.geometry_tolerance
        if L <= tol:
            raise ModelError(f"Member {id!r} has zero length")
        if kind is MemberKind.BEAM and abs(dy) > tol:
            raise ModelError(f"Beam {id!r} must be horizontal (end y differ by {dy:g})")
        if kind is MemberKind.COLUMN and abs(dx) > tol:
            raise ModelError(f"Column {id!r} must be vertical (end x differ by {dx:g})")
        if kind is MemberKind.INCLINED:
            angle = math.atan2(abs(dy), abs(dx))
            atol = self.config.inclined_angle_tolerance
            if angle < atol or abs(angle - math.pi / 2) < atol:
                raise ModelError(f"Inclined member {id!r} is horizontal or vertical; use a beam or column")

        loads = tuple(loads)
        for load in loads:
            check_load_within(load, L)

        member = Member(id, ni, nj, float(E), float(I), kind, loads)
        self.members.append(member)
        logger.debug("Added %s %r: %r -> %r, L=%.4g", kind.value, id, ni, nj, L)
        return member

    # Queries

    def length(self, member: Member) -> float:
        a, b = self.nodes[member.ni], self.nodes[member.nj]
        return math.hypot(b.x - a.x, b.y - a.y)

    def incident_ends(self, node_id: Hashable) -> List[Tuple[Member, bool]]:
        """(member, is_start) for every member touching the node, insertion order."""
        ends = []
        for m in self.members:
            if m.ni == node_id:
                ends.append((m, True))
            elif m.nj == node_id:
                ends.append((m, False))
        return ends

    def frame_members(self) -> List[Member]:
        return [m for m in self.members if m.kind is not MemberKind.INCLINED]

    def is_free_end(self, node_id: Hashable) -> bool:
        """Unsupported node terminating exactly one beam/column."""
        node = self.node(node_id)
        if node.is_supported:
            return False
        frame_ends = [m for m, _ in self.incident_ends(node_id) if m.kind is not MemberKind.INCLINED]
        return len(frame_ends) == 1
