"""
SLOPE-DEFLECTION EQUATIONS
==========================

Builds the symbolic end-moment expressions and the equilibrium equations of
a frame or continuous beam.

END MOMENT (anticlockwise positive, acting on the member end):
--------------------------------------------------------------
With k = 2EI/L, the moment at the ``near`` end of a member is

    M_near = FEM_near
           + 2k·THETA_near      (unless near is fixed)
           +  k·THETA_far       (unless far is fixed)
           + 6EI·Δt/L²          (prescribed relative transverse displacement)
           + 6EI·s·(DELTA_end - DELTA_start)/L²   (columns only)
           - 6EI·c·(LIFT_end - LIFT_start)/L²     (beams only)

where Δt is (u_end - u_start) projected on the member's positive-load
normal, s = +1 when the column end lies above its start and c = +1 when the
beam end lies right of its start.

A free end (unsupported node terminating one member) carries no bending from
the member, so:
- at the free end the moment is minus the couple applied there;
- at the other end (cantilever root) the moment follows from statics of the
  member loads and the loads applied at the free tip, with no unknowns.

EQUATIONS:
----------
- Joint: Σ end moments at the node + applied clockwise couple = 0, for
  every node that is not fixed.
- Sway: for every group with a DELTA unknown, Σ horizontal nodal loads of
  the group + Σ horizontal end shears of the columns meeting it = 0.
- Lift: for every vertical group with a LIFT unknown, Σ vertical nodal loads
  of the group + Σ vertical end shears of the beams meeting it = 0.

A constant-only equation is dropped when its constant is negligible and is
an error otherwise.
"""

import logging
from typing import Dict, Hashable, List, Optional, Tuple

from .compatibility import resolve_compatible_displacements
from .config import AnalysisConfig, DEFAULT_CONFIG
from .elements import MemberGeometry, behavior, chord_factor, member_geometry, stiffness_factor
from .kernel.terms import Expression
from .kernel.unknowns import theta_name
from .loads import FEMPair, fixed_end_moments, load_totals
from .model import InconsistentModelError, Member, Structure, UnsupportedMemberError
from .sway import SWAY, SwayGroup, classify_lift_groups, classify_sway_groups, delta_lookup

logger = logging.getLogger(__name__)


class SlopeDeflection:
    """
    Equation builder for one analysis of a structure.

    All derived state (sway groups, compatible displacements, fixed-end
    moments, geometry) is rebuilt by ``configure()``; nothing is written back
    to the structure.
    """

    def __init__(self, structure: Structure, mode: str = SWAY, config: AnalysisConfig = DEFAULT_CONFIG):
        self.structure = structure
        self.mode = mode
        self.config = config
        self.groups: List[SwayGroup] = []
        self.deltas: Dict[Hashable, Optional[str]] = {}
        self.lift_groups: List[SwayGroup] = []
        self.lifts: Dict[Hashable, Optional[str]] = {}
        self.displacements: Dict[Hashable, Tuple[float, float]] = {}
        self.fems: Dict[Hashable, FEMPair] = {}
        self.geometry: Dict[Hashable, MemberGeometry] = {}
        self._free: Dict[Hashable, bool] = {}

    def configure(self) -> "SlopeDeflection":
        s = self.structure
        for m in s.members:
            if not behavior(m).in_frame_analysis:
                raise UnsupportedMemberError(
                    f"Member {m.id!r} is {m.kind.value}; slope-deflection analysis handles beams and columns only"
                )
        self.groups = classify_sway_groups(s, assign_deltas=self.mode == SWAY)
        self.deltas = delta_lookup(self.groups)
        self.lift_groups = classify_lift_groups(s)
        self.lifts = delta_lookup(self.lift_groups)
        self.displacements = resolve_compatible_displacements(s, self.config)
        self.geometry = {m.id: member_geometry(s.nodes, m) for m in s.members}
        self.fems = {m.id: fixed_end_moments(m.loads, self.geometry[m.id].length) for m in s.members}
        self._free = {nid: s.is_free_end(nid) for nid in s.nodes}
        return self

    # End moments

    def _tip_force(self, m: Member, node_id: Hashable) -> float:
        """Nodal load at ``node_id`` resolved on the member's positive-load direction."""
        node = self.structure.nodes[node_id]
        tx, ty = self.geometry[m.id].load_direction
        return node.fx * tx + node.fy * ty

    def _cantilever_root_moment(self, m: Member, near_is_start: bool) -> float:
        L = self.geometry[m.id].length
        far = m.nj if near_is_start else m.ni
        tip_couple = self.structure.nodes[far].moment
        tip_force = self._tip_force(m, far)
        total, first_moment = load_totals(m.loads)
        if near_is_start:
            # about the start: loads at a, tip at L
            return tip_couple + first_moment + tip_force * L
        # about the end: loads at L - a, tip at L
        return tip_couple - (total * L - first_moment) - tip_force * L

    def end_moment(self, m: Member, near: Hashable) -> Expression:
        near_is_start = near == m.ni
        if not near_is_start and near != m.nj:
            raise KeyError(f"Node {near!r} is not an end of member {m.id!r}")
        far = m.other_end(near)
        near_free, far_free = self._free[near], self._free[far]

        if near_free and not far_free:
            return Expression.const(-self.structure.nodes[near].moment)
        if far_free and not near_free:
            return Expression.const(self._cantilever_root_moment(m, near_is_start))

        g = self.geometry[m.id]
        L = g.length
        k = stiffness_factor(m, L)
        fem = self.fems[m.id]
        nodes = self.structure.nodes

        parts = [Expression.const(fem.start if near_is_start else fem.end)]
        if not nodes[near].is_fixed:
            parts.append(Expression.term(theta_name(near), 2.0 * k))
        if not nodes[far].is_fixed:
            parts.append(Expression.term(theta_name(far), k))

        (sx, sy), (ex, ey) = self.displacements[m.ni], self.displacements[m.nj]
        nx, ny = g.normal
        transverse = (ex - sx) * nx + (ey - sy) * ny
        if transverse != 0.0:
            parts.append(Expression.const(chord_factor(m, L) * transverse))

        if behavior(m).carries_sway_term:
            sign = 1.0 if g.rises else -1.0
            factor = chord_factor(m, L) * sign
            d_end, d_start = self.deltas.get(m.nj), self.deltas.get(m.ni)
            if d_end is not None:
                parts.append(Expression.term(d_end, factor))
            if d_start is not None:
                parts.append(Expression.term(d_start, -factor))

        if behavior(m).carries_lift_term:
            factor = chord_factor(m, L) * ny
            v_end, v_start = self.lifts.get(m.nj), self.lifts.get(m.ni)
            if v_end is not None:
                parts.append(Expression.term(v_end, factor))
            if v_start is not None:
                parts.append(Expression.term(v_start, -factor))

        return Expression.collect(parts)

    def moment_expressions(self) -> Dict[Tuple[Hashable, Hashable], Expression]:
        """(from, to) → end-moment expression, member insertion order, start end first."""
        out = {}
        for m in self.structure.members:
            out[(m.ni, m.nj)] = self.end_moment(m, m.ni)
            out[(m.nj, m.ni)] = self.end_moment(m, m.nj)
        return out

    # Shears

    def end_shears(self, m: Member) -> Tuple[Expression, Expression]:
        """
        Transverse end reactions (R_start, R_end) of a member, positive
        opposing a positive load, as expressions in the unknowns.
        """
        L = self.geometry[m.id].length
        total, first_moment = load_totals(m.loads)
        m_start = self.end_moment(m, m.ni)
        m_end = self.end_moment(m, m.nj)
        r_end = Expression.collect([Expression.const(first_moment), -m_start, -m_end]).scaled(1.0 / L)
        r_start = Expression.const(total) - r_end
        return r_start, r_end

    # Equations

    def _keep(self, eq: Expression, label: str) -> bool:
        if not eq.is_constant():
            return True
        if abs(eq.constant) > self.config.equation_tolerance:
            raise InconsistentModelError(f"{label} cannot be satisfied: residual {eq.constant:.6g}")
        return False

    def joint_equations(self) -> List[Expression]:
        s = self.structure
        equations = []
        for nid, node in s.nodes.items():
            if node.is_fixed:
                continue
            parts = [self.end_moment(m, nid) for m, _ in s.incident_ends(nid)]
            parts.append(Expression.const(node.moment))
            eq = Expression.collect(parts)
            if self._keep(eq, f"Moment equilibrium at node {nid!r}"):
                equations.append(eq)
        return equations

    def group_equation(self, group: SwayGroup, axis: int) -> Expression:
        """
        Force balance of a translating group along x (axis 0, column shears)
        or y (axis 1, beam shears), in load axes.
        """
        s = self.structure
        parts = [Expression.const(s.nodes[nid].fx if axis == 0 else s.nodes[nid].fy) for nid in group.nodes]
        for nid in group.nodes:
            for m, at_start in s.incident_ends(nid):
                kind = behavior(m)
                if not (kind.carries_sway_term if axis == 0 else kind.carries_lift_term):
                    continue
                r_start, r_end = self.end_shears(m)
                t = self.geometry[m.id].load_direction[axis]
                parts.append((r_start if at_start else r_end).scaled(t))
        return Expression.collect(parts)

    def sway_equations(self) -> List[Expression]:
        equations = []
        for group in self.groups:
            if group.delta is None:
                continue
            eq = self.group_equation(group, 0)
            if self._keep(eq, f"Horizontal equilibrium of sway group {group.delta}"):
                equations.append(eq)
        return equations

    def lift_equations(self) -> List[Expression]:
        equations = []
        for group in self.lift_groups:
            if group.delta is None:
                continue
            eq = self.group_equation(group, 1)
            if self._keep(eq, f"Vertical equilibrium of group {group.delta}"):
                equations.append(eq)
        return equations

    def unbalanced_sway_groups(self, values: Dict[str, float]) -> List[Tuple[SwayGroup, float]]:
        """
        Unrestrained groups that were given no DELTA (non-sway mode) and whose
        horizontal balance the solved ``values`` violate.
        """
        out = []
        for group in self.groups:
            if group.restrained or group.delta is not None:
                continue
            eq = self.group_equation(group, 0)
            residual = eq.evaluate(values)
            if abs(residual) > self.config.residual_tolerance * max(1.0, abs(eq.constant)):
                out.append((group, residual))
        return out

    def build(self) -> List[Expression]:
        if not self.geometry and self.structure.members:
            self.configure()
        joints = self.joint_equations()
        sways = self.sway_equations()
        lifts = self.lift_equations()
        logger.debug("Assembled %d joint, %d sway and %d lift equations", len(joints), len(sways), len(lifts))
        return joints + sways + lifts
