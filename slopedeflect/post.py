# member end forces, axial balance, reactions

"""
Post-processing of solved end moments.

SIGN CONVENTION ("load axes": x right, y DOWN):
-----------------------------------------------
- A member's transverse end reactions R_start, R_end are positive when they
  oppose a positive member load. Resolved along the member's positive-load
  direction t they give the force the member exerts on its end nodes,
  S = R·t.
- The member axial force N (tension positive) adds +N·e at the start node
  and -N·e at the end node, e being the start → end unit axis.
- Reported support reactions are positive when they oppose positive loads,
  so for the whole structure

      Σ reactions - Σ member loads - Σ nodal loads = 0

  in both axes. Moment reactions are anticlockwise positive.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Hashable, Mapping, Optional, Tuple

from .config import AnalysisConfig, DEFAULT_CONFIG
from .elements import MemberGeometry
from .kernel.solve import solve_equations
from .kernel.terms import Expression
from .kernel.unknowns import axial_name
from .loads import load_totals
from .model import Structure

logger = logging.getLogger(__name__)

AXES = ("x", "y")


@dataclass(frozen=True)
class MemberEndForces:
    member_id: Hashable
    length: float
    m_start: float      # anticlockwise on the member end
    m_end: float
    r_start: float      # transverse, opposing a positive load
    r_end: float
    axial: float = 0.0  # tension positive


@dataclass(frozen=True)
class Reaction:
    x_reaction: float
    y_reaction: float
    moment_reaction: Optional[float] = None


def member_end_forces(
    structure: Structure,
    geometry: Mapping[Hashable, MemberGeometry],
    moments: Mapping[Tuple[Hashable, Hashable], float],
) -> Dict[Hashable, MemberEndForces]:
    """
    Transverse end reactions from the final end moments:

        R_end   = (Σ P·a - M_start - M_end) / L
        R_start = Σ P - R_end
    """
    out = {}
    for m in structure.members:
        L = geometry[m.id].length
        total, first_moment = load_totals(m.loads)
        ms = moments[(m.ni, m.nj)]
        me = moments[(m.nj, m.ni)]
        r_end = (first_moment - ms - me) / L
        out[m.id] = MemberEndForces(m.id, L, ms, me, total - r_end, r_end)
    return out


def _end_push(g: MemberGeometry, f: MemberEndForces, at_start: bool) -> Tuple[float, float]:
    """Bending part of the force a member exerts on one end node (load axes)."""
    tx, ty = g.load_direction
    r = f.r_start if at_start else f.r_end
    return r * tx, r * ty


def _axial_component(g: MemberGeometry, at_start: bool, axis: int) -> float:
    e = g.axis_load[axis]
    return e if at_start else -e


def _nodal_load(structure: Structure, nid: Hashable, axis: int) -> float:
    node = structure.nodes[nid]
    return node.fx if axis == 0 else node.fy


def solve_axial_forces(
    structure: Structure,
    geometry: Mapping[Hashable, MemberGeometry],
    forces: Mapping[Hashable, MemberEndForces],
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> Dict[Hashable, float]:
    """
    Member axial forces from force balance at every node axis no support
    restrains. Solved in the regularized least-squares sense; a node that
    cannot be balanced is reported in the log.
    """
    equations = []
    labels = []
    for nid, node in structure.nodes.items():
        ends = structure.incident_ends(nid)
        if not ends:
            continue
        for axis, name in enumerate(AXES):
            if node.restrains(name):
                continue
            parts = [Expression.const(_nodal_load(structure, nid, axis))]
            for m, at_start in ends:
                g = geometry[m.id]
                parts.append(Expression.const(_end_push(g, forces[m.id], at_start)[axis]))
                coef = _axial_component(g, at_start, axis)
                if abs(coef) > config.compatibility_tolerance:
                    parts.append(Expression.term(axial_name(m.id), coef))
            equations.append(Expression.collect(parts))
            labels.append((nid, name))

    solvable = [eq for eq in equations if not eq.is_constant()]
    values = solve_equations(solvable, force_least_squares=True, ridge=config.ridge)

    for eq, (nid, name) in zip(equations, labels):
        residual = eq.evaluate(values)
        scale = max(1.0, abs(eq.constant))
        if abs(residual) > config.residual_tolerance * scale:
            logger.warning("Node %r is out of balance along %s by %.6g", nid, name, residual)

    return {m.id: values.get(axial_name(m.id), 0.0) for m in structure.members}


def with_axial(forces: Mapping[Hashable, MemberEndForces], axial: Mapping[Hashable, float]) -> Dict[Hashable, MemberEndForces]:
    return {
        mid: MemberEndForces(f.member_id, f.length, f.m_start, f.m_end, f.r_start, f.r_end, axial.get(mid, 0.0))
        for mid, f in forces.items()
    }


def compute_reactions(
    structure: Structure,
    geometry: Mapping[Hashable, MemberGeometry],
    forces: Mapping[Hashable, MemberEndForces],
) -> Dict[Hashable, Reaction]:
    """
    Reactions at every supported node.

    Along a restrained axis the reaction is the nodal load plus the forces
    the incident members exert on the node; along a free axis it is zero.
    """
    out = {}
    for nid, node in structure.nodes.items():
        if node.support is None:
            continue
        components = []
        for axis, name in enumerate(AXES):
            if not node.restrains(name):
                components.append(0.0)
                continue
            parts = [_nodal_load(structure, nid, axis)]
            for m, at_start in structure.incident_ends(nid):
                g = geometry[m.id]
                f = forces[m.id]
                parts.append(_end_push(g, f, at_start)[axis])
                parts.append(f.axial * _axial_component(g, at_start, axis))
            components.append(math.fsum(parts))

        moment = None
        if node.support.restrains_rotation:
            parts = [node.moment]
            for m, at_start in structure.incident_ends(nid):
                f = forces[m.id]
                parts.append(f.m_start if at_start else f.m_end)
            moment = math.fsum(parts)
        out[nid] = Reaction(components[0], components[1], moment)
    return out


def equilibrium_residual(
    structure: Structure,
    reactions: Mapping[Hashable, Reaction],
) -> Tuple[float, float]:
    """(Σ Rx - Σ loads x, Σ Ry - Σ loads y); both ≈ 0 for a balanced solution."""
    rx = [r.x_reaction for r in reactions.values()]
    ry = [r.y_reaction for r in reactions.values()]
    lx = [-n.fx for n in structure.nodes.values()]
    ly = [-n.fy for n in structure.nodes.values()]
    nodes = structure.nodes
    for m in structure.members:
        a, b = nodes[m.ni], nodes[m.nj]
        L = math.hypot(b.x - a.x, b.y - a.y)
        # load direction in load axes is (s, c) of start → end
        s, c = (b.y - a.y) / L, (b.x - a.x) / L
        total, _ = load_totals(m.loads)
        lx.append(-total * s)
        ly.append(-total * c)
    return math.fsum(rx + lx), math.fsum(ry + ly)


def load_scale(structure: Structure, reactions: Mapping[Hashable, Reaction]) -> float:
    """Σ |load| + Σ |reaction| over both axes, the magnitude equilibrium is judged against."""
    parts = [abs(n.fx) + abs(n.fy) for n in structure.nodes.values()]
    parts.extend(abs(load_totals(m.loads)[0]) for m in structure.members)
    parts.extend(abs(r.x_reaction) + abs(r.y_reaction) for r in reactions.values())
    return math.fsum(parts)
