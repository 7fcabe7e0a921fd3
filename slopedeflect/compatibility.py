"""
Displacement compatibility for axially rigid members.

Supports and imposed displacements pin down some nodal translation
components. Every beam and column is axially rigid, so the relative
displacement of its ends along its axis is zero:

    (u_end - u_start) · axis = 0

Writing that for every member and solving for the components that are not
prescribed gives each node a consistent (dx, dy). Translations a support
does not fix and no member constrains (e.g. the sideways drift of a free
sway group, which is carried by DELTA instead) resolve to zero.
"""

import logging
from typing import Dict, Hashable, Optional, Tuple

from .config import AnalysisConfig, DEFAULT_CONFIG
from .elements import behavior, member_geometry
from .kernel.solve import solve_equations
from .kernel.terms import Expression
from .model import InconsistentModelError, Node, Structure, SupportType

logger = logging.getLogger(__name__)


def _known_components(node: Node) -> Tuple[Optional[float], Optional[float]]:
    """Prescribed (dx, dy) in physical axes; None where the component is unknown."""
    settlement = node.support.settlement if node.support is not None else 0.0
    dy_effective = node.dy - settlement
    if node.support is None:
        return (node.dx if node.dx != 0.0 else None,
                node.dy if node.dy != 0.0 else None)
    if node.support.type is SupportType.ROLLER:
        return (node.dx if node.dx != 0.0 else None), dy_effective
    return node.dx, dy_effective


def resolve_compatible_displacements(
    structure: Structure,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> Dict[Hashable, Tuple[float, float]]:
    """
    Resolve a compatible (dx, dy) for every node.

    Raises:
        InconsistentModelError: prescribed displacements stretch or shorten a member
    """
    known = {nid: _known_components(n) for nid, n in structure.nodes.items()}

    def component(nid, axis: int, coef: float) -> Expression:
        value = known[nid][axis]
        if value is not None:
            return Expression.const(coef * value)
        return Expression.term(f"{'DX' if axis == 0 else 'DY'}_{nid}", coef)

    equations = []
    for m in structure.members:
        if not behavior(m).in_frame_analysis:
            continue
        g = member_geometry(structure.nodes, m)
        parts = []
        for axis, cosine in ((0, g.c), (1, g.s)):
            if abs(cosine) <= config.compatibility_tolerance:
                continue
            parts.append(component(m.nj, axis, cosine))
            parts.append(component(m.ni, axis, -cosine))
        eq = Expression.collect(parts, drop_below=config.compatibility_tolerance)
        if eq.is_constant():
            if abs(eq.constant) > config.inconsistency_tolerance:
                raise InconsistentModelError(
                    f"Prescribed displacements change the length of member {m.id!r} by {eq.constant:.3e}"
                )
            continue
        equations.append(eq)

    solved = solve_equations(equations, force_least_squares=True, ridge=config.ridge)
    if equations:
        logger.debug("Compatibility: %d equations, %d unknown components", len(equations), len(solved))
    # ridge residual is O(ridge * |value|), hence the relative check
    scale = max([1.0] + [abs(eq.constant) for eq in equations])
    for eq in equations:
        residual = eq.evaluate(solved)
        if abs(residual) > config.residual_tolerance * scale:
            raise InconsistentModelError(
                f"Prescribed displacements cannot be made compatible (residual {residual:.3e})"
            )

    result = {}
    for nid in structure.nodes:
        kx, ky = known[nid]
        dx = kx if kx is not None else solved.get(f"DX_{nid}", 0.0)
        dy = ky if ky is not None else solved.get(f"DY_{nid}", 0.0)
        result[nid] = (dx, dy)
    return result
