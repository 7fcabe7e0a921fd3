# frame driver: classify, assemble, solve, back-substitute, recover reactions

"""
FrameSolver runs one slope-deflection analysis of an orthogonal frame.

    solver = FrameSolver(structure)
    result = solver.solve()
    result.moments        # {'MOMENTAB': ..., 'MOMENTBA': ...}
    result.reactions      # {node_id: Reaction(x_reaction, y_reaction, moment_reaction)}
    result.is_side_sway()

Every call to ``solve()`` rebuilds sway groups, compatible displacements and
equations from the structure, and returns a fresh result; the convenience
accessors on the solver each run their own solve.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Tuple

import pandas as pd

from .config import AnalysisConfig, DEFAULT_CONFIG
from .diagrams import DiagramPoint, SpanExtremes, sample_member, span_extremes
from .equations import SlopeDeflection
from .kernel.solve import solve_equations
from .kernel.terms import Expression
from .kernel.unknowns import DELTA_PREFIX, LIFT_PREFIX
from .loads import FEMPair
from .model import InconsistentModelError, MemberKind, ModelError, Structure, UnsupportedMemberError
from .post import (
    MemberEndForces,
    Reaction,
    compute_reactions,
    equilibrium_residual,
    load_scale,
    member_end_forces,
    solve_axial_forces,
    with_axial,
)
from .sway import NON_SWAY, SWAY, SwayGroup, analysis_mode, is_sway_susceptible

logger = logging.getLogger(__name__)


def moment_key(near: Hashable, far: Hashable) -> str:
    return f"MOMENT{near}{far}"


@dataclass
class FrameResult:
    mode: str
    unknowns: Dict[str, float]
    end_moments: Dict[Tuple[Hashable, Hashable], float]
    reactions: Dict[Hashable, Reaction]
    member_forces: Dict[Hashable, MemberEndForces]
    fixed_end_moments: Dict[Hashable, FEMPair]
    sway_groups: List[SwayGroup]
    lift_groups: List[SwayGroup]
    displacements: Dict[Hashable, Tuple[float, float]]
    structure: Structure = field(repr=False)
    config: AnalysisConfig = field(default=DEFAULT_CONFIG, repr=False)

    @property
    def moments(self) -> Dict[str, float]:
        """End moments keyed ``MOMENT<from><to>``."""
        return {moment_key(a, b): v for (a, b), v in self.end_moments.items()}

    def moment(self, near: Hashable, far: Hashable) -> float:
        return self.end_moments[(near, far)]

    def deltas(self) -> Dict[str, float]:
        return {k: v for k, v in self.unknowns.items() if k.startswith(DELTA_PREFIX)}

    def lifts(self) -> Dict[str, float]:
        return {k: v for k, v in self.unknowns.items() if k.startswith(LIFT_PREFIX)}

    def is_side_sway(self) -> bool:
        """True when any solved sway translation is non-negligible."""
        return any(abs(v) > self.config.sway_tolerance for v in self.deltas().values())

    def equilibrium_residual(self) -> Tuple[float, float]:
        """(Σ Rx - Σ loads x, Σ Ry - Σ loads y) of the whole structure."""
        return equilibrium_residual(self.structure, self.reactions)

    def is_balanced(self) -> bool:
        rx, ry = self.equilibrium_residual()
        scale = max(1.0, load_scale(self.structure, self.reactions))
        return max(abs(rx), abs(ry)) <= self.config.residual_tolerance * scale

    def diagram(self, member_id: Hashable, steps: Optional[int] = None) -> List[DiagramPoint]:
        steps = self.config.diagram_steps if steps is None else steps
        return sample_member(self.structure.member(member_id), self.member_forces[member_id], steps)

    def span_extremes(self, member_id: Hashable) -> SpanExtremes:
        return span_extremes(self.diagram(member_id))

    def moments_frame(self) -> pd.DataFrame:
        rows = []
        for m in self.structure.members:
            f = self.member_forces[m.id]
            fem = self.fixed_end_moments[m.id]
            rows.append({
                'member': m.id, 'kind': m.kind.value, 'start': m.ni, 'end': m.nj,
                'fem_start': fem.start, 'fem_end': fem.end,
                'm_start': f.m_start, 'm_end': f.m_end,
                'r_start': f.r_start, 'r_end': f.r_end, 'axial': f.axial,
            })
        return pd.DataFrame(rows)

    def reactions_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [{'node': nid, 'x_reaction': r.x_reaction, 'y_reaction': r.y_reaction,
              'moment_reaction': r.moment_reaction} for nid, r in self.reactions.items()]
        )


class FrameSolver:
    """Slope-deflection analysis of a frame of beams and columns."""

    def __init__(self, structure: Structure, allow_least_squares: bool = False,
                 config: Optional[AnalysisConfig] = None):
        if not structure.nodes:
            raise ModelError("Structure has no nodes")
        if not structure.members:
            raise ModelError("Structure has no members")
        for m in structure.members:
            if m.kind is MemberKind.INCLINED:
                raise UnsupportedMemberError(
                    f"Inclined member {m.id!r} is not supported by the frame solver"
                )
        self.structure = structure
        self.allow_least_squares = allow_least_squares
        self.config = config if config is not None else structure.config

    def analysis_mode(self) -> str:
        return analysis_mode(self.structure)

    def is_sway_susceptible(self) -> bool:
        return is_sway_susceptible(self.structure)

    def _builder(self, mode: Optional[str] = None) -> SlopeDeflection:
        mode = self.analysis_mode() if mode is None else mode
        return SlopeDeflection(self.structure, mode, self.config).configure()

    def equations(self) -> List[Expression]:
        return self._builder().build()

    def _analyse(self, mode: Optional[str] = None) -> Tuple[SlopeDeflection, Dict[str, float]]:
        builder = self._builder(mode)
        unknowns = solve_equations(
            builder.build(),
            allow_least_squares=self.allow_least_squares,
            ridge=self.config.ridge,
            cond_limit=self.config.cond_limit,
        )
        logger.debug("Solved %d unknowns in %s mode", len(unknowns), builder.mode)
        return builder, unknowns

    def solve(self) -> FrameResult:
        """
        Run the analysis.

        A non-sway analysis whose solution leaves an unrestrained group out
        of horizontal balance is repeated in sway mode.

        Raises:
            InconsistentModelError: the solved structure is out of global
                equilibrium (least-squares solves only warn)
        """
        builder, unknowns = self._analyse()
        if builder.mode == NON_SWAY:
            unbalanced = builder.unbalanced_sway_groups(unknowns)
            if unbalanced:
                group, residual = unbalanced[0]
                logger.warning(
                    "Nodes %r are out of horizontal balance by %.6g without sway unknowns; re-solving in sway mode",
                    list(group.nodes), residual,
                )
                builder, unknowns = self._analyse(SWAY)

        end_moments = {key: expr.evaluate(unknowns) for key, expr in builder.moment_expressions().items()}
        forces = member_end_forces(self.structure, builder.geometry, end_moments)
        axial = solve_axial_forces(self.structure, builder.geometry, forces, self.config)
        forces = with_axial(forces, axial)
        reactions = compute_reactions(self.structure, builder.geometry, forces)

        result = FrameResult(
            mode=builder.mode,
            unknowns=unknowns,
            end_moments=end_moments,
            reactions=reactions,
            member_forces=forces,
            fixed_end_moments=dict(builder.fems),
            sway_groups=list(builder.groups),
            lift_groups=list(builder.lift_groups),
            displacements=dict(builder.displacements),
            structure=self.structure,
            config=self.config,
        )
        if not result.is_balanced():
            rx, ry = result.equilibrium_residual()
            message = f"Solution is out of global equilibrium (x: {rx:.6g}, y: {ry:.6g})"
            if not self.allow_least_squares:
                raise InconsistentModelError(message)
            logger.warning(message)
        return result

    # Convenience accessors, one solve each

    def final_moments(self) -> Dict[str, float]:
        return self.solve().moments

    def reactions(self) -> Dict[Hashable, Reaction]:
        return self.solve().reactions

    def is_side_sway(self) -> bool:
        return self.solve().is_side_sway()


def solve_frame(structure: Structure, allow_least_squares: bool = False,
                config: Optional[AnalysisConfig] = None) -> FrameResult:
    return FrameSolver(structure, allow_least_squares, config).solve()
