# continuous beam driver

"""
Continuous beams are a special case of the frame analysis: a single line of
horizontal beams on supports. ``BeamSolver`` runs the same slope-deflection
assembly and adds the results a beam designer reads off directly: the end
moments either side of each support, support reactions, and the sagging and
hogging extremes of every span.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Dict, Hashable, List, Optional

from .config import AnalysisConfig
from .diagrams import DiagramPoint, SpanExtremes
from .model import MemberKind, ModelError, Structure, UnsupportedMemberError
from .post import Reaction
from .solve import FrameResult, FrameSolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SupportMoments:
    """End moments (anticlockwise) of the spans left and right of a support."""
    left: float = 0.0
    right: float = 0.0


@dataclass
class BeamResult(FrameResult):
    support_moments: Dict[Hashable, SupportMoments] = field(default_factory=dict)

    @property
    def support_reactions(self) -> Dict[Hashable, Reaction]:
        return self.reactions

    def span_diagrams(self, steps: Optional[int] = None) -> Dict[Hashable, List[DiagramPoint]]:
        return {m.id: self.diagram(m.id, steps) for m in self.structure.members}

    def all_span_extremes(self) -> Dict[Hashable, SpanExtremes]:
        return {m.id: self.span_extremes(m.id) for m in self.structure.members}


class BeamSolver(FrameSolver):
    """Slope-deflection analysis of a continuous beam."""

    def __init__(self, structure: Structure, allow_least_squares: bool = False,
                 config: Optional[AnalysisConfig] = None):
        for m in structure.members:
            if m.kind is not MemberKind.BEAM:
                raise UnsupportedMemberError(f"Member {m.id!r} is a {m.kind.value}; a continuous beam takes beams only")
        levels = [n.y for n in structure.nodes.values()]
        if levels and max(levels) - min(levels) > structure.config.geometry_tolerance:
            raise ModelError("Continuous beam nodes must all lie at the same level")
        if not any(n.is_supported for n in structure.nodes.values()):
            raise ModelError("Continuous beam has no supports")
        super().__init__(structure, allow_least_squares, config)

    def solve(self) -> BeamResult:
        result = super().solve()
        logger.debug("Beam solved: %d spans, %d supports", len(self.structure.members), len(result.reactions))
        base = {f.name: getattr(result, f.name) for f in fields(FrameResult)}
        return BeamResult(**base, support_moments=self._support_moments(result))

    def _support_moments(self, result: FrameResult) -> Dict[Hashable, SupportMoments]:
        s = self.structure
        out = {}
        for nid, node in s.nodes.items():
            if not node.is_supported:
                continue
            left, right = 0.0, 0.0
            for m, _ in s.incident_ends(nid):
                other = s.nodes[m.other_end(nid)]
                value = result.end_moments[(nid, other.id)]
                if other.x < node.x:
                    left += value
                else:
                    right += value
            out[nid] = SupportMoments(left, right)
        return out


def solve_beam(structure: Structure, allow_least_squares: bool = False,
               config: Optional[AnalysisConfig] = None) -> BeamResult:
    return BeamSolver(structure, allow_least_squares, config).solve()
