"""
Input models for building a Structure from plain data (dicts / JSON).

    spec = ModelSpec.model_validate(payload)
    structure = build_structure(spec)
    result = FrameSolver(structure, spec.allow_least_squares).solve()
"""

from typing import Annotated, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .loads import MemberLoad, PointLoad, TrapezoidalLoad, UniformLoad, reversed_load
from .model import Structure, Support

NodeId = Union[int, str]


class SupportSpec(BaseModel):
    """Support condition."""
    type: Literal["fixed", "pinned", "roller"]
    settlement: float = Field(0.0, description="Prescribed vertical settlement, positive downward")


class NodeSpec(BaseModel):
    """Node geometry, support, nodal loads and imposed displacements."""
    id: NodeId
    x: float
    y: float
    support: Optional[SupportSpec] = None
    fx: float = Field(0.0, description="Horizontal load, positive rightward")
    fy: float = Field(0.0, description="Vertical load, positive downward")
    moment: float = Field(0.0, description="Applied couple, positive clockwise")
    dx: float = Field(0.0, description="Imposed horizontal displacement, positive rightward")
    dy: float = Field(0.0, description="Imposed vertical displacement, positive upward")


class PointLoadSpec(BaseModel):
    kind: Literal["point"] = "point"
    position: float = Field(..., ge=0.0)
    magnitude: float


class UniformLoadSpec(BaseModel):
    kind: Literal["uniform"] = "uniform"
    start: float = Field(0.0, ge=0.0)
    span: float = Field(..., gt=0.0)
    intensity: float


class TrapezoidalLoadSpec(BaseModel):
    kind: Literal["trapezoidal"] = "trapezoidal"
    high_magnitude: float
    high_position: float = Field(..., ge=0.0)
    low_magnitude: float = 0.0
    low_position: float = Field(0.0, ge=0.0)


LoadSpec = Annotated[
    Union[PointLoadSpec, UniformLoadSpec, TrapezoidalLoadSpec],
    Field(discriminator="kind"),
]


class MemberSpec(BaseModel):
    """Member connectivity, stiffness and loads (positions from the start node)."""
    id: NodeId
    kind: Literal["beam", "column", "inclined"]
    start: NodeId
    end: NodeId
    E: float = Field(..., gt=0.0, description="Elastic modulus")
    I: float = Field(..., gt=0.0, description="Second moment of area")
    loads: List[LoadSpec] = Field(default_factory=list)


class ModelSpec(BaseModel):
    """Complete analysis input."""
    nodes: List[NodeSpec]
    members: List[MemberSpec]
    allow_least_squares: bool = False


def to_load(spec) -> MemberLoad:
    if spec.kind == "point":
        return PointLoad(spec.position, spec.magnitude)
    if spec.kind == "uniform":
        return UniformLoad(spec.start, spec.span, spec.intensity)
    return TrapezoidalLoad(spec.high_magnitude, spec.high_position, spec.low_magnitude, spec.low_position)


def build_structure(spec: ModelSpec, reverse: Iterable[NodeId] = ()) -> Structure:
    """
    Build a Structure from validated input.

    Members listed in ``reverse`` are drawn end → start with their loads
    mirrored, which describes the same physical structure.
    """
    reverse = set(reverse)
    s = Structure()
    for n in spec.nodes:
        support = Support(n.support.type, n.support.settlement) if n.support is not None else None
        s.add_node(n.id, n.x, n.y, support, fx=n.fx, fy=n.fy, moment=n.moment, dx=n.dx, dy=n.dy)

    builders = {"beam": s.add_beam, "column": s.add_column, "inclined": s.add_inclined_member}
    for m in spec.members:
        loads = [to_load(ld) for ld in m.loads]
        ni, nj = m.start, m.end
        if m.id in reverse:
            a, b = s.node(ni), s.node(nj)
            L = ((b.x - a.x) ** 2 + (b.y - a.y) ** 2) ** 0.5
            loads = [reversed_load(ld, L) for ld in loads]
            ni, nj = nj, ni
        builders[m.kind](m.id, ni, nj, m.E, m.I, loads)
    return s
