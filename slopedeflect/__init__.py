# slopedeflect - Slope-deflection analysis of 2D frames and continuous beams
"""
SLOPEDEFLECT: Classical Slope-Deflection Analysis
=================================================

This package provides:
- Orthogonal rigid-jointed frame analysis (beams + columns, with sway)
- Continuous beam analysis (support moments, reactions, span extremes)
- Fixed-end moments for point, uniform and trapezoidal loads
- Internal force diagrams (shear, moment, axial)

ARCHITECTURE:
-------------
    kernel/           Symbolic unknowns, expressions, assembly and linear solve
    config.py         Tolerances and defaults
    model.py          Supports, nodes, members, Structure arena
    loads.py          Member loads and fixed-end moments
    elements.py       Member geometry and stiffness factors
    sway.py           Sway groups and sway classification
    compatibility.py  Compatible nodal displacements
    equations.py      End-moment expressions, joint and sway equations
    post.py           End forces, axial balance, reactions
    diagrams.py       Internal force sampling
    solve.py          FrameSolver
    beam.py           BeamSolver
    schema.py         pydantic input models
"""

from .config import AnalysisConfig, DEFAULT_CONFIG
from .model import (
    InconsistentModelError,
    Member,
    MemberKind,
    ModelError,
    Node,
    Structure,
    Support,
    SupportType,
    UnsupportedMemberError,
)
from .loads import FEMPair, PointLoad, TrapezoidalLoad, UniformLoad, fixed_end_moment, fixed_end_moments
from .kernel import DimensionMismatchError, MechanismError, solve_linear
from .solve import FrameResult, FrameSolver, solve_frame
from .beam import BeamResult, BeamSolver, SupportMoments, solve_beam
from .post import Reaction

__version__ = "0.1.0"
