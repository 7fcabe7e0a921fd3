# slopedeflect/kernel - Symbolic equation and linear-solve core
"""
KERNEL: SYMBOLIC EQUATIONS AND THE LINEAR SOLVE
===============================================

The slope-deflection drivers build equations symbolically: each end moment,
column shear and joint balance is a linear expression in named unknowns
(THETA_<node>, DELTA_<k>, LIFT_<k>). The kernel does not care what the
unknowns mean.
It just needs:
- A name → column mapping (UnknownRegistry)
- Expressions with collected like terms (Expression)
- A solve that handles square and, when asked, non-square systems
"""

from .unknowns import UnknownRegistry, theta_name, delta_name, lift_name, axial_name, CONSTANT_KEY
from .terms import Expression
from .assemble import assemble_system, collect_unknowns
from .solve import solve_linear, solve_equations, MechanismError, DimensionMismatchError

__all__ = [
    'UnknownRegistry', 'theta_name', 'delta_name', 'lift_name', 'axial_name', 'CONSTANT_KEY',
    'Expression', 'assemble_system', 'collect_unknowns',
    'solve_linear', 'solve_equations', 'MechanismError', 'DimensionMismatchError',
]
