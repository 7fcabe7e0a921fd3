# slopedeflect/kernel/assemble.py
"""
ASSEMBLY: Dense Linear System from Symbolic Equations
=====================================================

PURPOSE:
--------
Equations are built symbolically (see terms.py). This module turns a list of
equations ``Σ a_ij·x_j + c_i = 0`` into the dense system ``K·x = F`` with

    K[i, j] = a_ij
    F[i]    = -c_i

Columns follow the order of an ``UnknownRegistry``. If no registry is given,
one is built from the equations themselves, so only unknowns that actually
appear in some equation get a column.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .terms import Expression
from .unknowns import UnknownRegistry


def collect_unknowns(equations: Sequence[Expression]) -> UnknownRegistry:
    """Registry of every unknown with a coefficient in ``equations``, first-seen order."""
    registry = UnknownRegistry()
    for eq in equations:
        registry.register_all(eq.unknowns)
    return registry


def assemble_system(
    equations: Sequence[Expression],
    registry: Optional[UnknownRegistry] = None,
) -> Tuple[np.ndarray, np.ndarray, List[str]]:
    """
    Assemble K and F from symbolic equations.

    Parameters:
    -----------
    equations : Sequence[Expression]
        Each expression is understood as ``expression = 0``.

    registry : UnknownRegistry, optional
        Column order. Unknowns found in the equations but missing from the
        registry are appended.

    Returns:
    --------
    K : np.ndarray
        Shape (n_equations, n_unknowns)
    F : np.ndarray
        Shape (n_equations,)
    names : List[str]
        Unknown name for each column of K
    """
    if registry is None:
        registry = collect_unknowns(equations)
    else:
        for eq in equations:
            registry.register_all(eq.unknowns)

    K = np.zeros((len(equations), len(registry)), dtype=float)
    F = np.zeros(len(equations), dtype=float)

    for i, eq in enumerate(equations):
        for name, coef in eq.coefficients.items():
            K[i, registry.index(name)] += coef
        F[i] = -eq.constant

    return K, F, list(registry.names)
