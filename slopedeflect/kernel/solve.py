# slopedeflect/kernel/solve.py
"""Linear system solve: LU for square systems, ridge least squares otherwise."""

import logging
from typing import Dict, Sequence

import numpy as np
from scipy.linalg import lu_factor, lu_solve

from .assemble import assemble_system
from .terms import Expression

logger = logging.getLogger(__name__)


class MechanismError(RuntimeError):
    """Raised when a square system is singular or ill-conditioned."""
    pass


class DimensionMismatchError(RuntimeError):
    """Raised when equations and unknowns differ in count and least squares is not allowed."""
    pass


def solve_linear(
    K: np.ndarray,
    F: np.ndarray,
    allow_least_squares: bool = False,
    force_least_squares: bool = False,
    ridge: float = 1e-9,
    cond_limit: float = 1e12,
) -> np.ndarray:
    """
    Solve K·x = F.

    Args:
        K: System matrix (n_equations x n_unknowns)
        F: Right-hand side (n_equations,)
        allow_least_squares: Permit a regularized solve when K is not square
        force_least_squares: Use the regularized solve even when K is square
        ridge: Tikhonov lambda added to the normal-equation diagonal
        cond_limit: Max condition number of a square K before raising MechanismError

    Returns:
        x: Solution vector (n_unknowns,)

    Raises:
        DimensionMismatchError: K not square and least squares not allowed
        MechanismError: Square K is singular or ill-conditioned
    """
    n_eq, n_unk = K.shape
    if n_unk == 0:
        return np.zeros(0, dtype=float)

    if n_eq == n_unk and not force_least_squares:
        cond = np.linalg.cond(K)
        if not np.isfinite(cond) or cond > cond_limit:
            raise MechanismError(
                f"Singular or ill-conditioned system (cond={cond:.2e}). Check supports and member connectivity."
            )
        return lu_solve(lu_factor(K), F)

    if not (allow_least_squares or force_least_squares):
        raise DimensionMismatchError(
            f"{n_eq} equations for {n_unk} unknowns; enable least squares to solve a non-square system."
        )

    # forced for the auxiliary passes, where it is routine
    level = logging.DEBUG if force_least_squares else logging.WARNING
    logger.log(level, "Regularized least-squares solve: %d equations, %d unknowns, ridge=%g", n_eq, n_unk, ridge)
    normal = K.T @ K + ridge * np.eye(n_unk)
    return np.linalg.solve(normal, K.T @ F)


def solve_equations(
    equations: Sequence[Expression],
    allow_least_squares: bool = False,
    force_least_squares: bool = False,
    ridge: float = 1e-9,
    cond_limit: float = 1e12,
) -> Dict[str, float]:
    """
    Assemble and solve symbolic equations, returning ``{unknown name: value}``.

    Only unknowns that appear in at least one equation are solved for; an
    empty equation list solves to ``{}``.
    """
    if not equations:
        return {}
    K, F, names = assemble_system(equations)
    if not names:
        return {}
    x = solve_linear(
        K, F,
        allow_least_squares=allow_least_squares,
        force_least_squares=force_least_squares,
        ridge=ridge,
        cond_limit=cond_limit,
    )
    return {name: float(value) for name, value in zip(names, x)}
