"""
Analysis configuration and defaults.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisConfig:
    """Tolerances and defaults shared by the frame and beam drivers."""

    # Equation assembly
    equation_tolerance: float = 1e-9        # constant-only equation residual
    compatibility_tolerance: float = 1e-12  # drop tiny coefficients
    inconsistency_tolerance: float = 1e-9   # imposed displacement mismatch
    residual_tolerance: float = 1e-6        # relative, least-squares passes and global balance

    # Linear solve
    ridge: float = 1e-9                     # Tikhonov lambda for least squares
    cond_limit: float = 1e12                # square-system mechanism check

    # Classification
    sway_tolerance: float = 1e-9            # |DELTA| that counts as real sway
    geometry_tolerance: float = 1e-9        # horizontal / vertical member check
    inclined_angle_tolerance: float = 0.01  # rad

    # Post-processing
    diagram_steps: int = 100

    def __post_init__(self):
        if self.ridge < 0.0:
            raise ValueError("ridge must be non-negative")
        if self.residual_tolerance <= 0.0:
            raise ValueError("residual_tolerance must be positive")
        if self.diagram_steps < 1:
            raise ValueError("diagram_steps must be at least 1")


# Global config instance
DEFAULT_CONFIG = AnalysisConfig()
