# slopedeflect/kernel/terms.py
"""
Linear expressions over named unknowns.

An ``Expression`` is ``constant + Σ coefficient·unknown``. End moments, column
shears and equilibrium equations are all expressions; an equation is an
expression equated to zero. Sums are collected with ``math.fsum`` so that
long chains of like terms do not drift.
"""

import math
from typing import Dict, Iterable, Mapping, Optional

from .unknowns import CONSTANT_KEY


class Expression:
    """Sparse linear combination of unknowns plus a constant."""

    __slots__ = ("coefficients", "constant")

    def __init__(self, coefficients: Optional[Mapping[str, float]] = None, constant: float = 0.0):
        self.coefficients: Dict[str, float] = dict(coefficients or {})
        self.constant = float(constant)

    @classmethod
    def const(cls, value: float) -> "Expression":
        return cls(constant=value)

    @classmethod
    def term(cls, name: str, coefficient: float) -> "Expression":
        return cls({name: coefficient})

    @classmethod
    def collect(cls, parts: Iterable["Expression"], drop_below: float = 0.0) -> "Expression":
        """
        Sum expressions, merging like terms with compensated summation.

        Coefficients whose magnitude is not above ``drop_below`` are removed
        (``drop_below=0`` keeps everything except exact zeros).
        """
        buckets: Dict[str, list] = {}
        constants = []
        for part in parts:
            constants.append(part.constant)
            for name, coef in part.coefficients.items():
                buckets.setdefault(name, []).append(coef)
        merged = {}
        for name, values in buckets.items():
            total = math.fsum(values)
            if abs(total) > drop_below:
                merged[name] = total
        return cls(merged, math.fsum(constants))

    def scaled(self, factor: float) -> "Expression":
        return Expression({k: v * factor for k, v in self.coefficients.items()}, self.constant * factor)

    def __add__(self, other: "Expression") -> "Expression":
        return Expression.collect([self, other])

    def __neg__(self) -> "Expression":
        return self.scaled(-1.0)

    def __sub__(self, other: "Expression") -> "Expression":
        return Expression.collect([self, -other])

    @property
    def unknowns(self):
        return list(self.coefficients)

    def is_constant(self) -> bool:
        return not self.coefficients

    def evaluate(self, values: Mapping[str, float]) -> float:
        """Substitute solved values; unknowns missing from ``values`` count as zero."""
        parts = [self.constant]
        parts.extend(coef * values.get(name, 0.0) for name, coef in self.coefficients.items())
        return math.fsum(parts)

    def as_dict(self) -> Dict[str, float]:
        """Flat ``{name: coefficient, 'c': constant}`` view."""
        out = dict(self.coefficients)
        out[CONSTANT_KEY] = self.constant
        return out

    def __repr__(self) -> str:
        terms = " + ".join(f"{v:.6g}*{k}" for k, v in self.coefficients.items())
        if terms:
            return f"Expression({terms} + {self.constant:.6g})"
        return f"Expression({self.constant:.6g})"
