# slopedeflect/kernel/unknowns.py
"""
UNKNOWN REGISTRY: Symbolic Unknown Naming and Column Indexing
=============================================================

PURPOSE:
--------
The slope-deflection method works with a small set of named unknowns:

    THETA_<node>    joint rotation at a node that is not fixed
    DELTA_<k>       horizontal translation of the k-th free sway group
    AXIAL_<member>  axial force in a member (reaction recovery only)

Equations are built symbolically against these names. Before a linear solve
each name needs a column index in the dense system matrix. The registry maps
name → column in first-seen order, so the assembled system is deterministic
for a given node/member insertion order.

USAGE:
------
    reg = UnknownRegistry()
    reg.register(theta_name("B"))    # → 0
    reg.register(delta_name(1))      # → 1
    reg.register(theta_name("B"))    # → 0 (already registered)
    reg.names                        # ['THETA_B', 'DELTA_1']
"""

from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List


CONSTANT_KEY = "c"

THETA_PREFIX = "THETA_"
DELTA_PREFIX = "DELTA_"
LIFT_PREFIX = "LIFT_"
AXIAL_PREFIX = "AXIAL_"


def theta_name(node_id: Hashable) -> str:
    return f"{THETA_PREFIX}{node_id}"


def delta_name(k: int) -> str:
    return f"{DELTA_PREFIX}{k}"


def lift_name(k: int) -> str:
    return f"{LIFT_PREFIX}{k}"


def axial_name(member_id: Hashable) -> str:
    return f"{AXIAL_PREFIX}{member_id}"


@dataclass
class UnknownRegistry:
    """
    Stable mapping from unknown name to column index.

    Attributes:
    -----------
    names : List[str]
        Registered names, in column order.

    Examples:
    ---------
    >>> reg = UnknownRegistry()
    >>> reg.register_all(["THETA_A", "THETA_B", "THETA_A"])
    >>> reg.index("THETA_B")
    1
    >>> len(reg)
    2
    """
    names: List[str] = field(default_factory=list)
    _index: Dict[str, int] = field(default_factory=dict, repr=False)

    def register(self, name: str) -> int:
        """Return the column for ``name``, allocating one if it is new."""
        if name == CONSTANT_KEY:
            raise ValueError(f"'{CONSTANT_KEY}' is reserved for the constant term")
        if name not in self._index:
            self._index[name] = len(self.names)
            self.names.append(name)
        return self._index[name]

    def register_all(self, names: Iterable[str]) -> None:
        for name in names:
            self.register(name)

    def index(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"Unknown '{name}' has not been registered") from None

    def __contains__(self, name: str) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self.names)
