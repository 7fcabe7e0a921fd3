"""
SWAY CLASSIFICATION
===================

Beams are axially rigid and horizontal, so every node connected through a
chain of beams translates horizontally by the same amount. Those node sets
are the sway groups. A group that contains a fixed or pinned support cannot
translate; every other group gets one horizontal translation unknown
``DELTA_k`` (k counted from 1 in discovery order).

Whether a structure is *susceptible* to sway is a kinematic question,
answered by the index

    ss = 2j - (2(f + h) + r + m)

with j nodes, f fixed, h pinned, r roller supports and m members. A
structure with ss > 0, or with no fixed/pinned support at all, is analysed in
sway mode. Whether it *actually* sways is answered after the solve by looking
at the DELTA values.

Columns play the same role vertically: nodes joined by a chain of columns
move up and down together. A column-linked group with no support (every
support type holds a node vertically) gets a ``LIFT_k`` unknown, so a beam
end carried by nothing but other members is free to deflect.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Iterator, List, Optional, Tuple

from .elements import behavior
from .kernel.unknowns import delta_name, lift_name
from .model import Member, Structure, SupportType

logger = logging.getLogger(__name__)

SWAY = "sway"
NON_SWAY = "non-sway"


@dataclass(frozen=True)
class SwayGroup:
    nodes: Tuple[Hashable, ...]
    restrained: bool
    delta: Optional[str]  # DELTA_k (LIFT_k for a vertical group), or None


def _adjacency(structure: Structure, links: Callable[[Member], bool]) -> Dict[Hashable, List[Hashable]]:
    adjacency = {nid: [] for nid in structure.nodes}
    for m in structure.members:
        if links(m):
            adjacency[m.ni].append(m.nj)
            adjacency[m.nj].append(m.ni)
    return adjacency


def _connected(structure: Structure, adjacency: Dict[Hashable, List[Hashable]]) -> Iterator[Tuple[Hashable, ...]]:
    """Connected node sets by BFS, in node insertion order."""
    seen = set()
    for start in structure.nodes:
        if start in seen:
            continue
        seen.add(start)
        order = []
        queue = deque([start])
        while queue:
            nid = queue.popleft()
            order.append(nid)
            for other in adjacency[nid]:
                if other not in seen:
                    seen.add(other)
                    queue.append(other)
        yield tuple(order)


def classify_sway_groups(structure: Structure, assign_deltas: bool = True) -> List[SwayGroup]:
    """
    Partition nodes into sway groups by BFS over beams, in node insertion order.

    With ``assign_deltas=False`` (non-sway analysis) no group receives a
    DELTA unknown.
    """
    adjacency = _adjacency(structure, lambda m: behavior(m).links_sway_group)
    groups = []
    k = 0
    for nodes in _connected(structure, adjacency):
        restrained = any(
            structure.nodes[nid].support is not None and structure.nodes[nid].support.is_horizontal_restraint
            for nid in nodes
        )
        delta = None
        if not restrained and assign_deltas:
            k += 1
            delta = delta_name(k)
        groups.append(SwayGroup(nodes, restrained, delta))

    logger.debug("Sway groups: %d (%d with DELTA)", len(groups), sum(g.delta is not None for g in groups))
    return groups


def classify_lift_groups(structure: Structure) -> List[SwayGroup]:
    """
    Partition nodes into vertical groups by BFS over columns.

    A group is restrained when any of its nodes is supported; every other
    group receives a LIFT unknown (upward translation).
    """
    adjacency = _adjacency(structure, lambda m: behavior(m).links_lift_group)
    groups = []
    k = 0
    for nodes in _connected(structure, adjacency):
        restrained = any(structure.nodes[nid].support is not None for nid in nodes)
        lift = None
        if not restrained:
            k += 1
            lift = lift_name(k)
        groups.append(SwayGroup(nodes, restrained, lift))
    return groups


def delta_lookup(groups: List[SwayGroup]) -> Dict[Hashable, Optional[str]]:
    """Node id → DELTA (or LIFT) name of its group (None when restrained)."""
    return {nid: g.delta for g in groups for nid in g.nodes}


def sway_index(structure: Structure) -> int:
    """Kinematic index 2j - (2(f + h) + r + m)."""
    counts = {t: 0 for t in SupportType}
    for node in structure.nodes.values():
        if node.support is not None:
            counts[node.support.type] += 1
    j = len(structure.nodes)
    m = len(structure.members)
    f, h, r = counts[SupportType.FIXED], counts[SupportType.PINNED], counts[SupportType.ROLLER]
    return 2 * j - (2 * (f + h) + r + m)


def is_sway_susceptible(structure: Structure) -> bool:
    has_anchor = any(
        n.support is not None and n.support.is_horizontal_restraint for n in structure.nodes.values()
    )
    return sway_index(structure) > 0 or not has_anchor


def analysis_mode(structure: Structure) -> str:
    return SWAY if is_sway_susceptible(structure) else NON_SWAY
