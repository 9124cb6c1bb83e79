"""
Reverse hit-testing: screen point -> member.
"""

import math
from typing import Dict, Iterable, List, Optional, Set

from family_graph import FamilyGraph, Member
from layout_engine import NODE_RADIUS, Point


def drawing_order(tree: FamilyGraph) -> List[str]:
    """
    Ids in paint order: a member, its spouses (a spouse with children brings
    its own subtree), then every child's subtree left to right.
    """
    order = []
    visited = set()
    for root in tree.root_members():
        _collect(root, order, visited)
    return order


def _collect(member: Member, order: List[str], visited: Set[str]):
    if member.id in visited:
        return
    visited.add(member.id)
    order.append(member.id)
    for spouse in member.spouses:
        if spouse.children:
            _collect(spouse, order, visited)
        elif spouse.id not in visited:
            visited.add(spouse.id)
            order.append(spouse.id)
    for child in member.children:
        _collect(child, order, visited)


class HitTester:
    def __init__(self, positions: Dict[str, Point], order: Iterable[str],
                 node_radius: float = NODE_RADIUS):
        self.positions = positions
        self.order = list(order)
        self.node_radius = node_radius

    def hit_test(self, point: Point) -> Optional[str]:
        """Topmost member within node_radius of point, or None."""
        px, py = point
        for member_id in reversed(self.order):
            pos = self.positions.get(member_id)
            if pos is None:
                continue
            if math.hypot(pos[0] - px, pos[1] - py) <= self.node_radius:
                return member_id
        return None
