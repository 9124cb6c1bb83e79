"""
Геометрія з'єднувальних ліній.
Pure function of the position and range maps; every connector is axis-aligned.
"""

from typing import Dict, Iterable, List, NamedTuple, Tuple

from family_graph import FamilyGraph
from layout_engine import LayoutConfig, Point, Range


class Segment(NamedTuple):
    x1: float
    y1: float
    x2: float
    y2: float


class LinkMarker(NamedTuple):
    x: float
    y: float


class FamilyUnit(NamedTuple):
    """A member, the spouses drawn beside it and the children row under the couple."""
    member_id: str
    spouse_ids: Tuple[str, ...]
    child_ids: Tuple[str, ...]


class ConnectorSet(NamedTuple):
    segments: List[Segment]
    links: List[LinkMarker]
    joints: List[Point]


def family_units(tree: FamilyGraph, order: Iterable[str], rows: Dict[str, List[str]]) -> List[FamilyUnit]:
    units = []
    for member_id in order:
        member = tree.get(member_id)
        if member is None:
            continue
        spouse_ids = tuple(s.id for s in member.spouses)
        child_ids = tuple(rows.get(member_id, ()))
        if spouse_ids or child_ids:
            units.append(FamilyUnit(member_id, spouse_ids, child_ids))
    return units


class ConnectorGeometry:
    def __init__(self, config: LayoutConfig = None):
        self.config = config or LayoutConfig()

    def build(self, units: Iterable[FamilyUnit], positions: Dict[str, Point],
              ranges: Dict[str, Range]) -> ConnectorSet:
        out = ConnectorSet([], [], [])
        for unit in units:
            pos = positions.get(unit.member_id)
            if pos is None:
                continue
            self._spouse_lines(out, pos, unit, positions)
            self._children_lines(out, pos, unit, positions, ranges)
        return out

    def _spouse_lines(self, out: ConnectorSet, pos: Point, unit: FamilyUnit, positions):
        r = self.config.node_radius
        for i, spouse_id in enumerate(unit.spouse_ids):
            spouse_pos = positions.get(spouse_id)
            if spouse_pos is None:
                continue
            offset_y = self.config.spouse_stagger * i
            start = (pos[0] + r, pos[1] - offset_y)
            end = (spouse_pos[0] - r, spouse_pos[1] - offset_y)
            out.segments.append(Segment(start[0], start[1], end[0], end[1]))
            if i == 0:
                out.links.append(LinkMarker((start[0] + end[0]) / 2, (start[1] + end[1]) / 2))
            else:
                out.links.append(LinkMarker(spouse_pos[0] - r - self.config.link_marker_inset,
                                            spouse_pos[1] - offset_y))

    def _children_lines(self, out: ConnectorSet, pos: Point, unit: FamilyUnit, positions, ranges):
        children = [c for c in unit.child_ids if c in positions]
        if not children:
            return
        r = self.config.node_radius
        stub = self.config.stub_length

        anchor = pos
        if unit.spouse_ids and unit.spouse_ids[0] in positions:
            first = positions[unit.spouse_ids[0]]
            anchor = ((pos[0] + first[0]) / 2, (pos[1] + first[1]) / 2)

        bus_y = positions[children[0]][1] - r - stub
        if unit.member_id in ranges:
            left_x, right_x = ranges[unit.member_id]
        else:
            left_x = positions[children[0]][0]
            right_x = positions[children[-1]][0]

        join_x = min(max(anchor[0], left_x), right_x)
        if anchor[0] == join_x:
            out.segments.append(Segment(anchor[0], anchor[1], join_x, bus_y))
            out.joints.append((join_x, bus_y))
        else:
            # Коліно замість діагоналі
            mid_y = bus_y - stub
            out.segments.append(Segment(anchor[0], anchor[1], anchor[0], mid_y))
            out.segments.append(Segment(anchor[0], mid_y, join_x, mid_y))
            out.segments.append(Segment(join_x, mid_y, join_x, bus_y))
            out.joints.append((join_x, mid_y))

        if right_x > left_x:
            out.segments.append(Segment(left_x, bus_y, right_x, bus_y))
        for child_id in children:
            cx, cy = positions[child_id]
            out.segments.append(Segment(cx, bus_y, cx, cy - r))
