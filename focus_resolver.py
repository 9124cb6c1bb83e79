"""
Фокус / масштабування на одну пару.
Normal shows the whole forest; Zoomed shows one couple, up to two of the
spouse's added parents and those parents' shared children.
"""

from typing import List, NamedTuple, Optional, Set, Tuple

from connectors import FamilyUnit
from family_graph import MAX_PARENTS, FamilyGraph, Member
from layout_engine import LayoutConfig, LayoutEngine, LayoutResult

ZoomPair = Tuple[str, str]


class ViewSession:
    """Selection and zoom state of one view of the forest."""

    def __init__(self, selected_id: str = None):
        self.selected_id = selected_id
        self.zoom_pair: Optional[ZoomPair] = None
        self.taps = 0

    @property
    def is_zoomed(self) -> bool:
        return self.zoom_pair is not None

    def reset(self):
        self.selected_id = None
        self.zoom_pair = None


class ZoomLayout(NamedTuple):
    layout: LayoutResult
    order: List[str]
    units: List[FamilyUnit]
    parent_ids: List[str]
    child_ids: List[str]


class FocusResolver:
    def __init__(self, config: LayoutConfig = None):
        self.config = config or LayoutConfig()

    def resolve_zoom_pair(self, tree: FamilyGraph, member_id: str) -> Optional[ZoomPair]:
        """(main partner, spouse) for a spouse-node or a spouse's added parent."""
        target = tree.get(member_id)
        if target is None:
            return None
        if tree.is_parent_node(target.id):
            target = tree.child_of_parent(target.id)
        main = tree.main_partner_of(target.id)
        if main is None:
            return None
        return (main.id, target.id)

    def request_zoom(self, tree: FamilyGraph, session: ViewSession) -> bool:
        selected = session.selected_id
        if selected is None or selected not in tree:
            return False
        if tree.is_main(selected) and not tree.is_parent_node(selected):
            return False
        pair = self.resolve_zoom_pair(tree, selected)
        if pair is None:
            return False
        session.zoom_pair = pair
        return True

    def tap(self, tree: FamilyGraph, session: ViewSession, member_id: str):
        if member_id not in tree:
            return
        if not session.is_zoomed:
            session.selected_id = member_id
            self.request_zoom(tree, session)
            return

        main_id, spouse_id = session.zoom_pair
        if member_id == main_id:
            session.zoom_pair = None
            return
        if member_id == spouse_id or member_id in self.zoom_members(tree, session.zoom_pair):
            session.selected_id = member_id
            return
        session.zoom_pair = None
        session.selected_id = member_id

    def is_valid(self, tree: FamilyGraph, pair: ZoomPair) -> bool:
        return all(m in tree for m in pair) and self.resolve_zoom_pair(tree, pair[1]) == pair

    def zoom_children(self, tree: FamilyGraph, pair: ZoomPair) -> List[Member]:
        """Union of both parents' children, in order, without the pair itself."""
        spouse = tree.get(pair[1])
        parents = spouse.parents[:MAX_PARENTS] if spouse else []
        if len(parents) != 2:
            return []
        seen = set(pair)
        siblings = []
        for parent in parents:
            for child in parent.children:
                if child.id not in seen:
                    seen.add(child.id)
                    siblings.append(child)
        return siblings

    def zoom_members(self, tree: FamilyGraph, pair: ZoomPair) -> Set[str]:
        """The pair plus every slot of the children row."""
        members = set(pair)
        for child in self.zoom_children(tree, pair):
            members.add(child.id)
            members.update(s.id for s in child.spouses)
        return members

    def zoom_layout(self, tree: FamilyGraph, pair: ZoomPair,
                    viewport: Tuple[float, float] = (0, 0)) -> ZoomLayout:
        cfg = self.config
        main, spouse = tree.get(pair[0]), tree.get(pair[1])
        engine = LayoutEngine(cfg)
        positions = engine.positions

        positions[main.id] = (0.0, 0.0)
        spouse_x = cfg.base_spacing
        positions[spouse.id] = (spouse_x, 0.0)

        parents = spouse.parents[:MAX_PARENTS]
        if len(parents) == 1:
            positions[parents[0].id] = (spouse_x, -cfg.zoom_one_parent_dy)
        elif len(parents) == 2:
            half = cfg.zoom_two_parents_dx / 2
            positions[parents[0].id] = (spouse_x - half, -cfg.zoom_two_parents_dy)
            positions[parents[1].id] = (spouse_x + half, -cfg.zoom_two_parents_dy)

        order = [p.id for p in parents] + [main.id, spouse.id]
        units = []
        if parents:
            engine.ranges[parents[0].id] = (spouse_x, spouse_x)
            engine.rows[parents[0].id] = [spouse.id]
            units.append(FamilyUnit(parents[0].id, tuple(p.id for p in parents[1:]), (spouse.id,)))

        siblings = self.zoom_children(tree, pair)
        if siblings:
            engine.claim(order)
            slots = engine.build_slots(main, siblings)
            if slots:
                engine.place_row(main.id, slots, spouse_x / 2, cfg.vertical_spacing)
                order.extend(s.target.id for s in slots)
        units.append(FamilyUnit(main.id, (spouse.id,), tuple(engine.rows.get(main.id, ()))))

        canvas = engine.normalize(viewport)
        result = LayoutResult(engine.positions, engine.ranges, engine.rows, canvas)
        return ZoomLayout(result, order, units, [p.id for p in parents],
                          [c.id for c in siblings])
