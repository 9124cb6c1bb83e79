"""
Один кадр дерева: компонування, фокус, лінії, вибір.
TreeView holds no drawing toolkit; it produces a Scene that a renderer paints
and answers clicks against the same scene.
"""

from typing import Dict, List, NamedTuple, Optional, Tuple

from connectors import ConnectorGeometry, ConnectorSet, family_units
from family_graph import FamilyGraph, Member
from focus_resolver import FocusResolver, ViewSession
from hit_tester import HitTester, drawing_order
from layout_engine import LayoutConfig, LayoutEngine, Point, Range


class Scene(NamedTuple):
    positions: Dict[str, Point]
    ranges: Dict[str, Range]
    order: List[str]
    connectors: ConnectorSet
    canvas_size: Tuple[float, float]
    selected_id: Optional[str]
    zoomed: bool


class TreeView:
    def __init__(self, tree: FamilyGraph, session: ViewSession = None,
                 config: LayoutConfig = None, viewport: Tuple[float, float] = (0, 0)):
        self.tree = tree
        self.session = session or ViewSession()
        self.config = config or LayoutConfig()
        self.viewport = viewport
        self.layout_engine = LayoutEngine(self.config)
        self.focus = FocusResolver(self.config)
        self.geometry = ConnectorGeometry(self.config)
        self.current_scene: Optional[Scene] = None

    def set_tree(self, tree: FamilyGraph):
        self.tree = tree
        self.session.reset()
        self.current_scene = None

    def update_view(self) -> Scene:
        session = self.session
        if session.selected_id is not None and session.selected_id not in self.tree:
            session.selected_id = None
        if session.is_zoomed and not self.focus.is_valid(self.tree, session.zoom_pair):
            session.zoom_pair = None

        if session.is_zoomed:
            zoom = self.focus.zoom_layout(self.tree, session.zoom_pair, self.viewport)
            layout, order, units = zoom.layout, zoom.order, zoom.units
        else:
            layout = self.layout_engine.layout_forest(self.tree, self.viewport)
            order = drawing_order(self.tree)
            units = family_units(self.tree, order, layout.rows)

        connectors = self.geometry.build(units, layout.positions, layout.ranges)
        self.current_scene = Scene(layout.positions, layout.ranges, order, connectors,
                                   layout.canvas_size, session.selected_id, session.is_zoomed)
        return self.current_scene

    def member_at(self, point: Point) -> Optional[Member]:
        scene = self.current_scene or self.update_view()
        hit = HitTester(scene.positions, scene.order, self.config.node_radius).hit_test(point)
        return self.tree.get(hit)

    def on_node_click(self, point: Point) -> Optional[Member]:
        member = self.member_at(point)
        if member is not None:
            self.on_member_click(member.id)
        return member

    def on_member_click(self, member_id: str):
        self.session.taps += 1
        self.focus.tap(self.tree, self.session, member_id)
        self.update_view()

    def click_key(self) -> str:
        """Widget key for the click detector; changes after every handled tap."""
        mode = "zoom" if self.session.is_zoomed else "view"
        return f"graph_{mode}_mode_{self.session.taps}"

    def request_zoom(self) -> bool:
        zoomed = self.focus.request_zoom(self.tree, self.session)
        self.update_view()
        return zoomed
