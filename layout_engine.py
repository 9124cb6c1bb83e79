"""
Рушій компонування сімейного дерева.
Assigns every member a centre point, reserving a horizontal slot per child
and per child's spouse so that sibling subtrees never overlap.
"""

from typing import Dict, List, NamedTuple, Optional, Set, Tuple

from family_graph import FamilyGraph, Member

# --- КОНСТАНТИ РОЗМІРІВ ---
NODE_RADIUS = 25.0
BASE_SPACING = 100.0
VERTICAL_SPACING = 120.0
BRANCH_GAP = 50.0
SAFE_MARGIN = 100.0
TREE_MARGIN = 120.0
STUB_LENGTH = 12.0
SPOUSE_STAGGER = 4.0
LINK_MARKER_INSET = 30.0
ZOOM_ONE_PARENT_DY = 120.0
ZOOM_TWO_PARENTS_DY = 140.0
ZOOM_TWO_PARENTS_DX = 120.0

Point = Tuple[float, float]
Range = Tuple[float, float]


class LayoutConfig:
    def __init__(self, **overrides):
        self.node_radius = NODE_RADIUS
        self.base_spacing = BASE_SPACING
        self.vertical_spacing = VERTICAL_SPACING
        self.branch_gap = BRANCH_GAP
        self.safe_margin = SAFE_MARGIN
        self.tree_margin = TREE_MARGIN
        self.stub_length = STUB_LENGTH
        self.spouse_stagger = SPOUSE_STAGGER
        self.link_marker_inset = LINK_MARKER_INSET
        self.zoom_one_parent_dy = ZOOM_ONE_PARENT_DY
        self.zoom_two_parents_dy = ZOOM_TWO_PARENTS_DY
        self.zoom_two_parents_dx = ZOOM_TWO_PARENTS_DX
        for key, value in overrides.items():
            if not hasattr(self, key):
                raise TypeError(f"Unknown layout setting: {key}")
            setattr(self, key, float(value))


class Slot(NamedTuple):
    """One reserved place in a children row."""
    owner: Member
    target: Member
    is_spouse: bool


class LayoutResult(NamedTuple):
    positions: Dict[str, Point]
    ranges: Dict[str, Range]
    rows: Dict[str, List[str]]
    canvas_size: Tuple[float, float]


class SubtreeWidthCalculator:
    def __init__(self, config: LayoutConfig = None):
        self.config = config or LayoutConfig()

    def width(self, member: Member, exclude=()) -> float:
        return self._width(member, set(exclude))

    def _width(self, member: Member, visited: Set[str]) -> float:
        visited.add(member.id)
        children = [c for c in member.children if c.id not in visited]
        if not children:
            return self.config.base_spacing

        widths = []
        for child in children:
            widths.append(self._width(child, visited))
            for spouse in child.spouses:
                if spouse.id in visited:
                    widths.append(self.config.base_spacing)
                else:
                    widths.append(self._width(spouse, visited))
        return sum(widths) + self.config.branch_gap * (len(widths) - 1)


class LayoutEngine:
    """
    Stateless between passes: layout_forest() clears the maps, lays out every
    root and normalises the result onto the canvas.
    """

    def __init__(self, config: LayoutConfig = None):
        self.config = config or LayoutConfig()
        self.widths = SubtreeWidthCalculator(self.config)
        self.positions: Dict[str, Point] = {}
        self.ranges: Dict[str, Range] = {}
        self.rows: Dict[str, List[str]] = {}
        self._expanded: Set[str] = set()
        self._claimed: Set[str] = set()

    def reset(self):
        self.positions = {}
        self.ranges = {}
        self.rows = {}
        self._expanded = set()
        self._claimed = set()

    def claim(self, member_ids):
        """Marks members as already placed so no later row takes them."""
        self._claimed.update(member_ids)

    def layout_forest(self, tree: FamilyGraph, viewport: Tuple[float, float] = (0, 0)) -> LayoutResult:
        self.reset()
        y = 0.0
        for root in tree.root_members():
            if root.id in self._claimed:
                continue
            before = set(self.positions)
            self._claimed.add(root.id)
            self.layout(root, 0.0, y)
            placed_ys = [self.positions[m][1] for m in self.positions if m not in before]
            height = max(placed_ys) - y if placed_ys else 0.0
            y += height + self.config.tree_margin
        canvas = self.normalize(viewport)
        return LayoutResult(self.positions, self.ranges, self.rows, canvas)

    def layout(self, member: Member, center_x: float, y: float):
        self.positions[member.id] = (center_x, y)
        if member.id in self._expanded:
            return
        self._expanded.add(member.id)

        # Партнери праворуч, фіксований крок.
        # A spouse already placed by a slot row keeps that slot.
        spouses = member.spouses
        for i, spouse in enumerate(spouses):
            if spouse.id not in self.positions:
                self.positions[spouse.id] = (center_x + (i + 1) * self.config.base_spacing, y)

        # Рядки партнерів раніше за власний рядок
        for spouse in spouses:
            if spouse.id not in self._expanded and self._has_open_children(spouse):
                sx, sy = self.positions[spouse.id]
                self.layout(spouse, sx, sy)

        slots = self.build_slots(member)
        if slots:
            # Anchor at the fixed spouse offset, not at the spouse's slot
            connector_x = center_x
            if spouses:
                connector_x = center_x + self.config.base_spacing / 2
            child_y = y + self.config.vertical_spacing
            centers = self.place_row(member.id, slots, connector_x, child_y)
            for slot, x in zip(slots, centers):
                self.layout(slot.target, x, child_y)

    def _has_open_children(self, member: Member) -> bool:
        return any(c.id not in self._claimed for c in member.children)

    def build_slots(self, member: Member, children: List[Member] = None) -> List[Slot]:
        """Child first, then each of the child's spouses, left to right."""
        if children is None:
            children = member.children
        slots = []
        for child in children:
            if child.id in self._claimed:
                continue
            slots.append(Slot(child, child, False))
            for spouse in child.spouses:
                slots.append(Slot(child, spouse, True))
        return slots

    def place_row(self, owner_id: str, slots: List[Slot], connector_x: float, row_y: float) -> List[float]:
        """Centres the slot row under connector_x and records every slot target."""
        widths = [self.widths.width(s.target, self._claimed) for s in slots]
        total_width = sum(widths) + self.config.branch_gap * (len(slots) - 1)

        centers = []
        cursor = connector_x - total_width / 2
        for w in widths:
            centers.append(cursor + w / 2)
            cursor += w + self.config.branch_gap

        for slot, x in zip(slots, centers):
            self.positions[slot.target.id] = (x, row_y)
            self._claimed.add(slot.target.id)

        self.ranges[owner_id] = (centers[0], centers[-1])
        self.rows[owner_id] = [s.target.id for s in slots if not s.is_spouse]
        return centers

    def normalize(self, viewport: Tuple[float, float] = (0, 0)) -> Tuple[float, float]:
        """Shifts everything to the safe margin, then centres it in the viewport."""
        margin = self.config.safe_margin
        if not self.positions:
            return (max(viewport[0], 2 * margin), max(viewport[1], 2 * margin))

        xs = [p[0] for p in self.positions.values()]
        ys = [p[1] for p in self.positions.values()]
        min_x, max_x, min_y, max_y = min(xs), max(xs), min(ys), max(ys)

        self._shift(margin - min_x, margin - min_y)

        computed_width = (max_x - min_x) + margin * 2
        computed_height = (max_y - min_y) + margin * 2
        canvas_width = max(computed_width, viewport[0])
        canvas_height = max(computed_height, viewport[1])

        self._shift((canvas_width - computed_width) / 2, (canvas_height - computed_height) / 2)
        return (canvas_width, canvas_height)

    def _shift(self, dx: float, dy: float):
        if dx == 0 and dy == 0:
            return
        self.positions = {m: (x + dx, y + dy) for m, (x, y) in self.positions.items()}
        self.ranges = {m: (left + dx, right + dx) for m, (left, right) in self.ranges.items()}


def subtree_width(member: Member, config: Optional[LayoutConfig] = None) -> float:
    return SubtreeWidthCalculator(config).width(member)
