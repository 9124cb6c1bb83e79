"""
Рендерер SVG для веб-версії сімейного дерева.
Перетворює Scene з TreeView у SVG рядок з клікабельними аватарами.
"""

from html import escape

from family_graph import GENDER_FEMALE, FamilyGraph
from layout_engine import NODE_RADIUS
from tree_view import Scene
from utils.avatar_assets import AvatarProvider

LINE_COLOR = "#9E9E9E"
AVATAR_FILL = {GENDER_FEMALE: "#F8C8DC"}
DEFAULT_FILL = "#CBCBCB"
SELECTED_COLOR = "#E53935"
BACKGROUND = "#F5F3E5"
LINK_ICON_RADIUS = 12
JOINT_RADIUS = 3

STYLE = """
<style>
    .avatar { cursor: pointer; }
    .avatar:hover { stroke: #FFD700; stroke-width: 3; }
    .node-text { pointer-events: none; font-family: sans-serif; font-size: 10px; }
    .link-text { pointer-events: none; font-family: sans-serif; font-size: 12px; fill: white; }
</style>
"""


class SVGRenderer:
    def __init__(self, scene: Scene, tree: FamilyGraph, avatars: AvatarProvider = None,
                 node_radius: float = NODE_RADIUS):
        self.scene = scene
        self.tree = tree
        self.avatars = avatars or AvatarProvider()
        self.node_radius = node_radius

    def generate_svg(self, zoom_level: float = 1.0) -> str:
        width, height = self.scene.canvas_size
        elements = []
        elements.extend(self._draw_connectors())
        elements.extend(self._draw_nodes())

        return f"""
        <svg viewBox="0 0 {width} {height}"
             width="{int(width * zoom_level)}px"
             height="{int(height * zoom_level)}px"
             xmlns="http://www.w3.org/2000/svg">
            {STYLE}
            <rect x="0" y="0" width="{width}" height="{height}" fill="{BACKGROUND}" />
            {''.join(elements)}
        </svg>
        """

    def _draw_connectors(self) -> list:
        out = []
        connectors = self.scene.connectors
        for seg in connectors.segments:
            out.append(self._line(seg.x1, seg.y1, seg.x2, seg.y2))
        for x, y in connectors.joints:
            out.append(f'<circle cx="{x}" cy="{y}" r="{JOINT_RADIUS}" fill="{LINE_COLOR}" />')
        for link in connectors.links:
            out.append(f'<circle cx="{link.x}" cy="{link.y}" r="{LINK_ICON_RADIUS}" fill="{LINE_COLOR}" />')
            out.append(f'<text x="{link.x}" y="{link.y}" text-anchor="middle" '
                       f'dominant-baseline="middle" class="link-text">&#8734;</text>')
        return out

    def _draw_nodes(self) -> list:
        out = []
        r = self.node_radius
        for member_id in self.scene.order:
            pos = self.scene.positions.get(member_id)
            member = self.tree.get(member_id)
            if pos is None or member is None:
                continue
            x, y = pos
            label = member.name
            display_label = label[:10] + "..." if len(label) > 12 else label

            parts = [f'<circle cx="{x}" cy="{y}" r="{r}" fill="{AVATAR_FILL.get(member.gender, DEFAULT_FILL)}" class="avatar" />']
            avatar = self.avatars.avatar_for(member.gender)
            if avatar:
                parts.append(f'<image href="{escape(avatar)}" x="{x - r}" y="{y - r}" '
                             f'width="{2 * r}" height="{2 * r}" clip-path="circle()" />')
            if member_id == self.scene.selected_id:
                parts.append(f'<circle cx="{x}" cy="{y}" r="{r + 2}" fill="none" '
                             f'stroke="{SELECTED_COLOR}" stroke-width="3" />')
            parts.append(f'<text x="{x}" y="{y}" text-anchor="middle" dominant-baseline="middle" '
                         f'class="node-text">{escape(display_label)}</text>')

            # id в тезі <a> - це те, що поверне click_detector
            out.append(f"<a href='#' id='{escape(member_id)}'><g>{''.join(parts)}</g></a>")
        return out

    def _line(self, x1, y1, x2, y2):
        return f'<line x1="{x1}" y1="{y1}" x2="{x2}" y2="{y2}" stroke="{LINE_COLOR}" stroke-width="2" />'
