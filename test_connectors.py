import unittest

from connectors import ConnectorGeometry, FamilyUnit, LinkMarker, Segment, family_units
from family_graph import FamilyGraph
from hit_tester import drawing_order
from layout_engine import LINK_MARKER_INSET, NODE_RADIUS, SPOUSE_STAGGER, STUB_LENGTH, LayoutEngine

R = NODE_RADIUS


def is_axis_aligned(seg: Segment) -> bool:
    return seg.x1 == seg.x2 or seg.y1 == seg.y2


class TestSpouseLines(unittest.TestCase):

    def test_first_and_second_spouse(self):
        positions = {"M": (0.0, 0.0), "S1": (100.0, 0.0), "S2": (200.0, 0.0)}
        out = ConnectorGeometry().build([FamilyUnit("M", ("S1", "S2"), ())], positions, {})

        self.assertEqual(out.segments, [
            Segment(R, 0.0, 100.0 - R, 0.0),
            Segment(R, -SPOUSE_STAGGER, 200.0 - R, -SPOUSE_STAGGER),
        ])
        self.assertEqual(out.links, [
            LinkMarker(50.0, 0.0),
            LinkMarker(200.0 - R - LINK_MARKER_INSET, -SPOUSE_STAGGER),
        ])
        self.assertEqual(out.joints, [])


class TestChildrenLines(unittest.TestCase):

    def test_straight_drop_inside_range(self):
        positions = {"M": (50.0, 0.0), "A": (0.0, 120.0), "B": (100.0, 120.0)}
        out = ConnectorGeometry().build([FamilyUnit("M", (), ("A", "B"))], positions,
                                        {"M": (0.0, 100.0)})
        bus_y = 120.0 - R - STUB_LENGTH
        self.assertEqual(out.segments, [
            Segment(50.0, 0.0, 50.0, bus_y),
            Segment(0.0, bus_y, 100.0, bus_y),
            Segment(0.0, bus_y, 0.0, 120.0 - R),
            Segment(100.0, bus_y, 100.0, 120.0 - R),
        ])
        self.assertEqual(out.joints, [(50.0, bus_y)])

    def test_elbow_when_anchor_is_outside_range(self):
        positions = {"M": (0.0, 0.0), "A": (200.0, 120.0), "B": (300.0, 120.0)}
        out = ConnectorGeometry().build([FamilyUnit("M", (), ("A", "B"))], positions,
                                        {"M": (200.0, 300.0)})
        bus_y = 120.0 - R - STUB_LENGTH
        mid_y = bus_y - STUB_LENGTH
        self.assertEqual(out.segments[:3], [
            Segment(0.0, 0.0, 0.0, mid_y),
            Segment(0.0, mid_y, 200.0, mid_y),
            Segment(200.0, mid_y, 200.0, bus_y),
        ])
        self.assertEqual(out.joints, [(200.0, mid_y)])

    def test_couple_anchor_is_midpoint(self):
        positions = {"M": (0.0, 0.0), "S": (100.0, 0.0), "C": (50.0, 120.0)}
        out = ConnectorGeometry().build([FamilyUnit("M", ("S",), ("C",))], positions,
                                        {"M": (50.0, 50.0)})
        bus_y = 120.0 - R - STUB_LENGTH
        self.assertIn(Segment(50.0, 0.0, 50.0, bus_y), out.segments)
        # zero-length bus is not drawn
        self.assertNotIn(Segment(50.0, bus_y, 50.0, bus_y), out.segments)
        self.assertIn(Segment(50.0, bus_y, 50.0, 120.0 - R), out.segments)


class TestForestConnectors(unittest.TestCase):

    def test_all_segments_axis_aligned(self):
        tree = FamilyGraph.with_root(member_id="R")
        tree.add_spouse("R", "S", "female", spouse_id="S")
        tree.add_spouse("R", "S2", "female", spouse_id="S2")
        for cid in ("A", "B", "C"):
            tree.add_child("R", cid, "male", member_id=cid)
        tree.add_spouse("A", "A1", "female", spouse_id="A1")
        tree.add_child("A", "A_1", "male", member_id="A_1")
        tree.add_child("S2", "K", "male", member_id="K")

        result = LayoutEngine().layout_forest(tree)
        order = drawing_order(tree)
        units = family_units(tree, order, result.rows)
        out = ConnectorGeometry().build(units, result.positions, result.ranges)

        self.assertTrue(out.segments)
        for seg in out.segments:
            self.assertTrue(is_axis_aligned(seg), seg)
        # one stub per child of R and of S2
        stubs = [s for s in out.segments if s.y2 == result.positions["A"][1] - R]
        self.assertEqual(len(stubs), 4)

    def test_units_skip_lone_members(self):
        tree = FamilyGraph.with_root(member_id="R")
        tree.add_child("R", "C", "male", member_id="C")
        units = family_units(tree, ["R", "C"], {"R": ["C"]})
        self.assertEqual(units, [FamilyUnit("R", (), ("C",))])


if __name__ == '__main__':
    unittest.main()
