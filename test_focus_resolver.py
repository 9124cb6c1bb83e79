import unittest

from family_graph import FamilyGraph
from focus_resolver import FocusResolver, ViewSession
from layout_engine import BASE_SPACING, VERTICAL_SPACING, ZOOM_ONE_PARENT_DY, ZOOM_TWO_PARENTS_DX, ZOOM_TWO_PARENTS_DY


def build_lineage(parent_count=2):
    """R (main) married to S; S has added parents and one sibling X."""
    tree = FamilyGraph.with_root("Root", member_id="R")
    tree.add_spouse("R", "Spouse", "female", spouse_id="S")
    tree.add_child("R", "Kid", "male", member_id="K")
    if parent_count >= 1:
        tree.add_parent("S", "Father", "male", parent_id="P1")
    if parent_count >= 2:
        tree.add_parent("S", "Mother", "female", parent_id="P2")
        tree.add_child("P1", "Sister", "female", member_id="X")
        tree.add_spouse("X", "Sister husband", "male", spouse_id="XH")
    return tree


class TestZoomPairResolution(unittest.TestCase):

    def setUp(self):
        self.tree = build_lineage()
        self.focus = FocusResolver()

    def test_spouse_resolves_to_main_partner(self):
        self.assertEqual(self.focus.resolve_zoom_pair(self.tree, "S"), ("R", "S"))

    def test_parent_node_resolves_through_its_child(self):
        self.assertEqual(self.focus.resolve_zoom_pair(self.tree, "P1"), ("R", "S"))
        self.assertEqual(self.focus.resolve_zoom_pair(self.tree, "P2"), ("R", "S"))

    def test_main_member_has_no_pair(self):
        self.assertIsNone(self.focus.resolve_zoom_pair(self.tree, "R"))
        self.assertIsNone(self.focus.resolve_zoom_pair(self.tree, "missing"))

    def test_spouse_of_a_sibling_pairs_with_the_sibling(self):
        # X is main through the detached parent's line
        self.assertEqual(self.focus.resolve_zoom_pair(self.tree, "XH"), ("X", "XH"))


class TestZoomTransitions(unittest.TestCase):

    def setUp(self):
        self.tree = build_lineage()
        self.focus = FocusResolver()
        self.session = ViewSession()

    def test_main_selection_stays_normal(self):
        self.session.selected_id = "R"
        self.assertFalse(self.focus.request_zoom(self.tree, self.session))
        self.assertFalse(self.session.is_zoomed)

    def test_request_zoom_is_idempotent(self):
        self.session.selected_id = "S"
        self.assertTrue(self.focus.request_zoom(self.tree, self.session))
        first = self.session.zoom_pair
        self.assertTrue(self.focus.request_zoom(self.tree, self.session))
        self.assertEqual(self.session.zoom_pair, first)
        self.assertEqual(first, ("R", "S"))

    def test_tap_on_spouse_in_normal_enters_zoom(self):
        self.focus.tap(self.tree, self.session, "S")
        self.assertEqual(self.session.selected_id, "S")
        self.assertEqual(self.session.zoom_pair, ("R", "S"))

    def test_tap_on_parent_node_in_normal_enters_zoom(self):
        self.focus.tap(self.tree, self.session, "P2")
        self.assertEqual(self.session.selected_id, "P2")
        self.assertEqual(self.session.zoom_pair, ("R", "S"))

    def test_tap_on_main_member_in_normal_only_selects(self):
        self.focus.tap(self.tree, self.session, "K")
        self.assertEqual(self.session.selected_id, "K")
        self.assertFalse(self.session.is_zoomed)

    def test_spouse_tap_zooms_again_after_leaving(self):
        self.focus.tap(self.tree, self.session, "S")
        self.focus.tap(self.tree, self.session, "K")
        self.assertFalse(self.session.is_zoomed)
        self.focus.tap(self.tree, self.session, "S")
        self.assertEqual(self.session.zoom_pair, ("R", "S"))

    def test_tap_main_anchor_leaves_zoom(self):
        self.session.selected_id = "P1"
        self.focus.request_zoom(self.tree, self.session)
        self.focus.tap(self.tree, self.session, "R")
        self.assertFalse(self.session.is_zoomed)
        self.assertEqual(self.session.selected_id, "P1")

    def test_tap_inside_keeps_zoom(self):
        self.session.selected_id = "S"
        self.focus.request_zoom(self.tree, self.session)
        for member_id in ("X", "XH", "S"):
            self.focus.tap(self.tree, self.session, member_id)
            self.assertTrue(self.session.is_zoomed)
            self.assertEqual(self.session.selected_id, member_id)

    def test_tap_outside_leaves_zoom_and_selects(self):
        self.session.selected_id = "S"
        self.focus.request_zoom(self.tree, self.session)
        self.focus.tap(self.tree, self.session, "K")
        self.assertFalse(self.session.is_zoomed)
        self.assertEqual(self.session.selected_id, "K")

    def test_tap_unknown_member_is_ignored(self):
        self.session.selected_id = "S"
        self.focus.request_zoom(self.tree, self.session)
        self.focus.tap(self.tree, self.session, "missing")
        self.assertTrue(self.session.is_zoomed)
        self.assertEqual(self.session.selected_id, "S")


class TestZoomLayout(unittest.TestCase):

    def test_two_parents_and_siblings(self):
        tree = build_lineage()
        zoom = FocusResolver().zoom_layout(tree, ("R", "S"))
        pos = zoom.layout.positions

        self.assertEqual(set(pos), {"R", "S", "P1", "P2", "X", "XH"})
        self.assertEqual(pos["S"], (pos["R"][0] + BASE_SPACING, pos["R"][1]))
        self.assertAlmostEqual(pos["P1"][0], pos["S"][0] - ZOOM_TWO_PARENTS_DX / 2)
        self.assertAlmostEqual(pos["P2"][0], pos["S"][0] + ZOOM_TWO_PARENTS_DX / 2)
        self.assertAlmostEqual(pos["P1"][1], pos["S"][1] - ZOOM_TWO_PARENTS_DY)
        self.assertAlmostEqual(pos["X"][1], pos["R"][1] + VERTICAL_SPACING)
        self.assertEqual(pos["XH"][1], pos["X"][1])

        self.assertEqual(zoom.child_ids, ["X"])
        self.assertEqual(zoom.parent_ids, ["P1", "P2"])
        self.assertEqual(zoom.order, ["P1", "P2", "R", "S", "X", "XH"])
        left, right = zoom.layout.ranges["R"]
        self.assertAlmostEqual(left, pos["X"][0])
        self.assertAlmostEqual(right, pos["XH"][0])

    def test_single_parent_is_centred_over_spouse(self):
        tree = build_lineage(parent_count=1)
        zoom = FocusResolver().zoom_layout(tree, ("R", "S"))
        pos = zoom.layout.positions
        self.assertEqual(set(pos), {"R", "S", "P1"})
        self.assertAlmostEqual(pos["P1"][0], pos["S"][0])
        self.assertAlmostEqual(pos["P1"][1], pos["S"][1] - ZOOM_ONE_PARENT_DY)
        self.assertEqual(zoom.child_ids, [])

    def test_zoom_layout_is_deterministic(self):
        tree = build_lineage()
        focus = FocusResolver()
        first = focus.zoom_layout(tree, ("R", "S"), (900, 500))
        second = focus.zoom_layout(tree, ("R", "S"), (900, 500))
        self.assertEqual(first.layout.positions, second.layout.positions)
        self.assertEqual(first.layout.ranges, second.layout.ranges)


if __name__ == '__main__':
    unittest.main()
