import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from git_graph_data import CommitNode
from git_graph_layout import assign_lanes


def make_commits(*entries):
    """entries: (oid, [parent oids]) tuples, newest first."""
    return [CommitNode(oid, parents) for oid, parents in entries]


def lanes_by_oid(rows):
    return {row.oid: row.lane for row in rows}


class TestAssignLanes(unittest.TestCase):
    def test_empty_list_yields_no_rows(self):
        self.assertEqual(assign_lanes([]), [])

    def test_linear_history_stays_on_lane_zero(self):
        commits = make_commits(("c5", ["c4"]), ("c4", ["c3"]), ("c3", ["c2"]), ("c2", ["c1"]), ("c1", []))
        rows = assign_lanes(commits)

        self.assertEqual([row.lane for row in rows], [0, 0, 0, 0, 0])
        self.assertTrue(all(row.lane_count == 1 for row in rows))

    def test_rows_keep_input_order(self):
        commits = make_commits(("b", ["a"]), ("z", []), ("a", []))
        rows = assign_lanes(commits)

        self.assertEqual([row.index for row in rows], [0, 1, 2])
        for row, commit in zip(rows, commits):
            self.assertIs(row.commit, commit)

    def test_root_commit_frees_its_lane(self):
        commits = make_commits(("r1", []), ("r2", []), ("r3", []))
        rows = assign_lanes(commits)

        self.assertEqual([row.lane for row in rows], [0, 0, 0])
        self.assertEqual(rows[0].lane_count, 1)

    def test_two_independent_tips_open_two_lanes(self):
        commits = make_commits(
            ("t1", ["p1"]),
            ("t2", ["p2"]),
            ("p1", []),
            ("t3", []),  # lane 0 is free again once p1 ends its history
            ("p2", []),
        )
        lanes = lanes_by_oid(assign_lanes(commits))

        self.assertEqual(lanes, {"t1": 0, "t2": 1, "p1": 0, "t3": 0, "p2": 1})

    def test_two_independent_tips_lane_count(self):
        commits = make_commits(("t1", ["p1"]), ("t2", ["p2"]), ("p1", []), ("p2", []))
        rows = assign_lanes(commits)

        self.assertEqual(rows[0].lane_count, 2)

    def test_merge_scenario(self):
        commits = make_commits(("A", ["B", "C"]), ("B", ["D"]), ("C", ["D"]), ("D", []))
        rows = assign_lanes(commits)

        self.assertEqual(lanes_by_oid(rows), {"A": 0, "B": 0, "C": 1, "D": 0})
        self.assertTrue(all(row.lane_count == 2 for row in rows))

    def test_merge_parent_already_expected_allocates_no_lane(self):
        commits = make_commits(
            ("X", ["C"]),  # lane 0 starts expecting C
            ("A", ["B", "C"]),
            ("B", []),
            ("C", []),
        )
        rows = assign_lanes(commits)

        self.assertEqual(lanes_by_oid(rows), {"X": 0, "A": 1, "B": 1, "C": 0})
        self.assertEqual(rows[0].lane_count, 2)

    def test_merge_second_parent_reuses_lowest_free_lane(self):
        commits = make_commits(
            ("K", ["A", "Y"]),  # lane 0 -> A, lane 1 -> Y
            ("W", []),  # takes lane 2, then frees it
            ("A", ["B", "C"]),
            ("B", []),
            ("C", []),
            ("Y", []),
        )
        rows = assign_lanes(commits)
        lanes = lanes_by_oid(rows)

        self.assertEqual(lanes["A"], 0)
        self.assertEqual(lanes["C"], 2)
        self.assertEqual(lanes["Y"], 1)
        self.assertEqual(rows[0].lane_count, 3)

    def test_converging_tracks_release_every_waiting_lane(self):
        commits = make_commits(
            ("f1", ["base"]),
            ("f2", ["base"]),
            ("base", ["older"]),
            ("n", []),
            ("older", []),
        )
        lanes = lanes_by_oid(assign_lanes(commits))

        self.assertEqual(lanes["base"], 0)
        # f2's lane was waiting on base as well; it is free once base is placed.
        self.assertEqual(lanes["n"], 1)
        self.assertEqual(lanes["older"], 0)

    def test_missing_parent_frees_lane_without_error(self):
        commits = make_commits(("X", ["missing-oid"]), ("Y", []))
        rows = assign_lanes(commits)

        self.assertEqual(lanes_by_oid(rows), {"X": 0, "Y": 0})
        self.assertEqual(rows[0].lane_count, 1)

    def test_merge_with_missing_first_parent(self):
        commits = make_commits(("A", ["missing", "C"]), ("C", []))
        rows = assign_lanes(commits)

        self.assertEqual(lanes_by_oid(rows), {"A": 0, "C": 0})

    def test_repeated_parent_is_considered_once(self):
        commits = make_commits(("A", ["B", "B"]), ("B", []))
        rows = assign_lanes(commits)

        self.assertEqual([row.lane for row in rows], [0, 0])
        self.assertEqual(rows[0].lane_count, 1)

    def test_parent_tracks_hold_the_lane_reserved_for_each_parent(self):
        commits = make_commits(
            ("X", ["P"]),  # lane 0 expects P
            ("M", ["F", "P", "N", "gone"]),
            ("F", []),
            ("N", []),
            ("P", []),
        )
        rows = assign_lanes(commits)

        self.assertEqual(rows[0].parent_tracks, {"P": 0})
        # first parent keeps M's lane, P rides lane 0, N opens a new lane, absent parents get none
        self.assertEqual(rows[1].parent_tracks, {"F": 1, "P": 0, "N": 2})
        self.assertEqual(rows[2].parent_tracks, {})

    def test_missing_first_parent_gets_no_track(self):
        rows = assign_lanes(make_commits(("A", ["missing", "C"]), ("C", [])))

        self.assertEqual(rows[0].parent_tracks, {"C": 0})

    def test_assignment_is_deterministic(self):
        entries = (("A", ["B", "C"]), ("E", ["C"]), ("B", ["D"]), ("C", ["D"]), ("D", []))
        first = [(row.oid, row.lane, row.lane_count) for row in assign_lanes(make_commits(*entries))]
        second = [(row.oid, row.lane, row.lane_count) for row in assign_lanes(make_commits(*entries))]

        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
