# git_graph_layout.py

from typing import Optional

from git_graph_data import CommitNode, LaneRow


def _lowest_free_lane(lanes: list[Optional[str]]) -> int:
    """Index of the first free slot, appending a new lane if every slot is taken."""
    for lane_idx, expecting in enumerate(lanes):
        if expecting is None:
            return lane_idx
    lanes.append(None)
    return len(lanes) - 1


def _expecting_lane(lanes: list[Optional[str]], oid: str) -> int:
    """Lowest lane expecting `oid`, or -1."""
    for lane_idx, expecting in enumerate(lanes):
        if expecting == oid:
            return lane_idx
    return -1


def assign_lanes(commits: list[CommitNode]) -> list[LaneRow]:
    """
    Places every commit in a vertical lane, in a single forward pass.

    The input order is kept as-is (newest first, as git log lists them) and
    becomes the row order. Lane state is an arena of slots, each either free
    (None) or holding the oid it must see next to continue its track:

    - a commit takes the lowest lane already expecting it, otherwise the
      lowest free lane, otherwise a new lane;
    - afterwards that lane expects the first parent, or is freed when there
      is no parent or the parent is outside the working set;
    - extra merge parents open the lowest free lane unless some lane is
      already expecting them.

    Each row also records, per present parent, the lane that stays reserved
    for it until the parent's row (`LaneRow.parent_tracks`). Connectors run
    along that lane, so they never cross another commit's dot.

    This is first-fit, not a minimum-width layout. Oids must be unique in
    `commits`; duplicates produce an undefined layout and must be removed by
    the caller.
    """
    present = {commit.oid for commit in commits}
    lanes: list[Optional[str]] = []
    rows: list[LaneRow] = []

    for index, commit in enumerate(commits):
        assigned_lane = -1
        for lane_idx, expecting in enumerate(lanes):
            if expecting == commit.oid:
                if assigned_lane == -1:
                    assigned_lane = lane_idx
                else:
                    # Resolved by the lane above; this track converges here.
                    lanes[lane_idx] = None

        if assigned_lane == -1:
            assigned_lane = _lowest_free_lane(lanes)

        row = LaneRow(index, assigned_lane, commit)
        rows.append(row)

        if not commit.parents:
            lanes[assigned_lane] = None
            continue

        first_parent = commit.parents[0]
        if first_parent in present:
            lanes[assigned_lane] = first_parent
            row.parent_tracks[first_parent] = assigned_lane
        else:
            lanes[assigned_lane] = None

        for parent_oid in commit.parents[1:]:
            if parent_oid == first_parent or parent_oid in row.parent_tracks or parent_oid not in present:
                continue
            track = _expecting_lane(lanes, parent_oid)
            if track == -1:
                track = _lowest_free_lane(lanes)
                lanes[track] = parent_oid
            row.parent_tracks[parent_oid] = track

    lane_count = max((row.lane for row in rows), default=-1) + 1
    for row in rows:
        row.lane_count = lane_count

    return rows
