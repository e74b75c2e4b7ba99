from collections import Counter

from git_graph_data import CURVE, STRAIGHT, CommitNode, Edge, GraphRow, LaneRow
from git_graph_layout import assign_lanes
from utils import timeit


def color_key(lane: int, palette_size: int) -> int:
    """Palette slot for a lane. Depends on nothing but its arguments."""
    if palette_size <= 0:
        return 0
    return lane % palette_size


def _segment_kind(from_lane: int, to_lane: int) -> str:
    return STRAIGHT if from_lane == to_lane else CURVE


def _connector(from_lane: int, to_lane: int, track: int, into_dot_from_above: bool = False) -> Edge:
    return Edge(
        from_lane,
        to_lane,
        _segment_kind(from_lane, to_lane),
        into_dot_from_above=into_dot_from_above,
        track_lane=None if track == from_lane else track,
    )


class GraphIndex:
    """Lookups built once per pass: where each commit sits and who points at it."""

    def __init__(self, rows: list[LaneRow]):
        self.row_of: dict[str, int] = {}
        self.children_of: dict[str, list[int]] = {}

        for row in rows:
            self.row_of[row.oid] = row.index

        for row in rows:
            for parent_oid in dict.fromkeys(row.commit.parents):
                if parent_oid in self.row_of:
                    self.children_of.setdefault(parent_oid, []).append(row.index)

    def parent_rows(self, row: LaneRow) -> list[int]:
        """Row indices of the distinct parents placed below `row`, in parent order."""
        result = []
        for parent_oid in dict.fromkeys(row.commit.parents):
            parent_index = self.row_of.get(parent_oid)
            if parent_index is not None and parent_index > row.index:
                result.append(parent_index)
        return result

    def child_rows_above(self, row: LaneRow) -> list[int]:
        return [child for child in self.children_of.get(row.oid, []) if child < row.index]


class DAGLayoutAlgorithm:
    """Turns an ordered commit list into rows of lanes, connectors and markers.

    Every call to calculate_layout starts from empty lane state; nothing is
    kept between passes, so one instance per thread is enough for concurrent
    refreshes.
    """

    def __init__(self, palette_size: int = 7):
        self.palette_size = palette_size

    @timeit
    def calculate_layout(self, commits: list[CommitNode]) -> list[GraphRow]:
        """计算所有提交的DAG布局信息"""
        rows = assign_lanes(commits)
        edges_per_row = self.route_edges(rows)
        return [
            GraphRow(row, edges, color_key(row.lane, self.palette_size))
            for row, edges in zip(rows, edges_per_row)
        ]

    def route_edges(self, rows: list[LaneRow]) -> list[list[Edge]]:
        """Connector segments for every row, in row order.

        Per row: pass-through verticals of tracks spanning the row, then one
        inbound connector per child above, then one outbound connector per
        parent below. Pure: rows are not modified.
        """
        index = GraphIndex(rows)

        # Tracks open on the row after the child and close on the parent's row.
        opens: list[list[int]] = [[] for _ in rows]
        closes: list[list[int]] = [[] for _ in rows]
        for row in rows:
            for parent_index in index.parent_rows(row):
                if parent_index - row.index > 1:
                    lane = row.parent_tracks[rows[parent_index].oid]
                    opens[row.index + 1].append(lane)
                    closes[parent_index].append(lane)

        active: Counter = Counter()
        result: list[list[Edge]] = []
        for row in rows:
            for lane in closes[row.index]:
                active[lane] -= 1
            for lane in opens[row.index]:
                active[lane] += 1

            edges = [
                Edge(lane, lane, STRAIGHT)
                for lane in sorted(lane for lane, count in active.items() if count > 0 and lane != row.lane)
            ]
            for child_index in index.child_rows_above(row):
                child = rows[child_index]
                edges.append(
                    _connector(child.lane, row.lane, child.parent_tracks[row.oid], into_dot_from_above=True)
                )
            for parent_index in index.parent_rows(row):
                parent = rows[parent_index]
                edges.append(_connector(row.lane, parent.lane, row.parent_tracks[parent.oid]))

            result.append(edges)

        return result
