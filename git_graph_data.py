# git_graph_data.py

from dataclasses import dataclass
from typing import Optional

STRAIGHT = "straight"
CURVE = "curve"


class Author:
    def __init__(self, name: str, email: str, timestamp: int):
        self.name: str = name
        self.email: str = email
        self.timestamp: int = timestamp  # seconds since epoch

    def to_dict(self) -> dict:
        return {"name": self.name, "email": self.email, "timestamp": self.timestamp}

    def __repr__(self) -> str:
        return f"Author('{self.name}', '{self.email}', {self.timestamp})"


class CommitNode:
    def __init__(
        self,
        oid: str,
        parents: Optional[list[str]] = None,
        author: Optional[Author] = None,
        message: str = "",
        branches: Optional[list[str]] = None,
        remote_branches: Optional[list[str]] = None,
    ):
        self.oid: str = oid
        self.parents: list[str] = list(parents or [])  # first entry is the mainline parent
        self.author: Author = author or Author("", "", 0)
        self.message: str = message
        self.branches: list[str] = list(branches or [])  # e.g. ['main', 'feature/x']
        self.remote_branches: list[str] = list(remote_branches or [])  # e.g. ['origin/main']

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.strip().split("\n")[0] if self.message else ""

    @classmethod
    def from_dict(cls, data: dict) -> "CommitNode":
        """Builds a node from the wire form used between the commit source and the layout."""
        author = data.get("author") or {}
        return cls(
            oid=data["oid"],
            parents=data.get("parents") or [],
            author=Author(author.get("name", ""), author.get("email", ""), int(author.get("timestamp", 0))),
            message=data.get("message", ""),
            branches=data.get("branches") or [],
            remote_branches=data.get("remoteBranches") or [],
        )

    def to_dict(self) -> dict:
        return {
            "oid": self.oid,
            "parents": list(self.parents),
            "author": self.author.to_dict(),
            "message": self.message,
            "branches": list(self.branches),
            "remoteBranches": list(self.remote_branches),
        }

    def __repr__(self) -> str:
        return (
            f"CommitNode(oid='{self.oid[:7]}', "
            f"parents={[p[:7] for p in self.parents]}, "
            f"branches={self.branches}, "
            f"remote_branches={self.remote_branches}, "
            f"message='{self.summary[:20]}...')"
        )


@dataclass(frozen=True)
class Edge:
    """One connector segment drawn inside a single row."""

    from_lane: int
    to_lane: int
    kind: str  # STRAIGHT or CURVE
    into_dot_from_above: bool = False
    track_lane: Optional[int] = None  # only set when the vertical run is not on from_lane

    @property
    def track(self) -> int:
        """Lane the connector runs along between its child row and parent row."""
        return self.from_lane if self.track_lane is None else self.track_lane

    def to_dict(self) -> dict:
        return {
            "fromLane": self.from_lane,
            "toLane": self.to_lane,
            "kind": self.kind,
            "intoDotFromAbove": self.into_dot_from_above,
            "trackLane": self.track,
        }


class LaneRow:
    """Lane placement of one commit within a single layout pass."""

    def __init__(
        self,
        index: int,
        lane: int,
        commit: CommitNode,
        lane_count: int = 0,
        parent_tracks: Optional[dict[str, int]] = None,
    ):
        self.index: int = index
        self.lane: int = lane
        self.lane_count: int = lane_count
        self.commit: CommitNode = commit
        # parent oid -> lane held for that parent from this row down to the parent's row
        self.parent_tracks: dict[str, int] = dict(parent_tracks or {})

    @property
    def oid(self) -> str:
        return self.commit.oid

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(index={self.index}, oid='{self.oid[:7]}', lane={self.lane}, lane_count={self.lane_count})"


class GraphRow(LaneRow):
    """A LaneRow together with its routed edges and color key."""

    def __init__(self, lane_row: LaneRow, edges: list[Edge], color_key: int):
        super().__init__(
            lane_row.index, lane_row.lane, lane_row.commit, lane_row.lane_count, lane_row.parent_tracks
        )
        self.edges: list[Edge] = edges
        self.color_key: int = color_key

    @property
    def marker(self) -> tuple[int, int]:
        """(lane, row) of the commit dot."""
        return self.lane, self.index

    def to_dict(self) -> dict:
        return {
            "lane": self.lane,
            "laneCount": self.lane_count,
            "edges": [edge.to_dict() for edge in self.edges],
            "colorKey": self.color_key,
        }
