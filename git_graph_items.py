# git_graph_items.py

import html
from datetime import datetime

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QPainterPath, QPen
from PyQt6.QtWidgets import QGraphicsEllipseItem, QGraphicsItem, QGraphicsPathItem, QGraphicsTextItem

from dag_layout_algorithm import color_key
from git_graph_data import Edge, GraphRow
from settings import DEFAULT_PALETTE

SELECTED_COMMIT_COLOR = QColor(Qt.GlobalColor.yellow)
HOVER_COMMIT_COLOR = QColor(Qt.GlobalColor.lightGray)
DOT_BORDER_COLOR = QColor("#1e1e1e")

EDGE_THICKNESS = 2

REF_PADDING_X = 4
REF_PADDING_Y = 2
REF_BACKGROUND_COLOR_BRANCH = QColor("#e6f7ff")  # Light blue
REF_BORDER_COLOR_BRANCH = QColor("#91d5ff")
REF_BACKGROUND_COLOR_REMOTE = QColor("#f6ffed")  # Light green
REF_BORDER_COLOR_REMOTE = QColor("#b7eb8f")
REF_TEXT_COLOR = QColor(Qt.GlobalColor.black)

COMMIT_MSG_MAX_LENGTH = 60
COMMIT_MSG_COLOR = QColor("#444444")
COMMIT_MSG_FONT_FAMILY = "Arial"
COMMIT_MSG_FONT_SIZE = 9


class GraphStyle:
    """Pixel geometry and palette of the graph. Lane assignment never sees these."""

    def __init__(self, lane_width: float = 20, dot_radius: float = 6, row_height: float = 50, palette=None):
        self.lane_width = lane_width
        self.dot_radius = dot_radius
        self.row_height = row_height
        self.palette: list[QColor] = [QColor(c) for c in (palette or DEFAULT_PALETTE)]

    @classmethod
    def from_settings(cls, settings) -> "GraphStyle":
        return cls(**settings.get_graph_style())

    @property
    def palette_size(self) -> int:
        return len(self.palette)

    def lane_x(self, lane: int) -> float:
        return lane * self.lane_width + self.lane_width / 2

    def row_top(self, index: int) -> float:
        return index * self.row_height

    def color_for(self, key: int) -> QColor:
        return self.palette[key % self.palette_size]

    def edge_color(self, edge: Edge) -> QColor:
        return self.color_for(color_key(edge.track, self.palette_size))

    def graph_width(self, lane_count: int) -> float:
        return max(lane_count, 1) * self.lane_width + self.lane_width


def connector_path(edge: Edge, own_lane: int, row_top: float, style: GraphStyle) -> QPainterPath:
    """Geometry of one connector segment inside the row starting at `row_top`.

    Inbound segments run from the top of the row on the track lane into the
    dot, outbound segments from the dot to the bottom of the row on the track
    lane, pass-through segments span the full row height.
    """
    center_y = row_top + style.row_height / 2
    bottom = row_top + style.row_height
    track_x = style.lane_x(edge.track)

    path = QPainterPath()
    if edge.into_dot_from_above:
        dot_x = style.lane_x(edge.to_lane)
        path.moveTo(track_x, row_top)
        if track_x == dot_x:
            path.lineTo(dot_x, center_y)
        else:
            path.quadTo(QPointF(track_x, center_y), QPointF(dot_x, center_y))
    elif edge.from_lane == edge.to_lane and edge.from_lane != own_lane:
        x = style.lane_x(edge.from_lane)
        path.moveTo(x, row_top)
        path.lineTo(x, bottom)
    else:
        dot_x = style.lane_x(edge.from_lane)
        path.moveTo(dot_x, center_y)
        if track_x == dot_x:
            path.lineTo(dot_x, bottom)
        else:
            path.quadTo(QPointF(dot_x, bottom - 5), QPointF(track_x, bottom))
    return path


def commit_tooltip(row: GraphRow) -> str:
    """Rich-text tooltip; every commit-supplied string is escaped."""
    commit = row.commit
    date = datetime.fromtimestamp(commit.author.timestamp).strftime("%Y-%m-%d %H:%M:%S")
    lines = [
        f"<b>SHA:</b> {html.escape(commit.oid)}",
        f"<b>Author:</b> {html.escape(commit.author.name)} &lt;{html.escape(commit.author.email)}&gt;",
        f"<b>Date:</b> {date}",
        f"<b>Message:</b> {html.escape(commit.summary)}",
    ]
    return "<br>".join(lines)


class CommitCircle(QGraphicsEllipseItem):
    def __init__(self, row: GraphRow, style: GraphStyle, parent: QGraphicsItem = None):
        radius = style.dot_radius
        super().__init__(-radius, -radius, 2 * radius, 2 * radius, parent)
        self.row = row
        self.base_color = style.color_for(row.color_key)
        self.current_brush_color = self.base_color

        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsSelectable, True)
        self.setAcceptHoverEvents(True)

        self.setBrush(QBrush(self.base_color))
        self.setPen(QPen(DOT_BORDER_COLOR, 2))
        self.setToolTip(commit_tooltip(row))

    @property
    def oid(self) -> str:
        return self.row.oid

    def itemChange(self, change, value):
        if change == QGraphicsItem.GraphicsItemChange.ItemSelectedChange:
            self.current_brush_color = SELECTED_COMMIT_COLOR if value else self.base_color
            self.setBrush(QBrush(self.current_brush_color))
        return super().itemChange(change, value)

    def hoverEnterEvent(self, event):
        if not self.isSelected():
            self.setBrush(QBrush(HOVER_COMMIT_COLOR))
        super().hoverEnterEvent(event)

    def hoverLeaveEvent(self, event):
        if not self.isSelected():
            self.setBrush(QBrush(self.current_brush_color))
        super().hoverLeaveEvent(event)


class ConnectorItem(QGraphicsPathItem):
    def __init__(self, edge: Edge, row: GraphRow, style: GraphStyle, parent: QGraphicsItem = None):
        super().__init__(parent)
        self.edge = edge

        self.setPen(
            QPen(
                style.edge_color(edge),
                EDGE_THICKNESS,
                Qt.PenStyle.SolidLine,
                Qt.PenCapStyle.RoundCap,
                Qt.PenJoinStyle.RoundJoin,
            )
        )
        self.setZValue(-1)  # Draw edges behind commits
        self.setPath(connector_path(edge, row.lane, style.row_top(row.index), style))


class ReferenceLabel(QGraphicsTextItem):
    def __init__(self, text: str, is_remote: bool = False, parent: QGraphicsItem = None):
        super().__init__(parent)
        self.setPlainText(text)
        self.setFont(QFont("Arial", 8))

        if is_remote:
            self.bg_color = REF_BACKGROUND_COLOR_REMOTE
            self.border_color = REF_BORDER_COLOR_REMOTE
        else:
            self.bg_color = REF_BACKGROUND_COLOR_BRANCH
            self.border_color = REF_BORDER_COLOR_BRANCH
        self.setDefaultTextColor(REF_TEXT_COLOR)

    def paint(self, painter, option, widget=None):
        painter.setPen(QPen(self.border_color, 1))
        painter.setBrush(QBrush(self.bg_color))
        painter.drawRoundedRect(self.boundingRect(), 3, 3)
        super().paint(painter, option, widget)

    def boundingRect(self) -> QRectF:
        rect = super().boundingRect()
        rect.adjust(-REF_PADDING_X, -REF_PADDING_Y, REF_PADDING_X, REF_PADDING_Y)
        return rect


class CommitMessageItem(QGraphicsTextItem):
    def __init__(self, full_message: str, parent: QGraphicsItem = None):
        super().__init__(parent)
        self.full_message = full_message

        if len(full_message) > COMMIT_MSG_MAX_LENGTH:
            display_text = full_message[: COMMIT_MSG_MAX_LENGTH - 3] + "..."
        else:
            display_text = full_message

        self.setPlainText(display_text)
        self.setFont(QFont(COMMIT_MSG_FONT_FAMILY, COMMIT_MSG_FONT_SIZE))
        self.setDefaultTextColor(COMMIT_MSG_COLOR)

        if display_text != full_message:
            self.setToolTip(html.escape(full_message))
