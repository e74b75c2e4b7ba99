# git_graph_view.py

from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QAction, QPainter
from PyQt6.QtWidgets import QApplication, QGraphicsScene, QGraphicsTextItem, QGraphicsView, QMenu

from git_graph_data import GraphRow
from git_graph_items import (
    REF_PADDING_X,
    CommitCircle,
    CommitMessageItem,
    ConnectorItem,
    GraphStyle,
    ReferenceLabel,
)

EMPTY_PLACEHOLDER_TEXT = "No commits yet"


class GitGraphView(QGraphicsView):
    commit_item_clicked = pyqtSignal(str)

    def __init__(self, parent=None, style: Optional[GraphStyle] = None):
        super().__init__(parent)
        self.graph_style = style or GraphStyle()
        self.scene = QGraphicsScene(self)
        self.setScene(self.scene)

        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)  # Enable panning
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)  # Zoom towards mouse

        self._commit_items: dict[str, CommitCircle] = {}
        self._edge_items: list[ConnectorItem] = []
        self._ref_labels: list[ReferenceLabel] = []
        self._message_items: list[CommitMessageItem] = []
        self._placeholder: Optional[QGraphicsTextItem] = None

        self._zoom_factor_base = 1.1

        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.customContextMenuRequested.connect(self._show_context_menu)

    def set_graph_style(self, style: GraphStyle):
        self.graph_style = style

    def clear_graph(self):
        self.scene.clear()
        self._commit_items.clear()
        self._edge_items.clear()
        self._ref_labels.clear()
        self._message_items.clear()
        self._placeholder = None

    def populate_graph(self, rows: list[GraphRow]):
        """Rebuilds the scene from scratch for one layout pass."""
        self.clear_graph()

        if not rows:
            self._placeholder = self.scene.addText(EMPTY_PLACEHOLDER_TEXT)
            return

        style = self.graph_style
        # Labels and messages start right of the widest lane, same column for every row.
        text_x = style.graph_width(rows[0].lane_count) + REF_PADDING_X

        for row in rows:
            for edge in row.edges:
                edge_item = ConnectorItem(edge, row, style)
                self.scene.addItem(edge_item)
                self._edge_items.append(edge_item)

            center_y = style.row_top(row.index) + style.row_height / 2
            commit_item = CommitCircle(row, style)
            commit_item.setPos(style.lane_x(row.lane), center_y)
            self.scene.addItem(commit_item)
            self._commit_items[row.oid] = commit_item

            label_x = text_x
            labels = [(name, False) for name in row.commit.branches]
            labels += [(name, True) for name in row.commit.remote_branches]
            for name, is_remote in labels:
                ref_label = ReferenceLabel(name, is_remote=is_remote)
                ref_label.setPos(label_x, center_y - ref_label.boundingRect().height() / 2)
                self.scene.addItem(ref_label)
                self._ref_labels.append(ref_label)
                label_x += ref_label.boundingRect().width() + REF_PADDING_X

            message_item = CommitMessageItem(row.commit.summary)
            message_item.setPos(label_x, center_y - message_item.boundingRect().height() / 2)
            self.scene.addItem(message_item)
            self._message_items.append(message_item)

        self.scene.setSceneRect(self.scene.itemsBoundingRect().adjusted(0, 0, 50, 0))

    def commit_item(self, oid: str) -> Optional[CommitCircle]:
        return self._commit_items.get(oid)

    def wheelEvent(self, event):
        """Ctrl + wheel zooms, plain wheel scrolls."""
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            if event.angleDelta().y() > 0:
                self.zoom_in()
            else:
                self.zoom_out()
            event.accept()
        else:
            super().wheelEvent(event)

    def zoom_in(self):
        self.scale(self._zoom_factor_base, self._zoom_factor_base)

    def zoom_out(self):
        self.scale(1.0 / self._zoom_factor_base, 1.0 / self._zoom_factor_base)

    def keyPressEvent(self, event):
        if event.key() in (Qt.Key.Key_Plus, Qt.Key.Key_Equal):
            if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
                self.zoom_in()
        elif event.key() == Qt.Key.Key_Minus:
            if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
                self.zoom_out()
        else:
            super().keyPressEvent(event)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            item = self.itemAt(event.pos())
            if isinstance(item, CommitCircle):
                self.commit_item_clicked.emit(item.oid)
        super().mousePressEvent(event)

    def _show_context_menu(self, pos):
        """Show context menu for right-click on a commit circle."""
        item = self.scene.itemAt(self.mapToScene(pos), self.transform())

        if isinstance(item, CommitCircle):
            menu = QMenu(self)
            copy_action = QAction("Copy Commit", self)
            copy_action.triggered.connect(lambda: self._copy_commit_sha(item.oid))
            menu.addAction(copy_action)
            menu.exec(self.viewport().mapToGlobal(pos))

    def _copy_commit_sha(self, sha):
        """Copy commit SHA to clipboard."""
        QApplication.clipboard().setText(sha)
