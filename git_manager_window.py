import logging
import os
from functools import partial

from PyQt6.QtCore import QObject, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QGuiApplication
from PyQt6.QtWidgets import QFileDialog, QLabel, QMainWindow, QSpinBox, QSplitter, QToolBar
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from commit_detail_view import CommitDetailView
from git_graph_items import GraphStyle
from git_graph_view import GitGraphView
from git_manager import GitManager
from notification_widget import NotificationWidget
from settings import settings
from threads import GraphLoadThread

GIT_PATHS_OF_INTEREST = (".git/refs/", ".git/HEAD", ".git/FETCH_HEAD", ".git/packed-refs")


class GitChangeHandler(FileSystemEventHandler, QObject):
    """Handles file system events from watchdog and signals the main window."""

    git_changed = pyqtSignal(str, str)  # (event_type, path)

    def on_any_event(self, event):
        path = os.fsdecode(event.src_path)
        if is_git_change_of_interest(path):
            logging.debug("Git watchdog event: %s on %s", event.event_type, path)
            self.git_changed.emit(event.event_type, path)


def is_git_change_of_interest(path: str) -> bool:
    """True for ref and HEAD updates, the files a commit, fetch or checkout rewrites."""
    normalized = path.replace(os.sep, "/")
    return any(git_path in normalized for git_path in GIT_PATHS_OF_INTEREST)


class GitManagerWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle(self.tr("Git Graph"))

        screen = QGuiApplication.primaryScreen()
        if screen:
            geometry = screen.availableGeometry()
            self.setGeometry(
                geometry.x() + int(geometry.width() * 0.1),
                geometry.y() + int(geometry.height() * 0.1),
                int(geometry.width() * 0.8),
                int(geometry.height() * 0.8),
            )
        else:
            self.resize(1024, 768)

        self.git_manager = None
        self.settings = settings
        self.graph_style = GraphStyle.from_settings(self.settings)
        self.notification_widget = NotificationWidget(self)

        self.observer = None
        self._load_generation = 0
        self._load_threads: list[GraphLoadThread] = []

        # Git history refresh timer
        self.git_refresh_timer = QTimer(self)
        self.git_refresh_timer.setSingleShot(True)
        self.git_refresh_timer.setInterval(500)  # 0.5-second delay for git changes
        self.git_refresh_timer.timeout.connect(self.refresh_graph)

        self.graph_view = GitGraphView(self, style=self.graph_style)
        self.graph_view.commit_item_clicked.connect(self.on_commit_selected)
        self.commit_detail_view = CommitDetailView(self)

        splitter = QSplitter(Qt.Orientation.Vertical, self)
        splitter.addWidget(self.graph_view)
        splitter.addWidget(self.commit_detail_view)
        splitter.setStretchFactor(0, 4)
        splitter.setStretchFactor(1, 1)
        self.setCentralWidget(splitter)

        self._setup_toolbar()

        self.branch_label = QLabel()
        self.commit_label = QLabel()
        self.statusBar().addWidget(self.branch_label)
        self.statusBar().addPermanentWidget(self.commit_label)

    def _setup_toolbar(self):
        toolbar = QToolBar(self.tr("Repository"), self)
        self.addToolBar(toolbar)

        open_action = QAction(self.tr("Open Repository"), self)
        open_action.triggered.connect(self.open_folder_dialog)
        toolbar.addAction(open_action)

        self.refresh_action = QAction(self.tr("Refresh"), self)
        self.refresh_action.triggered.connect(self.refresh_graph)
        self.refresh_action.setEnabled(False)
        toolbar.addAction(self.refresh_action)

        toolbar.addSeparator()
        toolbar.addWidget(QLabel(self.tr("Depth")))
        self.depth_spin = QSpinBox()
        self.depth_spin.setRange(1, 10000)
        self.depth_spin.setValue(self.settings.get_log_depth())
        self.depth_spin.editingFinished.connect(self.on_depth_changed)
        toolbar.addWidget(self.depth_spin)

    def start_watching_folder(self, folder_path):
        """Starts the watchdog observer on the repository's .git directory."""
        self.stop_watching_folder()

        git_dir = os.path.join(folder_path, ".git")
        if not os.path.isdir(git_dir):
            return

        event_handler = GitChangeHandler()
        event_handler.git_changed.connect(self.handle_git_change)

        self.observer = Observer()
        self.observer.schedule(event_handler, git_dir, recursive=True)
        self.observer.start()
        logging.info("Started watching folder for changes: %s", git_dir)

    def stop_watching_folder(self):
        """Stops the watchdog observer if it's running."""
        if self.observer and self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
            logging.info("Stopped watching folder.")
        self.observer = None

    def handle_git_change(self, event_type, path):
        logging.debug("Git change event: %s - %s", event_type, path)
        self.git_refresh_timer.start()

    def open_folder_dialog(self):
        """打开文件夹选择对话框"""
        folder_path = QFileDialog.getExistingDirectory(self, self.tr("Select Git Repository"))
        if folder_path:
            self.open_folder(folder_path)

    def open_folder(self, folder_path):
        """打开指定的文件夹"""
        if self.git_manager:
            self.git_manager.close()
        self.commit_detail_view.show_commit(None)
        self.git_manager = GitManager(folder_path)
        if not self.git_manager.initialize():
            self.git_manager = None
            self.refresh_action.setEnabled(False)
            self.graph_view.clear_graph()
            self.notification_widget.show_message(self.tr("Selected folder is not a valid Git repository"))
            return

        self.settings.add_recent_folder(folder_path)
        self.setWindowTitle(f"{self.tr('Git Graph')} - {folder_path}")
        self.refresh_action.setEnabled(True)
        self.start_watching_folder(folder_path)
        self.refresh_graph()

    def on_depth_changed(self):
        depth = self.depth_spin.value()
        if depth != self.settings.get_log_depth():
            self.settings.set_log_depth(depth)
            self.refresh_graph()

    def refresh_graph(self):
        """Runs fetch, lane assignment and routing from scratch in a background thread."""
        if not self.git_manager:
            return

        self._update_branch_label()

        self._load_generation += 1
        thread = GraphLoadThread(
            self.git_manager.repo_path,
            depth=self.depth_spin.value(),
            palette_size=self.graph_style.palette_size,
            parent=self,
        )
        thread.loaded.connect(partial(self.handle_graph_loaded, self._load_generation))
        thread.error.connect(partial(self.handle_graph_error, self._load_generation))
        thread.finished.connect(partial(self._forget_thread, thread))
        self._load_threads.append(thread)
        thread.start()

    def _update_branch_label(self):
        try:
            info = self.git_manager.get_repo_info()
        except Exception as e:
            logging.warning("读取仓库信息失败：%s", e)
            return
        current = info["current_branch"] or self.tr("detached HEAD")
        remote = info["remotes"][0]["url"] if info["remotes"] else self.tr("none")
        self.branch_label.setText(f"{self.tr('Branch')}: {current}    {self.tr('Remote')}: {remote}")

    def handle_graph_loaded(self, generation, rows):
        if generation != self._load_generation:
            logging.debug("Dropping stale graph load %d (current %d)", generation, self._load_generation)
            return
        self.graph_view.populate_graph(rows)
        self.statusBar().showMessage(f"{len(rows)} {self.tr('commits')}", 3000)

    def handle_graph_error(self, generation, error_message):
        if generation != self._load_generation:
            logging.debug(
                "Dropping stale graph error %d (current %d): %s", generation, self._load_generation, error_message
            )
            return
        self.notification_widget.show_message(f"{self.tr('Failed to load commits')}：{error_message}")

    def _forget_thread(self, thread):
        if thread in self._load_threads:
            self._load_threads.remove(thread)
        thread.deleteLater()

    def on_commit_selected(self, oid):
        self.commit_label.setText(oid)
        item = self.graph_view.commit_item(oid)
        self.commit_detail_view.show_commit(item.row if item else None)

    def closeEvent(self, event):
        """Ensure the watchdog observer and loader threads are stopped on close."""
        self.stop_watching_folder()
        for thread in list(self._load_threads):
            thread.wait()
        if self.git_manager:
            self.git_manager.close()
        super().closeEvent(event)
