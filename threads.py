import logging

from PyQt6.QtCore import QThread, pyqtSignal

from dag_layout_algorithm import DAGLayoutAlgorithm
from git_manager import GitManager


class GraphLoadThread(QThread):
    """在后台读取提交并计算图布局的线程

    Each thread opens its own repository handle and owns its own
    DAGLayoutAlgorithm, so overlapping refreshes share neither GitPython's
    cat-file pipes nor lane state.
    """

    loaded = pyqtSignal(list)  # list[GraphRow]
    error = pyqtSignal(str)

    def __init__(self, repo_path: str, depth: int, palette_size: int, parent=None, manager_factory=GitManager):
        super().__init__(parent)
        self.repo_path = repo_path
        self.depth = depth
        self.manager_factory = manager_factory
        self.layout_algorithm = DAGLayoutAlgorithm(palette_size=palette_size)

    def run(self):
        git_manager = self.manager_factory(self.repo_path)
        try:
            if not git_manager.initialize():
                raise Exception(f"Not a git repository: {self.repo_path}")
            commits = git_manager.get_graph_commits(depth=self.depth)
            rows = self.layout_algorithm.calculate_layout(commits)
        except Exception as e:
            logging.exception("加载提交图失败")
            self.error.emit(str(e))
            return
        finally:
            git_manager.close()
        self.loaded.emit(rows)
