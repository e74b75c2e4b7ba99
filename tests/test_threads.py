import os
import shutil
import sys
import tempfile
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import git
from PyQt6.QtWidgets import QApplication

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from git_graph_data import CommitNode
from git_manager import GitManager
from threads import GraphLoadThread


class FakeGitManager:
    instances = []

    def __init__(self, repo_path, commits=None, error=None, valid=True):
        self.repo_path = repo_path
        self.commits = commits or []
        self.error = error
        self.valid = valid
        self.requested_depth = None
        self.closed = False
        FakeGitManager.instances.append(self)

    def initialize(self):
        return self.valid

    def get_graph_commits(self, depth=100):
        self.requested_depth = depth
        if self.error:
            raise self.error
        return self.commits

    def close(self):
        self.closed = True


class TestGraphLoadThread(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self):
        FakeGitManager.instances = []

    def run_thread(self, factory, depth=100, repo_path="/repo"):
        thread = GraphLoadThread(repo_path, depth, palette_size=7, manager_factory=factory)
        loaded, errors = [], []
        thread.loaded.connect(loaded.append)
        thread.error.connect(errors.append)
        thread.run()  # synchronous, same thread
        return loaded, errors

    def test_emits_laid_out_rows(self):
        commits = [CommitNode("A", ["B", "C"]), CommitNode("B", []), CommitNode("C", [])]

        loaded, errors = self.run_thread(lambda path: FakeGitManager(path, commits=commits), depth=25)

        self.assertEqual(errors, [])
        self.assertEqual(len(loaded), 1)
        self.assertEqual([row.lane for row in loaded[0]], [0, 0, 1])
        self.assertEqual(FakeGitManager.instances[0].requested_depth, 25)

    def test_failure_is_reported_not_raised(self):
        loaded, errors = self.run_thread(lambda path: FakeGitManager(path, error=Exception("cat-file died")))

        self.assertEqual(loaded, [])
        self.assertEqual(errors, ["cat-file died"])
        self.assertTrue(FakeGitManager.instances[0].closed)

    def test_invalid_repository_is_reported(self):
        loaded, errors = self.run_thread(lambda path: FakeGitManager(path, valid=False), repo_path="/nowhere")

        self.assertEqual(loaded, [])
        self.assertEqual(errors, ["Not a git repository: /nowhere"])

    def test_every_run_opens_and_closes_its_own_repository(self):
        factory = lambda path: FakeGitManager(path)  # noqa: E731
        self.run_thread(factory)
        self.run_thread(factory)

        first, second = FakeGitManager.instances
        self.assertIsNot(first, second)
        self.assertEqual([first.repo_path, second.repo_path], ["/repo", "/repo"])
        self.assertTrue(first.closed and second.closed)

    def test_each_thread_has_its_own_layout_algorithm(self):
        first = GraphLoadThread("/repo", 10, palette_size=7)
        second = GraphLoadThread("/repo", 10, palette_size=7)

        self.assertIsNot(first.layout_algorithm, second.layout_algorithm)

    def test_loads_real_repository_without_touching_callers_handle(self):
        repo_path = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, repo_path, ignore_errors=True)
        repo = git.Repo.init(repo_path)
        self.addCleanup(repo.close)
        actor = git.Actor("Test User", "test@example.com")
        with open(os.path.join(repo_path, "a.txt"), "w") as f:
            f.write("a")
        repo.index.add(["a.txt"])
        tip = repo.index.commit("first", author=actor, committer=actor)

        window_manager = GitManager(repo_path)
        self.assertTrue(window_manager.initialize())
        self.addCleanup(window_manager.close)
        opened = []

        def factory(path):
            opened.append(GitManager(path))
            return opened[-1]

        loaded, errors = self.run_thread(factory, repo_path=repo_path)

        self.assertEqual(errors, [])
        self.assertEqual([row.oid for row in loaded[0]], [tip.hexsha])
        self.assertIsNone(opened[0].repo)
        self.assertIsNotNone(window_manager.repo)


if __name__ == "__main__":
    unittest.main()
