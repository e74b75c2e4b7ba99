import os
import sys
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtCore import QUrl
from PyQt6.QtWidgets import QApplication

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from commit_detail_view import CommitDetailView, format_commit_details
from dag_layout_algorithm import DAGLayoutAlgorithm
from git_graph_data import Author, CommitNode


def single_row(**kwargs):
    commit = CommitNode(
        kwargs.pop("oid", "0123456789abcdef"),
        kwargs.pop("parents", []),
        Author(kwargs.pop("name", "Ada"), "ada@example.com", 1700000000),
        kwargs.pop("message", "Initial commit"),
        **kwargs,
    )
    return DAGLayoutAlgorithm().calculate_layout([commit])[0]


class TestFormatCommitDetails(unittest.TestCase):
    def test_root_commit(self):
        details = format_commit_details(single_row())

        self.assertIn("Initial commit", details)
        self.assertIn("01234567 Ada &lt;ada@example.com&gt;", details)
        self.assertIn("Parents: (root commit)", details)
        self.assertIn("Branches: none", details)

    def test_commit_text_is_escaped(self):
        details = format_commit_details(single_row(name="<i>Eve</i>", message="<script>x</script>\n\nbody"))

        self.assertNotIn("<script>", details)
        self.assertNotIn("<i>", details)
        self.assertIn("&lt;script&gt;x&lt;/script&gt;\n\nbody", details)

    def test_long_branch_list_is_collapsed(self):
        row = single_row(branches=["main", "dev", "release"], remote_branches=["origin/main", "origin/dev"])

        self.assertIn('main, dev, release <a href="#more_branches">(+2 more)</a>', format_commit_details(row))
        self.assertIn(
            "Branches: main, dev, release, origin/main, origin/dev",
            format_commit_details(row, branches_expanded=True),
        )


class TestCommitDetailView(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def test_more_link_expands_branches(self):
        view = CommitDetailView()
        view.show_commit(single_row(branches=["a", "b", "c", "d"]))
        self.assertIn("Branches: a, b, c (+1 more)", view.toPlainText())

        view.handle_branch_link_click(QUrl("#more_branches"))

        self.assertTrue(view.branches_expanded)
        self.assertIn("Branches: a, b, c, d", view.toPlainText())

    def test_clearing(self):
        view = CommitDetailView()
        view.show_commit(single_row())
        view.show_commit(None)

        self.assertEqual(view.toPlainText(), "")
        self.assertIsNone(view.current_row)


if __name__ == "__main__":
    unittest.main()
