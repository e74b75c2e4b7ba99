import html
from datetime import datetime
from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QTextBrowser, QTextEdit

from git_graph_data import GraphRow

# 常量用于分支显示
MAX_BRANCHES_TO_SHOW = 3
SHORT_SHA_LENGTH = 8


def format_commit_details(row: GraphRow, branches_expanded: bool = False) -> str:
    """把提交信息渲染成 HTML，所有来自提交的文本都会转义"""
    commit = row.commit
    message = html.escape(commit.message.strip())
    commit_date = datetime.fromtimestamp(commit.author.timestamp)
    info_line = (
        f"{html.escape(commit.oid[:SHORT_SHA_LENGTH])} {html.escape(commit.author.name)} "
        f"&lt;{html.escape(commit.author.email)}&gt; on "
        f"{commit_date.strftime('%Y/%m/%d at %H:%M')}"
    )

    parents = ", ".join(html.escape(parent[:SHORT_SHA_LENGTH]) for parent in commit.parents) or "(root commit)"

    all_branches = commit.branches + commit.remote_branches
    if not all_branches:
        branch_text = "none"
    elif len(all_branches) > MAX_BRANCHES_TO_SHOW and not branches_expanded:
        shown = ", ".join(html.escape(name) for name in all_branches[:MAX_BRANCHES_TO_SHOW])
        hidden_count = len(all_branches) - MAX_BRANCHES_TO_SHOW
        branch_text = f'{shown} <a href="#more_branches">(+{hidden_count} more)</a>'
    else:
        branch_text = ", ".join(html.escape(name) for name in all_branches)

    return (
        f"<pre style='white-space: pre-wrap; word-wrap: break-word;'>{message}</pre>"
        f"<p>{info_line}</p>"
        f"<p>Parents: {parents}</p>"
        f"<p>Branches: {branch_text}</p>"
    )


class CommitDetailView(QTextBrowser):
    """
    Commit详细信息视图
    显示在图中点击的提交的完整信息
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setOpenLinks(False)
        self.current_row: Optional[GraphRow] = None
        self.branches_expanded = False

        self.setStyleSheet("""
            background-color: #f5f5f5;
            border: 1px solid #ddd;
            font-family: monospace;
            padding: 5px;
        """)
        self.setFrameShape(QTextEdit.Shape.NoFrame)
        self.setMinimumHeight(100)
        self.setTextInteractionFlags(
            Qt.TextInteractionFlag.TextSelectableByMouse
            | Qt.TextInteractionFlag.TextSelectableByKeyboard
            | Qt.TextInteractionFlag.LinksAccessibleByMouse
        )
        self.anchorClicked.connect(self.handle_branch_link_click)

    def show_commit(self, row: Optional[GraphRow]):
        """当选择的commit变化时调用"""
        self.current_row = row
        self.branches_expanded = False
        if row is None:
            self.clear()
            return
        self.setHtml(format_commit_details(row))

    def handle_branch_link_click(self, url):
        if url.fragment() == "more_branches" and self.current_row is not None:
            self.branches_expanded = True
            self.setHtml(format_commit_details(self.current_row, branches_expanded=True))
