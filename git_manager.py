import logging
from typing import List, Optional

import git
import git.exc

from git_graph_data import Author, CommitNode

# Errors GitPython raises for a ref it cannot walk.
UNRESOLVABLE_REF_ERRORS = (git.GitCommandError, git.exc.ODBError, ValueError)


class GitManager:
    def __init__(self, repo_path: str):
        self.repo_path = repo_path
        self.repo: Optional[git.Repo] = None

    def initialize(self) -> bool:
        """初始化 Git 仓库"""
        try:
            self.repo = git.Repo(self.repo_path)
            return True
        except (git.InvalidGitRepositoryError, git.NoSuchPathError):
            logging.warning("GitManager: '%s' 不是有效的 Git 仓库", self.repo_path)
            self.repo = None
            return False

    def close(self):
        """释放 GitPython 的 cat-file 子进程"""
        if self.repo:
            self.repo.close()
            self.repo = None

    def _require_repo(self) -> git.Repo:
        if not self.repo:
            raise Exception("Repository not initialized.")
        return self.repo

    def get_branches(self) -> List[str]:
        """获取所有本地分支"""
        if not self.repo:
            return []
        return [branch.name for branch in self.repo.branches]

    def get_remote_branches(self) -> List[str]:
        """获取所有远程分支的完整名称（例如 'origin/main'），不包括符号引用 'origin/HEAD'"""
        if not self.repo:
            return []
        remote_branches = []
        for remote in self.repo.remotes:
            for ref in remote.refs:
                if ref.name.endswith("/HEAD"):
                    continue
                remote_branches.append(ref.name)
        return remote_branches

    def get_repo_info(self) -> dict:
        """当前分支（分离 HEAD 时为 None）以及远程仓库列表"""
        repo = self._require_repo()
        try:
            current_branch = repo.active_branch.name
        except TypeError:
            current_branch = None

        remotes = []
        for remote in repo.remotes:
            try:
                url = remote.url
            except (git.GitCommandError, AttributeError):
                url = None
            remotes.append({"name": remote.name, "url": url})

        return {"current_branch": current_branch, "remotes": remotes}

    def _collect_ref_tips(self, repo: git.Repo) -> tuple[dict[str, list[str]], dict[str, list[str]]]:
        """Maps commit oid -> local branch names and -> remote branch names pointing at it."""
        local_tips: dict[str, list[str]] = {}
        remote_tips: dict[str, list[str]] = {}

        for head in repo.heads:
            try:
                local_tips.setdefault(head.commit.hexsha, []).append(head.name)
            except UNRESOLVABLE_REF_ERRORS as e:
                logging.warning("GitManager: 无法解析分支 %s：%s", head.name, e)

        for remote in repo.remotes:
            for ref in remote.refs:
                if ref.name.endswith("/HEAD"):
                    continue
                try:
                    remote_tips.setdefault(ref.commit.hexsha, []).append(ref.name)
                except UNRESOLVABLE_REF_ERRORS as e:
                    logging.warning("GitManager: 无法解析远程分支 %s：%s", ref.name, e)

        return local_tips, remote_tips

    def get_graph_commits(self, depth: int = 100) -> List[CommitNode]:
        """获取提交图所需的提交列表

        Walks every local and remote branch (up to `depth` commits each),
        deduplicates by oid, labels branch tips, and returns at most `depth`
        commits ordered newest first by author timestamp. Refs that fail to
        resolve are skipped, so the result may be incomplete but never holds
        the same oid twice.
        """
        repo = self._require_repo()

        refs = self.get_branches() + self.get_remote_branches()
        commit_map: dict[str, CommitNode] = {}

        for ref in refs:
            try:
                for commit in repo.iter_commits(ref, max_count=depth):
                    if commit.hexsha in commit_map:
                        continue
                    commit_map[commit.hexsha] = CommitNode(
                        oid=commit.hexsha,
                        parents=[parent.hexsha for parent in commit.parents],
                        author=Author(commit.author.name, commit.author.email, int(commit.authored_date)),
                        message=commit.message.strip() if isinstance(commit.message, str) else "",
                    )
            except UNRESOLVABLE_REF_ERRORS as e:
                logging.warning("GitManager: 跳过无法解析的引用 %s：%s", ref, e)

        local_tips, remote_tips = self._collect_ref_tips(repo)
        for oid, names in local_tips.items():
            if oid in commit_map:
                commit_map[oid].branches.extend(names)
        for oid, names in remote_tips.items():
            if oid in commit_map:
                commit_map[oid].remote_branches.extend(names)

        commits = sorted(commit_map.values(), key=lambda c: c.author.timestamp, reverse=True)[:depth]
        logging.info("GitManager: 从 %d 个引用读取了 %d 个提交", len(refs), len(commits))
        return commits
