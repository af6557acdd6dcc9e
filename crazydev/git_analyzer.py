"""Read facts about a Git repository directly from its .git directory."""

from __future__ import annotations

import configparser
import heapq
import os
import zlib
from pathlib import Path

from crazydev.models import GitInfo

MAX_COMMITS = 100
_DEFAULT_BRANCH_CANDIDATES = ("main", "master", "develop")


class GitError(Exception):
    """Raised when a repository exists but cannot be read."""


class _Repo:
    def __init__(self, git_dir: Path):
        self.git_dir = git_dir
        self._packed = self._read_packed_refs()

    def _read_packed_refs(self) -> dict[str, str]:
        refs: dict[str, str] = {}
        packed = self.git_dir / "packed-refs"
        if packed.is_file():
            for line in packed.read_text(errors="replace").splitlines():
                if not line or line[0] in "#^":
                    continue
                sha, _, name = line.partition(" ")
                refs[name.strip()] = sha.strip()
        return refs

    def resolve(self, ref: str, depth: int = 0) -> str | None:
        if depth > 10:
            return None
        loose = self.git_dir / ref
        if loose.is_file():
            text = loose.read_text(errors="replace").strip()
            if text.startswith("ref:"):
                return self.resolve(text[4:].strip(), depth + 1)
            return text or None
        return self._packed.get(ref)

    def head(self) -> str:
        head = self.git_dir / "HEAD"
        try:
            return head.read_text(errors="replace").strip()
        except OSError as exc:
            raise GitError(f"error opening Git repository: {exc}") from exc

    def remotes(self) -> dict[str, str]:
        parser = configparser.ConfigParser(strict=False, interpolation=None)
        try:
            parser.read(self.git_dir / "config")
        except configparser.Error:
            return {}
        remotes = {}
        for section in parser.sections():
            if section.startswith('remote "') and section.endswith('"'):
                remotes[section[8:-1]] = parser[section].get("url", "").strip()
        return remotes

    def read_commit(self, sha: str) -> dict | None:
        obj = self.git_dir / "objects" / sha[:2] / sha[2:]
        try:
            raw = zlib.decompress(obj.read_bytes())
        except (OSError, zlib.error):
            return None
        header, _, body = raw.partition(b"\0")
        if not header.startswith(b"commit"):
            return None
        parents, author, time = [], "", 0
        for line in body.split(b"\n"):
            if not line:
                break
            key, _, value = line.decode("utf-8", "replace").partition(" ")
            if key == "parent":
                parents.append(value.strip())
            elif key == "author":
                author = value.split("<", 1)[0].strip()
            elif key == "committer":
                fields = value.rsplit(">", 1)[-1].split()
                time = int(fields[0]) if fields and fields[0].isdigit() else 0
        return {"parents": parents, "author": author, "time": time}


def _find_git_dir(path: Path) -> Path | None:
    dot_git = path / ".git"
    if dot_git.is_dir():
        return dot_git
    if dot_git.is_file():
        text = dot_git.read_text(errors="replace").strip()
        if text.startswith("gitdir:"):
            target = Path(text[7:].strip())
            return target if target.is_absolute() else (path / target)
    if (path / "HEAD").is_file() and (path / "objects").is_dir():
        return path
    return None


class GitAnalyzer:
    """Extracts remote, branches, last commit and contributors from a repository."""

    def __init__(self, max_commits: int = MAX_COMMITS):
        self.max_commits = max_commits

    def analyze_repository(self, path) -> tuple[GitInfo, bool]:
        """Return ``(info, is_repo)``; raises GitError for an unreadable repository."""
        info = GitInfo()
        git_dir = _find_git_dir(Path(path))
        if git_dir is None:
            return info, False
        repo = _Repo(git_dir)
        head = repo.head()

        remotes = repo.remotes()
        if remotes.get("origin"):
            info.remote_url = remotes["origin"]

        head_sha = None
        if head.startswith("ref:"):
            ref = head[4:].strip()
            if ref.startswith("refs/heads/"):
                info.current_branch = ref[len("refs/heads/"):]
            head_sha = repo.resolve(ref)
        elif head:
            head_sha = head
        if head_sha:
            info.last_commit = head_sha

        if "origin" in remotes:
            for branch in _DEFAULT_BRANCH_CANDIDATES:
                if repo.resolve(f"refs/remotes/origin/{branch}"):
                    info.default_branch = branch
                    break
        if not info.default_branch and info.current_branch:
            info.default_branch = info.current_branch

        if head_sha:
            info.contributors = self._contributors(repo, head_sha)
        return info, True

    def _contributors(self, repo: _Repo, start: str) -> list[str]:
        names: dict[str, None] = {}
        seen = {start}
        first = repo.read_commit(start)
        if first is None:
            return []
        queue = [(-first["time"], start, first)]
        count = 0
        while queue and count < self.max_commits:
            _, _, commit = heapq.heappop(queue)
            if commit["author"]:
                names[commit["author"]] = None
            count += 1
            for parent in commit["parents"]:
                if parent in seen:
                    continue
                seen.add(parent)
                loaded = repo.read_commit(parent)
                if loaded is not None:
                    heapq.heappush(queue, (-loaded["time"], parent, loaded))
        return list(names)