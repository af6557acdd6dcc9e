"""Walk a project directory and gather file statistics."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass

from crazydev.models import FileInfo, FileStats

NO_EXTENSION = "(no extension)"
LARGEST_FILES_KEPT = 10

DEFAULT_IGNORE_DIRS = (
    ".git", "node_modules", "vendor", "dist", "build", ".idea", ".vscode",
    "__pycache__", "venv", "env", ".env", ".pytest_cache", ".next", "target",
)
DEFAULT_IGNORE_FILES = (".DS_Store", "Thumbs.db", ".gitignore", ".gitattributes")


def _extension(name: str) -> str:
    index = name.rfind(".")
    return name[index:] if index >= 0 else ""


@dataclass
class _Walk:
    root: str
    max_files: int
    max_file_size: int
    stats: FileStats
    count: int = 0


class FileAnalyzer:
    """Collects counts and sizes of project files, skipping common noise."""

    def __init__(self, ignore_dirs=DEFAULT_IGNORE_DIRS, ignore_files=DEFAULT_IGNORE_FILES):
        self.ignore_dirs = frozenset(ignore_dirs)
        self.ignore_files = frozenset(ignore_files)

    def analyze_files(self, path, max_files: int, max_file_size: int) -> FileStats:
        """Return statistics for at most ``max_files`` files under ``path``."""
        root = os.fspath(path)
        walk = _Walk(root=root, max_files=max_files, max_file_size=max_file_size, stats=FileStats())
        try:
            info = os.lstat(root)
        except OSError:
            return walk.stats
        self._visit(walk, root, os.path.basename(os.path.normpath(root)), info)
        return walk.stats

    def _visit(self, walk: _Walk, path: str, name: str, info: os.stat_result) -> bool:
        """Handle one entry; True means the rest of its directory is skipped."""
        if stat.S_ISDIR(info.st_mode):
            self._visit_dir(walk, path, name)
            return False
        return self._visit_file(walk, path, name, info)

    def _visit_dir(self, walk: _Walk, path: str, name: str) -> None:
        if name in self.ignore_dirs:
            return
        rel = os.path.relpath(path, walk.root)
        if rel != ".":
            walk.stats.directory_tree[rel] = 0
        try:
            names = sorted(os.listdir(path))
        except OSError:
            return
        for child_name in names:
            child = os.path.normpath(os.path.join(path, child_name))
            try:
                child_info = os.lstat(child)
            except OSError:
                continue
            if self._visit(walk, child, child_name, child_info):
                break

    def _visit_file(self, walk: _Walk, path: str, name: str, info: os.stat_result) -> bool:
        if name in self.ignore_files:
            return False
        if walk.count >= walk.max_files:
            return True
        size = info.st_size
        if size > walk.max_file_size:
            return False

        stats = walk.stats
        walk.count += 1
        stats.total_files += 1
        stats.total_size += size

        ext = _extension(name).lower() or NO_EXTENSION
        stats.files_by_type[ext] = stats.files_by_type.get(ext, 0) + 1
        stats.size_by_type[ext] = stats.size_by_type.get(ext, 0) + size

        rel_dir = os.path.relpath(os.path.dirname(path) or ".", walk.root)
        if rel_dir != ".":
            stats.directory_tree[rel_dir] = stats.directory_tree.get(rel_dir, 0) + 1

        entry = FileInfo(path=path, size=size, type=ext)
        largest = stats.largest_files
        if len(largest) < LARGEST_FILES_KEPT:
            largest.append(entry)
            largest.sort(key=lambda f: f.size, reverse=True)
        elif size > largest[-1].size:
            largest[-1] = entry
            largest.sort(key=lambda f: f.size, reverse=True)
        return False