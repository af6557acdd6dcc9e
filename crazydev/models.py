"""Data records produced by a project context analysis."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

_FRACTION = re.compile(r"\.(\d+)")


@dataclass
class GitInfo:
    """Facts gathered from a Git repository."""

    remote_url: str = ""
    default_branch: str = ""
    current_branch: str = ""
    last_commit: str = ""
    contributors: list[str] = field(default_factory=list)


@dataclass
class TechStack:
    """A technology detected in a project."""

    name: str
    type: str = "language"
    confidence_score: float = 0.0
    detected_files: list[str] = field(default_factory=list)
    framework: str = ""
    version: str = ""


@dataclass
class FileInfo:
    """A single file with its size and extension."""

    path: str
    size: int
    type: str


@dataclass
class FileStats:
    """Aggregate statistics over the files of a project."""

    total_files: int = 0
    total_size: int = 0
    files_by_type: dict[str, int] = field(default_factory=dict)
    size_by_type: dict[str, int] = field(default_factory=dict)
    largest_files: list[FileInfo] = field(default_factory=list)
    directory_tree: dict[str, int] = field(default_factory=dict)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AnalysisResult:
    """The outcome of analysing one project directory."""

    project_path: str
    project_name: str
    is_git_repo: bool = False
    git_info: GitInfo = field(default_factory=GitInfo)
    tech_stacks: list[TechStack] = field(default_factory=list)
    file_stats: FileStats = field(default_factory=FileStats)
    dependencies: dict[str, str] = field(default_factory=dict)
    analyzed_at: datetime = field(default_factory=_now)
    analysis_duration: timedelta = field(default_factory=timedelta)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of this result."""
        return {
            "project_path": self.project_path,
            "project_name": self.project_name,
            "is_git_repo": self.is_git_repo,
            "git_info": _git_to_dict(self.git_info),
            "tech_stacks": [_tech_to_dict(t) for t in self.tech_stacks],
            "file_stats": _stats_to_dict(self.file_stats),
            "dependencies": dict(self.dependencies),
            "analyzed_at": _format_time(self.analyzed_at),
            "analysis_duration": _duration_to_ns(self.analysis_duration),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisResult:
        """Build a result from a mapping produced by :meth:`to_dict`."""
        analyzed_at = data.get("analyzed_at")
        return cls(
            project_path=data.get("project_path", ""),
            project_name=data.get("project_name", ""),
            is_git_repo=bool(data.get("is_git_repo", False)),
            git_info=_git_from_dict(data.get("git_info") or {}),
            tech_stacks=[_tech_from_dict(t) for t in data.get("tech_stacks") or []],
            file_stats=_stats_from_dict(data.get("file_stats") or {}),
            dependencies=dict(data.get("dependencies") or {}),
            analyzed_at=_parse_time(analyzed_at) if analyzed_at else _now(),
            analysis_duration=timedelta(
                microseconds=int(data.get("analysis_duration") or 0) // 1000
            ),
        )


def _format_time(moment: datetime) -> str:
    if moment.tzinfo is not None and moment.utcoffset() == timedelta(0):
        return moment.replace(tzinfo=None).isoformat() + "Z"
    return moment.isoformat()


def _parse_time(text: str) -> datetime:
    text = text.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
    return datetime.fromisoformat(text)


def _duration_to_ns(duration: timedelta) -> int:
    return (duration // timedelta(microseconds=1)) * 1000


def _git_to_dict(info: GitInfo) -> dict[str, Any]:
    values = {
        "remote_url": info.remote_url,
        "default_branch": info.default_branch,
        "current_branch": info.current_branch,
        "last_commit": info.last_commit,
        "contributors": list(info.contributors),
    }
    return {key: value for key, value in values.items() if value}


def _git_from_dict(data: dict[str, Any]) -> GitInfo:
    return GitInfo(
        remote_url=data.get("remote_url", ""),
        default_branch=data.get("default_branch", ""),
        current_branch=data.get("current_branch", ""),
        last_commit=data.get("last_commit", ""),
        contributors=list(data.get("contributors") or []),
    )


def _tech_to_dict(tech: TechStack) -> dict[str, Any]:
    result: dict[str, Any] = {
        "name": tech.name,
        "type": tech.type,
        "confidence_score": tech.confidence_score,
    }
    if tech.detected_files:
        result["detected_files"] = list(tech.detected_files)
    if tech.framework:
        result["framework"] = tech.framework
    if tech.version:
        result["version"] = tech.version
    return result


def _tech_from_dict(data: dict[str, Any]) -> TechStack:
    return TechStack(
        name=data.get("name", ""),
        type=data.get("type", ""),
        confidence_score=float(data.get("confidence_score", 0.0)),
        detected_files=list(data.get("detected_files") or []),
        framework=data.get("framework", ""),
        version=data.get("version", ""),
    )


def _stats_to_dict(stats: FileStats) -> dict[str, Any]:
    return {
        "total_files": stats.total_files,
        "total_size": stats.total_size,
        "files_by_type": dict(stats.files_by_type),
        "size_by_type": dict(stats.size_by_type),
        "largest_files": [
            {"path": f.path, "size": f.size, "type": f.type} for f in stats.largest_files
        ],
        "directory_tree": dict(stats.directory_tree),
    }


def _stats_from_dict(data: dict[str, Any]) -> FileStats:
    return FileStats(
        total_files=int(data.get("total_files", 0)),
        total_size=int(data.get("total_size", 0)),
        files_by_type=dict(data.get("files_by_type") or {}),
        size_by_type=dict(data.get("size_by_type") or {}),
        largest_files=[
            FileInfo(path=f.get("path", ""), size=int(f.get("size", 0)), type=f.get("type", ""))
            for f in data.get("largest_files") or []
        ],
        directory_tree=dict(data.get("directory_tree") or {}),
    )