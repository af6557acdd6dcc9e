"""Project context analysis combining Git, file and technology-stack facts."""

from __future__ import annotations

import json
import os
import sqlite3
import sys
import time
from datetime import datetime, timedelta, timezone

from crazydev.cache import CacheManager
from crazydev.file_analyzer import FileAnalyzer
from crazydev.git_analyzer import GitAnalyzer, GitError
from crazydev.models import AnalysisResult, GitInfo
from crazydev.tech_detector import TechStackDetector


class AnalysisError(Exception):
    """Raised when a project directory cannot be analysed."""


def _warn(message: str) -> None:
    print(f"Warning: {message}", file=sys.stderr)


class ContextAnalyzer:
    """Analyses a project directory and caches the results."""

    def __init__(
        self,
        max_files: int,
        max_file_size: int,
        *,
        git_analyzer: GitAnalyzer | None = None,
        tech_detector: TechStackDetector | None = None,
        file_analyzer: FileAnalyzer | None = None,
        cache_manager: CacheManager | None = None,
    ):
        self.max_files = max_files
        self.max_file_size = max_file_size
        self.git_analyzer = git_analyzer or GitAnalyzer()
        self.tech_detector = tech_detector or TechStackDetector()
        self.file_analyzer = file_analyzer or FileAnalyzer()
        self.cache_manager = cache_manager if cache_manager is not None else CacheManager()

    def analyze(self, path) -> AnalysisResult:
        """Return the analysis of ``path``, from the cache when it is still fresh."""
        cached = self.get_cached_analysis(path)
        if cached is not None:
            return cached

        started = time.perf_counter()
        abs_path = os.path.abspath(os.fspath(path))
        if not os.path.exists(abs_path):
            raise AnalysisError(f"path does not exist: {abs_path}")

        result = AnalysisResult(
            project_path=abs_path,
            project_name=os.path.basename(abs_path) or abs_path,
            analyzed_at=datetime.now(timezone.utc),
        )

        try:
            git_info, is_repo = self.git_analyzer.analyze_repository(abs_path)
        except (GitError, OSError) as exc:
            _warn(f"Git analysis error: {exc}")
            git_info, is_repo = GitInfo(), False
        result.is_git_repo = is_repo
        if is_repo:
            result.git_info = git_info

        try:
            result.file_stats = self.file_analyzer.analyze_files(
                abs_path, self.max_files, self.max_file_size
            )
        except OSError as exc:
            raise AnalysisError(f"file analysis error: {exc}") from exc

        try:
            result.tech_stacks = self.tech_detector.detect_tech_stacks(abs_path, result.file_stats)
        except OSError as exc:
            raise AnalysisError(f"tech stack detection error: {exc}") from exc

        for tech in result.tech_stacks:
            try:
                deps = self.tech_detector.extract_dependencies(abs_path, tech)
            except (OSError, ValueError, AttributeError) as exc:
                _warn(f"Dependency extraction error for {tech.name}: {exc}")
                continue
            result.dependencies.update(deps)

        result.analysis_duration = timedelta(seconds=time.perf_counter() - started)

        try:
            self.cache_manager.store_analysis(abs_path, result)
        except (sqlite3.Error, TypeError, ValueError, json.JSONDecodeError):
            pass
        return result

    def get_cached_analysis(self, path) -> AnalysisResult | None:
        """Return the cached analysis for ``path`` if there is a fresh one."""
        try:
            abs_path = os.path.abspath(os.fspath(path))
        except (OSError, TypeError):
            return None
        return self.cache_manager.get_analysis(abs_path)

    def refresh_analysis(self, path) -> AnalysisResult:
        """Drop any cached analysis for ``path`` and analyse it again."""
        abs_path = os.path.abspath(os.fspath(path))
        try:
            self.cache_manager.invalidate_analysis(abs_path)
        except sqlite3.Error:
            pass
        return self.analyze(abs_path)