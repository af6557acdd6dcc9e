"""Detect technology stacks in a project and extract their dependencies."""

from __future__ import annotations

import fnmatch
import json
import os
import re
from dataclasses import dataclass, field

from crazydev.models import FileStats, TechStack

_CONTENT_SIZE_LIMIT = 1024 * 1024
_SCORE_THRESHOLD = 0.5
_SKIPPED_DIRS = frozenset({".git", "node_modules", "vendor"})

_EXTENSION_TECH = {
    ".go": ("Go", "Go"),
    ".js": ("JavaScript", "JavaScript"),
    ".jsx": ("JavaScript", "JavaScript"),
    ".ts": ("TypeScript", "TypeScript"),
    ".tsx": ("TypeScript", "TypeScript"),
    ".py": ("Python", "Python"),
    ".dart": ("Flutter", "Dart"),
}

_GO_DEP = re.compile(r"^\s*([a-zA-Z0-9_.\-/]+)\s+v([0-9.\-+]+)", re.MULTILINE)
_PUBSPEC_DEP = re.compile(r"^\s{2}([a-zA-Z0-9_]+):\s*(\^?[0-9.+]+)", re.MULTILINE)


@dataclass(frozen=True)
class TechSignature:
    """File patterns, and optionally a content pattern, that identify a technology."""

    type: str
    file_patterns: tuple[str, ...]
    weight: float
    content_pattern: str = ""
    framework: str = ""


def _framework(patterns, content, name):
    return TechSignature("framework", tuple(patterns), 0.8, content, name)


_PY_FILES = ("requirements.txt", "setup.py", "pyproject.toml")

DEFAULT_SIGNATURES: dict[str, tuple[TechSignature, ...]] = {
    "Go": (
        TechSignature("language", ("go.mod", "go.sum"), 0.9),
        TechSignature("language", ("*.go",), 0.7, r"package\s+\w+"),
        _framework(("go.mod",), "github.com/gin-gonic/gin", "Gin"),
        _framework(("go.mod",), "github.com/gorilla/mux", "Gorilla"),
        _framework(("go.mod",), "github.com/labstack/echo", "Echo"),
    ),
    "JavaScript": (
        TechSignature(
            "language", ("package.json", "package-lock.json", "yarn.lock", "pnpm-lock.yaml"), 0.9
        ),
        TechSignature("language", ("*.js", "*.jsx", "*.ts", "*.tsx"), 0.7),
        _framework(("package.json",), '"react":', "React"),
        _framework(("package.json",), '"vue":', "Vue"),
        _framework(("package.json",), '"angular":', "Angular"),
        _framework(("package.json",), '"next":', "Next.js"),
        _framework(("package.json",), '"nuxt":', "Nuxt.js"),
    ),
    "Python": (
        TechSignature(
            "language",
            ("requirements.txt", "setup.py", "pyproject.toml", "Pipfile", "Pipfile.lock"),
            0.9,
        ),
        TechSignature("language", ("*.py",), 0.7),
        _framework(_PY_FILES, "django", "Django"),
        _framework(_PY_FILES, "flask", "Flask"),
        _framework(_PY_FILES, "fastapi", "FastAPI"),
    ),
    "Flutter": (
        TechSignature("language", ("pubspec.yaml", "pubspec.lock"), 0.9),
        TechSignature("language", ("*.dart",), 0.8, "import 'package:flutter"),
    ),
    "Docker": (
        TechSignature("tool", ("Dockerfile", "docker-compose.yml", "docker-compose.yaml"), 0.9),
        TechSignature("tool", (".dockerignore",), 0.7),
    ),
    "Kubernetes": (
        TechSignature(
            "tool",
            ("*.yaml", "*.yml"),
            0.8,
            r"apiVersion:\s+v\d+|kind:\s+Deployment|kind:\s+Service|kind:\s+Pod",
        ),
        TechSignature("tool", ("kustomization.yaml", "kustomization.yml"), 0.9),
    ),
}


@dataclass
class _Tally:
    scores: dict[str, float] = field(default_factory=dict)
    files: dict[str, list[str]] = field(default_factory=dict)
    frameworks: dict[str, str] = field(default_factory=dict)

    def add(self, tech: str, score: float, evidence: str) -> None:
        self.scores[tech] = self.scores.get(tech, 0.0) + score
        self.files.setdefault(tech, []).append(evidence)


class TechStackDetector:
    """Scores technologies found in a project by file names and contents."""

    def __init__(self, signatures=None):
        self.signatures = dict(DEFAULT_SIGNATURES if signatures is None else signatures)

    def detect_tech_stacks(self, path, file_stats: FileStats) -> list[TechStack]:
        """Return detected stacks scoring above 0.5, highest confidence first."""
        root = os.fspath(path)
        tally = _Tally()
        for ext, count in file_stats.files_by_type.items():
            if ext in _EXTENSION_TECH:
                tech, label = _EXTENSION_TECH[ext]
                tally.add(tech, count * 0.1, f"{count} {label} files")

        for directory, dirs, files in os.walk(root):
            dirs[:] = sorted(d for d in dirs if d not in _SKIPPED_DIRS)
            for name in sorted(files):
                self._match_file(tally, root, os.path.join(directory, name), name)

        stacks = [
            TechStack(
                name=tech,
                type="language",
                confidence_score=score,
                detected_files=tally.files.get(tech, []),
                framework=tally.frameworks.get(tech, ""),
            )
            for tech, score in tally.scores.items()
            if score > _SCORE_THRESHOLD
        ]
        stacks.sort(key=lambda s: s.confidence_score, reverse=True)
        return stacks

    def _match_file(self, tally: _Tally, root: str, file_path: str, name: str) -> None:
        for tech, signatures in self.signatures.items():
            for sig in signatures:
                for pattern in sig.file_patterns:
                    if not fnmatch.fnmatchcase(name, pattern):
                        continue
                    if sig.content_pattern and not _content_matches(file_path, sig.content_pattern):
                        continue
                    tally.add(tech, sig.weight, os.path.relpath(file_path, root))
                    if sig.framework:
                        tally.frameworks[tech] = sig.framework
                    break

    def extract_dependencies(self, path, tech: TechStack) -> dict[str, str]:
        """Return the dependencies declared by the manifest of ``tech``."""
        root = os.fspath(path)
        if tech.name == "Go":
            content = _read_text(os.path.join(root, "go.mod"))
            return {} if content is None else dict(_GO_DEP.findall(content))
        if tech.name in ("JavaScript", "TypeScript"):
            content = _read_text(os.path.join(root, "package.json"))
            if content is None:
                return {}
            package = json.loads(content)
            deps = dict(package.get("dependencies") or {})
            for name, version in (package.get("devDependencies") or {}).items():
                deps["dev:" + name] = version
            return deps
        if tech.name == "Python":
            content = _read_text(os.path.join(root, "requirements.txt"))
            return {} if content is None else _parse_requirements(content)
        if tech.name == "Flutter":
            content = _read_text(os.path.join(root, "pubspec.yaml"))
            return {} if content is None else dict(_PUBSPEC_DEP.findall(content))
        return {}


def _content_matches(file_path: str, pattern: str) -> bool:
    try:
        if os.path.getsize(file_path) > _CONTENT_SIZE_LIMIT:
            return False
        with open(file_path, "rb") as handle:
            content = handle.read()
        return re.search(pattern.encode(), content) is not None
    except (OSError, re.error):
        return False


def _read_text(file_path: str) -> str | None:
    if not os.path.exists(file_path):
        return None
    with open(file_path, encoding="utf-8", errors="replace") as handle:
        return handle.read()


def _parse_requirements(content: str) -> dict[str, str]:
    deps: dict[str, str] = {}
    for raw in content.split("\n"):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split("==")
        if len(parts) >= 2:
            deps[parts[0]] = parts[1]
            continue
        parts = line.split(">=")
        if len(parts) >= 2:
            deps[parts[0]] = ">=" + parts[1]
        else:
            deps[line] = "latest"
    return deps