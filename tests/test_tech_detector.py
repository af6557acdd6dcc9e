import json

import pytest

from crazydev.models import FileStats, TechStack
from crazydev.tech_detector import TechStackDetector


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


def test_detects_go_with_framework(tmp_path):
    _write(tmp_path / "go.mod", "module demo\n\nrequire github.com/gin-gonic/gin v1.9.1\n")
    _write(tmp_path / "main.go", "package main\n")
    stacks = TechStackDetector().detect_tech_stacks(tmp_path, FileStats(files_by_type={".go": 1}))
    go = next(s for s in stacks if s.name == "Go")
    assert go.framework == "Gin"
    assert "go.mod" in go.detected_files
    assert "main.go" in go.detected_files
    assert "1 Go files" in go.detected_files


def test_sorted_by_confidence(tmp_path):
    _write(tmp_path / "go.mod", "module demo\n")
    _write(tmp_path / "go.sum", "")
    _write(tmp_path / ".dockerignore", "")
    stacks = TechStackDetector().detect_tech_stacks(tmp_path, FileStats())
    scores = [s.confidence_score for s in stacks]
    assert scores == sorted(scores, reverse=True)
    assert [s.name for s in stacks] == ["Go", "Docker"]


def test_low_scores_excluded_and_skipped_dirs(tmp_path):
    _write(tmp_path / "a.yaml", "foo: bar\n")
    _write(tmp_path / "node_modules" / "package.json", "{}")
    stacks = TechStackDetector().detect_tech_stacks(tmp_path, FileStats())
    assert stacks == []


def test_extract_go_dependencies(tmp_path):
    _write(tmp_path / "go.mod", "module demo\n\nrequire (\n\tgithub.com/x/y v1.2.3\n)\n")
    deps = TechStackDetector().extract_dependencies(tmp_path, TechStack(name="Go"))
    assert deps == {"github.com/x/y": "1.2.3"}


def test_extract_js_dependencies(tmp_path):
    _write(tmp_path / "package.json", json.dumps(
        {"dependencies": {"react": "^18.0.0"}, "devDependencies": {"jest": "29"}}))
    deps = TechStackDetector().extract_dependencies(tmp_path, TechStack(name="TypeScript"))
    assert deps == {"react": "^18.0.0", "dev:jest": "29"}


def test_extract_js_invalid_json(tmp_path):
    _write(tmp_path / "package.json", "{not json")
    with pytest.raises(ValueError):
        TechStackDetector().extract_dependencies(tmp_path, TechStack(name="JavaScript"))


def test_extract_python_dependencies(tmp_path):
    _write(tmp_path / "requirements.txt", "flask==2.0\nrequests>=1.0\n# note\n\nnumpy\n")
    deps = TechStackDetector().extract_dependencies(tmp_path, TechStack(name="Python"))
    assert deps == {"flask": "2.0", "requests": ">=1.0", "numpy": "latest"}


def test_extract_flutter_and_missing(tmp_path):
    _write(tmp_path / "pubspec.yaml", "dependencies:\n  http: ^0.13.0\n")
    detector = TechStackDetector()
    assert detector.extract_dependencies(tmp_path, TechStack(name="Flutter")) == {"http": "^0.13.0"}
    assert detector.extract_dependencies(tmp_path, TechStack(name="Go")) == {}
    assert detector.extract_dependencies(tmp_path, TechStack(name="Docker")) == {}