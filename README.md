# crazydev

A Python library that looks at a project directory and reports what it
finds: Git details, detected technology stacks, file statistics and
declared dependencies. Results are cached in memory and in an SQLite
database. It also loads a typed application configuration from YAML.

## Installation

```
pip install .
```

## Analysing a project

```python
from crazydev.analyzer import ContextAnalyzer

analyzer = ContextAnalyzer(max_files=500, max_file_size=10 * 1024 * 1024)
result = analyzer.analyze(".")

print(result.project_name, result.is_git_repo)
for tech in result.tech_stacks:
    print(tech.name, tech.framework, round(tech.confidence_score, 2))
print(result.file_stats.total_files, result.file_stats.files_by_type)
print(result.dependencies)
```

`ContextAnalyzer.analyze` returns a fresh cached result when one exists;
`refresh_analysis` drops the cached entry and analyses again;
`get_cached_analysis` returns the cached result or `None`. A path that
does not exist raises `crazydev.analyzer.AnalysisError`. Problems reading
Git data or a dependency manifest are reported as warnings on standard
error and the analysis carries on.

The collaborators can be passed in by keyword (`git_analyzer`,
`tech_detector`, `file_analyzer`, `cache_manager`) or used on their own:

- `crazydev.file_analyzer.FileAnalyzer.analyze_files(path, max_files, max_file_size)`
  walks a directory, skipping common build and tool directories
  (`.git`, `node_modules`, `vendor`, `dist`, `build`, `__pycache__`,
  `venv`, ...) and files such as `.DS_Store`, and returns a `FileStats`
  with counts and sizes by extension, a directory tree and the ten
  largest files.
- `crazydev.tech_detector.TechStackDetector` scores Go, JavaScript,
  TypeScript, Python, Flutter, Docker and Kubernetes from file names,
  file contents and extension counts, keeping stacks that score above
  0.5, highest first. `extract_dependencies` reads `go.mod`,
  `package.json` (dev dependencies prefixed with `dev:`),
  `requirements.txt` and `pubspec.yaml`.
- `crazydev.git_analyzer.GitAnalyzer.analyze_repository(path)` reads the
  `.git` directory directly and returns `(GitInfo, is_repo)`: the
  `origin` remote URL, current branch, last commit, default branch
  (`main`, `master` or `develop` on `origin`, else the current branch) and
  the authors of up to 100 recent commits. It raises `GitError` for a
  repository it cannot read. Commits stored only in pack files are not
  read.
- `crazydev.cache.CacheManager(cache_dir=None, max_cache_age=timedelta(hours=24))`
  keeps results in memory and in `context.db` under `cache_dir`
  (default `~/.crazy-dev/cache`, see `default_cache_dir()`). It offers
  `store_analysis`, `get_analysis`, `invalidate_analysis`,
  `cleanup_cache(max_age)` and `close`, and works as a context manager.

The records in `crazydev.models` (`AnalysisResult`, `GitInfo`,
`TechStack`, `FileStats`, `FileInfo`) are dataclasses;
`AnalysisResult.to_dict()` gives a JSON-ready mapping and
`AnalysisResult.from_dict()` reads one back.

## Configuration

```python
from crazydev.appconfig import default_config, load_config

config = load_config()            # or load_config("path/to/config.yaml")
print(config.ai.local.endpoint)
print(default_config().core.log_level)   # "info"
```

Without an explicit file, `load_config` looks for `config.yaml` or
`config.yml` in `~/.crazy-dev` and then the current directory, and
returns an empty `Config` if none is found. Unreadable or malformed
files raise `crazydev.appconfig.ConfigError`. `Config.from_dict` decodes
a nested mapping, converting loosely typed values such as `"true"` or
`"60"`.

## What this package does not do

There is no command-line program: nothing is installed to run from a
shell. There is no support for viewing or editing settings from the
command line, no project creation or switching, and no technology stack
catalogue; the package provides the analysis, caching and configuration
loading described above as a library only.

## Running the tests

```
pip install .[test]
pytest
```