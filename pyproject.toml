[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "crazydev"
version = "0.1.0"
description = "Project context analysis: Git details, tech stack detection, file statistics, dependencies and typed YAML configuration"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["developer-tools", "project-analysis", "tech-stack", "git", "configuration"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["crazydev"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
