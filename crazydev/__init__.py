"""Project context analysis, result caching and typed YAML configuration."""

__version__ = "0.1.0"