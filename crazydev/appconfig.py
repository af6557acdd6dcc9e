"""Typed application configuration loaded from a YAML file."""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, get_args, get_origin

import yaml


class ConfigError(Exception):
    """Raised when the configuration cannot be read or decoded."""


@dataclass
class DatabaseConfig:
    path: str = ""
    backup_interval: str = ""


@dataclass
class CoreConfig:
    startup_timeout: str = ""
    ai_response_timeout: str = ""
    cloud_ai_timeout: str = ""
    log_level: str = ""
    log_file: str = ""
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


@dataclass
class LocalAIConfig:
    enabled: bool = False
    endpoint: str = ""
    models: list[str] = field(default_factory=list)
    fallback_to_cloud: bool = False


@dataclass
class CloudAIConfig:
    provider: str = ""
    rate_limit: int = 0
    cache_ttl: str = ""


@dataclass
class ContextConfig:
    max_files: int = 0
    max_file_size: str = ""
    analysis_cache_ttl: str = ""


@dataclass
class AIConfig:
    local: LocalAIConfig = field(default_factory=LocalAIConfig)
    cloud: CloudAIConfig = field(default_factory=CloudAIConfig)
    context: ContextConfig = field(default_factory=ContextConfig)


@dataclass
class SecurityConfig:
    sandbox_enabled: bool = False
    allowed_file_patterns: list[str] = field(default_factory=list)


@dataclass
class PluginsConfig:
    directories: list[str] = field(default_factory=list)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    auto_load: bool = False
    hot_reload: bool = False


@dataclass
class StackConfig:
    enabled: bool = False
    auto_detect: bool = False
    tools: list[str] = field(default_factory=list)


@dataclass
class StacksConfig:
    go: StackConfig = field(default_factory=StackConfig)
    javascript: StackConfig = field(default_factory=StackConfig)
    python: StackConfig = field(default_factory=StackConfig)
    flutter: StackConfig = field(default_factory=StackConfig)
    docker: StackConfig = field(default_factory=StackConfig)


@dataclass
class ThemeConfig:
    name: str = ""
    color_scheme: str = ""
    accent_color: str = ""


@dataclass
class TerminalConfig:
    animations: bool = False
    progress_bars: bool = False
    icons: bool = False


@dataclass
class VoiceConfig:
    enabled: bool = False
    language: str = ""
    wake_word: str = ""


@dataclass
class UIConfig:
    theme: ThemeConfig = field(default_factory=ThemeConfig)
    terminal: TerminalConfig = field(default_factory=TerminalConfig)
    voice: VoiceConfig = field(default_factory=VoiceConfig)


@dataclass
class SyncConfig:
    enabled: bool = False
    endpoint: str = ""
    encryption: bool = False
    sync_interval: str = ""
    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)


@dataclass
class Config:
    """The whole application configuration."""

    core: CoreConfig = field(default_factory=CoreConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    plugins: PluginsConfig = field(default_factory=PluginsConfig)
    stacks: StacksConfig = field(default_factory=StacksConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)

    @classmethod
    def from_dict(cls, data) -> "Config":
        """Decode a nested mapping, converting loosely typed values where possible."""
        return _build(cls, data, "")


_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False", ""}


def _to_bool(value: Any, key: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
    raise ConfigError(f"'{key}' cannot be decoded as a boolean: {value!r}")


def _to_int(value: Any, key: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        if value == "":
            return 0
        try:
            return int(value, 0)
        except ValueError:
            pass
    raise ConfigError(f"'{key}' cannot be decoded as an integer: {value!r}")


def _to_str(value: Any, key: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigError(f"'{key}' cannot be decoded as a string: {value!r}")


def _to_list(item_type: Any, value: Any, key: str) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",") if value else []
    elif not isinstance(value, (list, tuple)):
        value = [value]
    return [_convert(item_type, item, f"{key}[{i}]") for i, item in enumerate(value)]


def _convert(tp: Any, value: Any, key: str) -> Any:
    if is_dataclass(tp):
        return _build(tp, value, key)
    if get_origin(tp) is list:
        (item_type,) = get_args(tp) or (str,)
        return _to_list(item_type, value, key)
    if tp is bool:
        return _to_bool(value, key)
    if tp is int:
        return _to_int(value, key)
    if tp is str:
        return _to_str(value, key)
    return value


def _build(cls, data: Any, prefix: str):
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise ConfigError(f"'{prefix or '<root>'}' expected a mapping, got {type(data).__name__}")
    lowered = {str(k).lower(): v for k, v in data.items()}
    kwargs = {}
    for fld in fields(cls):
        if fld.name in lowered:
            key = f"{prefix}.{fld.name}" if prefix else fld.name
            kwargs[fld.name] = _convert(fld.type, lowered[fld.name], key)
    return cls(**kwargs)


_CONFIG_NAMES = ("config.yaml", "config.yml")


def _find_config_file() -> Path | None:
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise ConfigError(f"error finding home directory: {exc}") from exc
    for directory in (home / ".crazy-dev", Path(".")):
        for name in _CONFIG_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def load_config(cfg_file=None) -> Config:
    """Load the configuration from ``cfg_file`` or from the standard locations.

    A missing file in the standard locations yields an empty configuration;
    an explicitly named file that cannot be read raises ConfigError.
    """
    path = Path(cfg_file) if cfg_file else _find_config_file()
    if path is None:
        return Config()
    try:
        with open(path, encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"error reading config file: {exc}") from exc
    try:
        return Config.from_dict(data or {})
    except ConfigError as exc:
        raise ConfigError(f"error unmarshaling config: {exc}") from exc


def default_config() -> Config:
    """Return the built-in default configuration."""
    return Config(
        core=CoreConfig(
            startup_timeout="100ms",
            ai_response_timeout="2s",
            cloud_ai_timeout="5s",
            log_level="info",
            log_file="~/.crazy-dev/logs/crazy-dev.log",
            database=DatabaseConfig(
                path="~/.crazy-dev/data/crazy-dev.db",
                backup_interval="24h",
            ),
        ),
        ai=AIConfig(
            local=LocalAIConfig(
                enabled=True,
                endpoint="http://localhost:11434",
                models=["llama3.2", "codellama"],
                fallback_to_cloud=True,
            ),
            cloud=CloudAIConfig(provider="ollama", rate_limit=60, cache_ttl="1h"),
            context=ContextConfig(max_files=100, max_file_size="1MB", analysis_cache_ttl="30m"),
        ),
    )