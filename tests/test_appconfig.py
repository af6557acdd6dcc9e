from dataclasses import asdict

import pytest

from crazydev.appconfig import (
    Config,
    ConfigError,
    StackConfig,
    default_config,
    load_config,
)


def test_default_config_values():
    cfg = default_config()
    assert cfg.core.startup_timeout == "100ms"
    assert cfg.core.log_level == "info"
    assert cfg.core.database.path == "~/.crazy-dev/data/crazy-dev.db"
    assert cfg.ai.local.endpoint == "http://localhost:11434"
    assert cfg.ai.local.models == ["llama3.2", "codellama"]
    assert cfg.ai.cloud.provider == "ollama"
    assert cfg.ai.cloud.rate_limit == 60
    assert cfg.ai.context.max_files == 100
    assert cfg.ui.theme.name == ""
    assert cfg.sync.enabled is False


def test_from_dict_nested():
    data = {
        "core": {"log_level": "debug", "database": {"path": "/tmp/x.db"}},
        "ai": {"local": {"enabled": True, "models": ["m1", "m2"]}},
        "stacks": {"go": {"enabled": True, "tools": ["vet"]}},
    }
    cfg = Config.from_dict(data)
    assert cfg.core.log_level == "debug"
    assert cfg.core.database.path == "/tmp/x.db"
    assert cfg.ai.local.enabled is True
    assert cfg.ai.local.models == ["m1", "m2"]
    assert cfg.stacks.go == StackConfig(enabled=True, auto_detect=False, tools=["vet"])
    assert cfg.stacks.python == StackConfig()


def test_from_dict_weak_typing_and_case():
    data = {
        "AI": {"Cloud": {"rate_limit": "30"}, "local": {"enabled": "true"}},
        "sync": {"include": "a,b", "exclude": "single"},
        "core": {"log_level": 5},
    }
    cfg = Config.from_dict(data)
    assert cfg.ai.cloud.rate_limit == 30
    assert cfg.ai.local.enabled is True
    assert cfg.sync.include == ["a", "b"]
    assert cfg.sync.exclude == ["single"]
    assert cfg.core.log_level == "5"


def test_from_dict_bad_values():
    with pytest.raises(ConfigError):
        Config.from_dict({"ai": {"cloud": {"rate_limit": "lots"}}})
    with pytest.raises(ConfigError):
        Config.from_dict({"core": "not a mapping"})


def test_load_explicit_file(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("core:\n  log_level: warn\nplugins:\n  auto_load: true\n")
    cfg = load_config(str(path))
    assert cfg.core.log_level == "warn"
    assert cfg.plugins.auto_load is True
    assert cfg.ai.local.enabled is False


def test_load_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "absent.yaml"))


def test_load_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("core: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_load_without_any_file(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    assert load_config(None) == Config()


def test_load_from_home_directory(tmp_path, monkeypatch):
    home = tmp_path / "home"
    (home / ".crazy-dev").mkdir(parents=True)
    (home / ".crazy-dev" / "config.yaml").write_text("ui:\n  theme:\n    name: dark\n")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    assert load_config().ui.theme.name == "dark"


def test_round_trip_of_defaults_through_dict():
    cfg = default_config()
    assert Config.from_dict(asdict(cfg)) == cfg