from pathlib import Path

import pytest

from fsconsole.app.config import ConsoleConfig, load_config
from fsconsole.core.errors import ConfigError


def test_defaults():
    cfg = load_config(None)
    assert cfg.api_url == "http://localhost:8080/api"
    assert cfg.ws_url == "ws://localhost:8080/api/ws"
    assert cfg.request_timeout_s == 10.0
    assert cfg.max_logs == 1000
    assert cfg.reconnect_interval_s == 3.0
    assert cfg.max_reconnect_attempts == 5
    assert cfg.script_delay_s == 0.5
    assert cfg.quote_style == "quote"


def test_load_yaml(tmp_path: Path):
    p = tmp_path / "fsconsole.yml"
    p.write_text("api_url: http://h:9/api\nmax_logs: 50\nscript_delay_s: 0\nquote_style: percent20\n", encoding="utf-8")

    cfg = load_config(p)

    assert cfg.api_url == "http://h:9/api"
    assert cfg.max_logs == 50
    assert cfg.script_delay_s == 0.0
    assert cfg.quote_style == "percent20"


def test_empty_yaml_gives_defaults(tmp_path: Path):
    p = tmp_path / "empty.yml"
    p.write_text("", encoding="utf-8")
    assert load_config(p) == ConsoleConfig()


def test_unknown_key_is_rejected():
    with pytest.raises(ConfigError) as ei:
        ConsoleConfig.from_mapping({"api_url": "x", "colour": "red"})
    assert ei.value.details == {"key": "colour"}


@pytest.mark.parametrize(
    "data",
    [
        {"max_logs": 0},
        {"max_logs": "many"},
        {"max_logs": 1.5},
        {"max_reconnect_attempts": True},
        {"reconnect_interval_s": -1},
        {"request_timeout_s": 0},
        {"api_url": 5},
        {"quote_style": "shell"},
    ],
)
def test_bad_values_are_rejected(data):
    with pytest.raises(ConfigError):
        ConsoleConfig.from_mapping(data)


def test_missing_and_invalid_files(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yml")

    bad = tmp_path / "bad.yml"
    bad.write_text("a: [1,\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(bad)

    listy = tmp_path / "list.yml"
    listy.write_text("- 1\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(listy)


def test_with_overrides_ignores_none():
    cfg = ConsoleConfig()
    assert cfg.with_overrides(api_url=None) is cfg
    assert cfg.with_overrides(ws_url="ws://o").ws_url == "ws://o"
