from __future__ import annotations

from pathlib import Path

from logtap.config import LogtapConfig
from logtap.dialects import Dialect


def test_defaults() -> None:
    config = LogtapConfig()

    assert config.capacity == 1000
    assert config.port_for(Dialect.CHROME) == 9222
    assert config.port_for(Dialect.FIREFOX) == 6000


def test_load_from_toml(tmp_path: Path) -> None:
    path = tmp_path / "logtap.toml"
    path.write_text('[default]\nhost = "10.0.0.2"\ncapacity = 50\ncommand_timeout = 0\nbogus = 1\n')

    config = LogtapConfig.load(path, env={})

    assert config.host == "10.0.0.2"
    assert config.capacity == 50
    assert config.command_timeout is None


def test_env_overrides_file(tmp_path: Path) -> None:
    path = tmp_path / "logtap.toml"
    path.write_text("[default]\ncapacity = 50\n")

    config = LogtapConfig.load(
        path, env={"LOGTAP_CAPACITY": "7", "LOGTAP_HOST": "box", "LOGTAP_COMMAND_TIMEOUT": "not-a-number"}
    )

    assert config.capacity == 7
    assert config.host == "box"
    assert config.command_timeout == 30.0


def test_config_file_found_in_parent(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "logtap.toml").write_text("[default]\nfirefox_port = 6080\n")
    child = tmp_path / "a" / "b"
    child.mkdir(parents=True)
    monkeypatch.chdir(child)

    assert LogtapConfig.load(env={}).firefox_port == 6080


def test_dialect_parse() -> None:
    assert Dialect.parse(" Chrome ") is Dialect.CHROME
    assert Dialect.parse(Dialect.FIREFOX) is Dialect.FIREFOX
    assert Dialect.FIREFOX.discovery_path == "/json/list"
