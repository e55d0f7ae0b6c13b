"""Tests for config file loading, env precedence and explicit overrides."""

import json
from pathlib import Path

import pytest

from demiurge_studio.config.loader import (
    apply_overrides,
    camel_to_snake,
    get_config_path,
    load_config,
    save_config,
    snake_to_camel,
)
from demiurge_studio.config.schema import DEFAULT_RPC_URL, Config


def _write(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_when_file_missing(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.json")
    assert cfg.rpc_url == DEFAULT_RPC_URL
    assert cfg.timeout_seconds is None
    assert cfg.log_level == "INFO"
    assert cfg.addresses == []


def test_default_path_is_under_home(isolated_env: Path) -> None:
    assert get_config_path() == isolated_env / ".demiurge-studio" / "config.json"


def test_file_values_use_camel_case(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "config.json",
        {"rpcUrl": "http://file.test/rpc", "timeoutSeconds": 3, "logToFile": True, "addresses": ["aa"]},
    )
    cfg = load_config(path)
    assert cfg.rpc_url == "http://file.test/rpc"
    assert cfg.timeout_seconds == 3
    assert cfg.log_to_file is True
    assert cfg.addresses == ["aa"]


def test_env_overrides_file_and_explicit_overrides_win(tmp_path: Path, monkeypatch) -> None:
    path = _write(tmp_path / "config.json", {"rpcUrl": "http://file.test/rpc"})

    monkeypatch.setenv("DEMIURGE_RPC_URL", "http://env.test/rpc")
    assert load_config(path).rpc_url == "http://env.test/rpc"

    cfg = load_config(path, overrides={"rpc_url": "http://cli.test/rpc", "log_level": None})
    assert cfg.rpc_url == "http://cli.test/rpc"
    assert cfg.log_level == "INFO"


def test_env_without_file(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("DEMIURGE_RPC_URL", "http://env.test/rpc")
    monkeypatch.setenv("DEMIURGE_TIMEOUT_SECONDS", "1.5")
    cfg = load_config(tmp_path / "missing.json")
    assert cfg.rpc_url == "http://env.test/rpc"
    assert cfg.timeout_seconds == 1.5


def test_empty_env_value_is_ignored(tmp_path: Path, monkeypatch) -> None:
    path = _write(tmp_path / "config.json", {"rpcUrl": "http://file.test/rpc"})
    monkeypatch.setenv("DEMIURGE_RPC_URL", "")
    assert load_config(path).rpc_url == "http://file.test/rpc"


def test_client_config_from_config() -> None:
    client_cfg = Config(rpc_url="http://x.test/rpc", timeout_seconds=4).client_config()
    assert client_cfg.endpoint_url == "http://x.test/rpc"
    assert client_cfg.timeout_seconds == 4


def test_unknown_keys_are_ignored(tmp_path: Path) -> None:
    path = _write(tmp_path / "config.json", {"rpcUrl": "http://file.test/rpc", "theme": "dark"})
    assert load_config(path).rpc_url == "http://file.test/rpc"


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"timeoutSeconds": "soon"}'])
def test_bad_file_raises_value_error_naming_the_file(tmp_path: Path, content: str) -> None:
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError, match="Failed to load config from"):
        load_config(path)


def test_apply_overrides_rejects_unknown_fields() -> None:
    with pytest.raises(ValueError, match="Unknown config fields: color"):
        apply_overrides(Config(), {"color": "red"})


def test_save_config_round_trip(tmp_path: Path) -> None:
    path = save_config(
        Config(rpc_url="http://saved.test/rpc", addresses=["aa", "bb"]),
        tmp_path / "nested" / "config.json",
    )
    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk["rpcUrl"] == "http://saved.test/rpc"
    assert "logToFile" in on_disk
    assert load_config(path).addresses == ["aa", "bb"]


def test_case_conversion() -> None:
    assert camel_to_snake("rpcUrl") == "rpc_url"
    assert snake_to_camel("timeout_seconds") == "timeoutSeconds"
