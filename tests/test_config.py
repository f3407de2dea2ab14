from pathlib import Path

import pytest

from dnsbench.args import Arguments, Format, IpVersion, Protocol, Style
from dnsbench.config import (
    ConfigError,
    DnsBenchConfig,
    config_path,
    load_config,
    save_config,
)


def test_defaults_match_source():
    config = DnsBenchConfig()
    assert config.domain == "google.com"
    assert config.threads == 8
    assert config.requests == 25
    assert config.timeout == 3
    assert config.protocol is Protocol.UDP
    assert config.style is Style.ROUNDED
    assert config.format is Format.HUMAN_READABLE
    assert config.custom_servers_file is None


def test_config_path_layout(tmp_path):
    assert config_path(tmp_path) == tmp_path / ".dns-bench" / "config.toml"


def test_load_missing_file_returns_none(tmp_path):
    assert load_config(tmp_path) is None


def test_save_then_load_round_trip(tmp_path):
    config = DnsBenchConfig(
        domain="example.com",
        threads=3,
        protocol=Protocol.TCP,
        name_servers_ip=IpVersion.V6,
        style=Style.RE_STRUCTURED_TEXT,
        custom_servers_file=tmp_path / "list.txt",
        format=Format.CSV,
    )
    path = save_config(config, tmp_path)
    assert path == config_path(tmp_path)
    assert load_config(tmp_path) == config


def test_to_dict_uses_variant_names():
    data = DnsBenchConfig().to_dict()
    assert data["style"] == "Rounded"
    assert data["format"] == "HumanReadable"
    assert "custom_servers_file" not in data


def test_dict_round_trip():
    config = DnsBenchConfig(lookup_ip=IpVersion.V6, style=Style.ASCII_ROUNDED)
    assert DnsBenchConfig.from_dict(config.to_dict()) == config


def test_missing_format_uses_default():
    data = DnsBenchConfig(format=Format.XML).to_dict()
    del data["format"]
    assert DnsBenchConfig.from_dict(data).format is Format.HUMAN_READABLE


@pytest.mark.parametrize("field", ["domain", "threads", "protocol", "style"])
def test_missing_required_field_is_error(field):
    data = DnsBenchConfig().to_dict()
    del data[field]
    with pytest.raises(ConfigError, match=field):
        DnsBenchConfig.from_dict(data)


@pytest.mark.parametrize(
    "field, value",
    [("threads", 70000), ("threads", "8"), ("requests", -1), ("protocol", "udp"), ("threads", True)],
)
def test_invalid_field_value_is_error(field, value):
    data = DnsBenchConfig().to_dict()
    data[field] = value
    with pytest.raises(ConfigError):
        DnsBenchConfig.from_dict(data)


def test_load_malformed_toml_raises(tmp_path):
    path = config_path(tmp_path)
    path.parent.mkdir(parents=True)
    path.write_text("domain = [unterminated", encoding="utf-8")
    with pytest.raises(ConfigError, match="Toml"):
        load_config(tmp_path)


def test_resolve_args_overrides_given_options():
    config = DnsBenchConfig()
    config.resolve_args(
        Arguments(domain="example.com", threads=2, timeout=5, style=Style.PSQL, format=Format.JSON)
    )
    assert config.domain == "example.com"
    assert config.threads == 2
    assert config.timeout == 5
    assert config.style is Style.PSQL
    assert config.format is Format.JSON
    assert config.requests == DnsBenchConfig().requests


def test_resolve_args_without_options_changes_nothing():
    config = DnsBenchConfig(threads=4)
    config.resolve_args(Arguments())
    assert config == DnsBenchConfig(threads=4)


def test_resolve_args_canonicalizes_existing_file(tmp_path, monkeypatch):
    target = tmp_path / "servers.txt"
    target.write_text("", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    config = DnsBenchConfig()
    config.resolve_args(Arguments(custom_servers_file=Path("servers.txt")))
    assert config.custom_servers_file == target.resolve()


def test_resolve_args_drops_missing_file(tmp_path):
    config = DnsBenchConfig(custom_servers_file=tmp_path)
    config.resolve_args(Arguments(custom_servers_file=tmp_path / "absent.txt"))
    assert config.custom_servers_file is None