import json
import re
from ipaddress import IPv4Address, IPv6Address
from types import SimpleNamespace
from unittest.mock import call, patch

import dns.exception
import pytest

from dnsbench.app import DnsBenchApplication, main, measure_server
from dnsbench.args import Arguments, Format, IpVersion, Protocol, Style
from dnsbench.config import DnsBenchConfig, config_path, load_config, save_config
from dnsbench.output import CSV_HEADERS
from dnsbench.servers import IPV4_DNS_ENTRIES, DnsEntry


@pytest.fixture
def resolver_cls():
    with patch("dns.resolver.Resolver") as cls:
        cls.return_value.resolve.return_value = [SimpleNamespace(address="203.0.113.7")]
        yield cls


@pytest.fixture
def servers_file(tmp_path):
    path = tmp_path / "servers.txt"
    path.write_text("Google;8.8.8.8:53\nCloudflare;1.1.1.1:53\n", encoding="utf-8")
    return path


def _split_first_line(text):
    first, rest = text.split("\n", 1)
    return first, rest


def test_measure_server_all_succeed(resolver_cls):
    entry = DnsEntry("Google", IPv4Address("8.8.8.8"))
    config = DnsBenchConfig(requests=3)
    result = measure_server(entry, config)
    assert result.name == "Google"
    assert result.ip == IPv4Address("8.8.8.8")
    assert result.total_requests == 3
    assert result.successful_requests == 3
    assert result.successful_requests_percentage == 100.0
    assert result.last_resolved_ip == IPv4Address("203.0.113.7")
    assert result.average_duration.is_succeeded
    assert resolver_cls.return_value.resolve.call_count == 3


def test_measure_server_configures_resolver(resolver_cls):
    resolver_cls.return_value.resolve.return_value = [
        SimpleNamespace(address="2001:db8::1")
    ]
    entry = DnsEntry("Quad9", IPv4Address("9.9.9.9"))
    config = DnsBenchConfig(
        domain="example.com",
        requests=2,
        timeout=5,
        protocol=Protocol.TCP,
        lookup_ip=IpVersion.V6,
    )
    result = measure_server(entry, config)
    instance = resolver_cls.return_value
    assert resolver_cls.call_args == call(configure=False)
    assert resolver_cls.call_count == 2
    assert instance.nameservers == ["9.9.9.9"]
    assert instance.port == 53
    assert instance.timeout == 5
    assert instance.lifetime == 5
    assert instance.resolve.call_args == call(
        "example.com", "AAAA", tcp=True, search=False
    )
    assert result.last_resolved_ip == IPv6Address("2001:db8::1")


def test_measure_server_all_fail(resolver_cls):
    exc = dns.exception.Timeout()
    resolver_cls.return_value.resolve.side_effect = exc
    entry = DnsEntry("Router", IPv4Address("192.168.0.1"))
    result = measure_server(entry, DnsBenchConfig(requests=2, lookup_ip=IpVersion.V6))
    assert result.successful_requests == 0
    assert result.total_requests == 2
    assert result.first_duration.error == str(exc)
    assert result.average_duration.error == "No successful requests"
    assert result.last_resolved_ip == IPv4Address("0.0.0.0")


def test_measure_server_partial_success(resolver_cls):
    resolver_cls.return_value.resolve.side_effect = [
        dns.exception.Timeout(),
        [SimpleNamespace(address="198.51.100.4")],
    ]
    entry = DnsEntry("Google", IPv4Address("8.8.4.4"))
    result = measure_server(entry, DnsBenchConfig(requests=2))
    assert result.successful_requests == 1
    assert result.successful_requests_percentage == 50.0
    assert result.first_duration.is_failed
    assert result.average_duration.is_succeeded
    assert result.last_resolved_ip == IPv4Address("198.51.100.4")


def test_run_json_with_custom_servers(resolver_cls, servers_file, tmp_path, capsys):
    args = Arguments(
        custom_servers_file=servers_file, format=Format.JSON, requests=2, threads=2
    )
    app = DnsBenchApplication(args, home=tmp_path)
    app.run()
    first, rest = _split_first_line(capsys.readouterr().out)
    assert first == "Using custom servers list."
    data = json.loads(rest)
    assert sorted(item["name"] for item in data) == ["Cloudflare", "Google"]
    assert all(item["total_requests"] == 2 for item in data)
    averages = [
        item["average_duration"]["succeeded"]["secs"] * 10**9
        + item["average_duration"]["succeeded"]["nanos"]
        for item in data
    ]
    assert averages == sorted(averages)


def test_run_default_servers_json(resolver_cls, tmp_path, capsys):
    app = DnsBenchApplication(Arguments(format=Format.JSON, requests=1), home=tmp_path)
    app.run()
    data = json.loads(capsys.readouterr().out)
    assert len(data) == len(IPV4_DNS_ENTRIES)
    assert len(app.results) == len(IPV4_DNS_ENTRIES)


def test_run_csv(resolver_cls, servers_file, tmp_path, capsys):
    args = Arguments(custom_servers_file=servers_file, format=Format.CSV, requests=1)
    DnsBenchApplication(args, home=tmp_path).run()
    _, rest = _split_first_line(capsys.readouterr().out)
    lines = rest.splitlines()
    assert lines[0] == ",".join(CSV_HEADERS)
    assert len([line for line in lines[1:] if line]) == 2


def test_run_xml(resolver_cls, servers_file, tmp_path, capsys):
    args = Arguments(custom_servers_file=servers_file, format=Format.XML, requests=1)
    DnsBenchApplication(args, home=tmp_path).run()
    _, rest = _split_first_line(capsys.readouterr().out)
    assert rest.startswith("<DnsBenchResultEntries>")
    assert rest.strip().endswith("</DnsBenchResultEntries>")
    assert rest.count("<ResultEntry>") == 2


def test_run_human_readable(resolver_cls, servers_file, tmp_path, capsys):
    args = Arguments(
        domain="example.com",
        threads=2,
        requests=1,
        custom_servers_file=servers_file,
        style=Style.ASCII,
    )
    DnsBenchApplication(args, home=tmp_path).run()
    out = capsys.readouterr().out
    assert out.startswith("Starting DNS benchmark with the following parameters:\n")
    assert "Domain: example.com; Threads: 2; Requests: 1; Timeout: 3\n" in out
    assert "Protocol: udp; Name servers: IPv4; Lookup: IPv4; Style: ascii\n" in out
    assert "| Server name" in out
    assert re.search(r"Benchmark completed in \d+(\.\d+)?(ns|µs|ms|s)\n$", out)


def test_run_saves_config(resolver_cls, servers_file, tmp_path, capsys):
    args = Arguments(
        domain="example.org",
        requests=1,
        save_config=True,
        custom_servers_file=servers_file,
        format=Format.JSON,
    )
    DnsBenchApplication(args, home=tmp_path).run()
    assert "Configuration saved successfully." in capsys.readouterr().out
    assert config_path(tmp_path).exists()
    saved = load_config(tmp_path)
    assert saved.domain == "example.org"
    assert saved.format is Format.JSON


def test_saved_config_is_used_and_overridden(tmp_path):
    save_config(DnsBenchConfig(domain="example.org", threads=4), tmp_path)
    app = DnsBenchApplication(Arguments(threads=16), home=tmp_path)
    assert app.config.domain == "example.org"
    assert app.config.threads == 16


def test_broken_config_falls_back_to_defaults(tmp_path, capsys):
    path = config_path(tmp_path)
    path.parent.mkdir(parents=True)
    path.write_text("this is = = not toml", encoding="utf-8")
    app = DnsBenchApplication(Arguments(), home=tmp_path)
    err = capsys.readouterr().err
    assert "Failed to load config" in err
    assert "Proceeding with default parameters..." in err
    assert app.config == DnsBenchConfig()


def test_invalid_custom_servers_file_exits(resolver_cls, tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("no separator here\n", encoding="utf-8")
    app = DnsBenchApplication(
        Arguments(custom_servers_file=path, format=Format.JSON), home=tmp_path
    )
    with pytest.raises(SystemExit) as info:
        app.run()
    assert info.value.code == 1
    assert "Failed to read custom servers list" in capsys.readouterr().err


def test_main(resolver_cls, servers_file, tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    code = main(
        [
            "--custom-servers-file",
            str(servers_file),
            "--format",
            "json",
            "--requests",
            "1",
        ]
    )
    assert code == 0
    _, rest = _split_first_line(capsys.readouterr().out)
    assert {item["name"] for item in json.loads(rest)} == {"Google", "Cloudflare"}