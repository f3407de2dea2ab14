"""The benchmark run: query every server in parallel and report the results."""

from __future__ import annotations

import sys
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from ipaddress import IPv4Address, IPv6Address, ip_address
from os import PathLike

import dns.exception
import dns.resolver
from tqdm import tqdm

from dnsbench.args import Arguments, Format, IpVersion, Protocol, parse_args
from dnsbench.config import ConfigError, DnsBenchConfig, load_config, save_config
from dnsbench.custom import CustomServersError, read_custom_servers_list
from dnsbench.output import render_table, to_csv, to_json, to_xml
from dnsbench.result import (
    MeasureResult,
    RawResultEntry,
    TimeResult,
    format_duration,
    sort_result_entries,
)
from dnsbench.servers import DnsEntry, default_entries

_BAR_FORMAT = "[{elapsed}] {bar:40} {n_fmt:>7}/{total_fmt:7} {desc}"


def measure_server(entry: DnsEntry, config: DnsBenchConfig) -> RawResultEntry:
    """Resolve ``config.domain`` through ``entry`` ``config.requests`` times
    and summarise the lookups."""
    v6_lookup = config.lookup_ip is IpVersion.V6
    rdtype = "AAAA" if v6_lookup else "A"
    unspecified = IPv6Address("::") if v6_lookup else IPv4Address("0.0.0.0")
    use_tcp = config.protocol is Protocol.TCP

    measurements: list[MeasureResult] = []
    with tqdm(
        total=config.requests,
        desc=str(entry),
        leave=False,
        disable=None,
        bar_format=_BAR_FORMAT,
        ascii=" -#",
    ) as bar:
        for _ in range(config.requests):
            # A fresh resolver per request keeps answers from being cached.
            resolver = dns.resolver.Resolver(configure=False)
            resolver.nameservers = [str(entry.ip)]
            resolver.port = entry.port
            resolver.timeout = config.timeout
            resolver.lifetime = config.timeout

            start = time.perf_counter_ns()
            try:
                answer = resolver.resolve(
                    config.domain, rdtype, tcp=use_tcp, search=False
                )
                elapsed = time.perf_counter_ns() - start
                resolved = ip_address(next(iter(answer)).address)
            except (dns.exception.DNSException, OSError, ValueError, StopIteration) as exc:
                outcome = MeasureResult(
                    entry.name,
                    entry.ip,
                    unspecified,
                    TimeResult.failed(str(exc) or type(exc).__name__),
                )
            else:
                outcome = MeasureResult(
                    entry.name, entry.ip, resolved, TimeResult.succeeded(elapsed)
                )
            measurements.append(outcome)
            bar.update(1)

    return RawResultEntry.from_measurements(measurements)


def _initial_config(home: str | PathLike[str] | None) -> DnsBenchConfig:
    try:
        loaded = load_config(home)
    except ConfigError as exc:
        print(
            f"Failed to load config: {exc}\nProceeding with default parameters...",
            file=sys.stderr,
        )
        return DnsBenchConfig()
    return loaded if loaded is not None else DnsBenchConfig()


class DnsBenchApplication:
    """One benchmark run, configured from the saved settings and the arguments."""

    def __init__(
        self, arguments: Arguments, home: str | PathLike[str] | None = None
    ) -> None:
        self.arguments = arguments
        self.home = home
        self.config = _initial_config(home)
        self.config.resolve_args(arguments)
        self.results: list[RawResultEntry] = []

    @property
    def _human_readable(self) -> bool:
        return self.config.format is Format.HUMAN_READABLE

    def run(self) -> None:
        """Benchmark every server and print the results."""
        self._print_config_summary()
        self._save_config()
        entries = self._dns_entries()
        start = time.perf_counter_ns()
        self.results = sort_result_entries(self._benchmark(entries))
        self._print_result()
        if self._human_readable:
            elapsed = time.perf_counter_ns() - start
            print(f"Benchmark completed in {format_duration(elapsed)}")

    def _print_config_summary(self) -> None:
        if not self._human_readable:
            return
        c = self.config
        print(
            "Starting DNS benchmark with the following parameters:\n"
            f"Domain: {c.domain}; Threads: {c.threads}; "
            f"Requests: {c.requests}; Timeout: {c.timeout}\n"
            f"Protocol: {c.protocol}; Name servers: IP{c.name_servers_ip}; "
            f"Lookup: IP{c.lookup_ip}; Style: {c.style}"
        )

    def _save_config(self) -> None:
        if not self.arguments.save_config:
            return
        try:
            save_config(self.config, self.home)
        except ConfigError as exc:
            print(f"Failed to save configuration: {exc}", file=sys.stderr)
        else:
            print("Configuration saved successfully.")

    def _dns_entries(self) -> list[DnsEntry]:
        path = self.config.custom_servers_file
        if path is None:
            return default_entries(self.config.name_servers_ip)
        try:
            entries = read_custom_servers_list(path, self.config.name_servers_ip)
        except (OSError, UnicodeDecodeError, CustomServersError) as exc:
            print(f"Failed to read custom servers list: {exc}", file=sys.stderr)
            raise SystemExit(1) from exc
        print("Using custom servers list.")
        return entries

    def _benchmark(self, entries: Sequence[DnsEntry]) -> list[RawResultEntry]:
        if not entries:
            return []
        with ThreadPoolExecutor(max_workers=self.config.threads) as pool:
            futures = [pool.submit(measure_server, entry, self.config) for entry in entries]
            return [future.result() for future in as_completed(futures)]

    def _print_result(self) -> None:
        fmt = self.config.format
        if fmt is Format.JSON:
            print(to_json(self.results))
        elif fmt is Format.XML:
            print(to_xml(self.results))
        elif fmt is Format.CSV:
            print(to_csv(self.results))
        else:
            print(render_table(self.results, self.config.style))


def main(argv: Sequence[str] | None = None) -> int:
    """Run the benchmark from command-line arguments."""
    DnsBenchApplication(parse_args(argv)).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())