"""Reading a user-supplied list of DNS servers."""

from __future__ import annotations

import re
from ipaddress import AddressValueError, IPv4Address, IPv6Address
from os import PathLike
from pathlib import Path

from dnsbench.args import IpVersion
from dnsbench.servers import DnsEntry

_V4_ADDR = re.compile(r"([0-9.]+):([0-9]+)")
_V6_ADDR = re.compile(r"\[([0-9A-Fa-f:.]+)(?:%([0-9]+))?\]:([0-9]+)")
_MAX_PORT = 0xFFFF


class CustomServersError(ValueError):
    """A line of a custom servers list could not be understood."""


def _port(text: str) -> int:
    port = int(text)
    if port > _MAX_PORT:
        raise CustomServersError(f"Invalid port: {text}")
    return port


def parse_line(line: str, ip: IpVersion) -> DnsEntry:
    """Parse a ``name;address:port`` line into a server entry."""
    parts = line.split(";")
    if len(parts) != 2:
        raise CustomServersError(f"Invalid line: {line!r}")
    name, address = parts

    try:
        if ip is IpVersion.V4:
            match = _V4_ADDR.fullmatch(address)
            if match is None:
                raise CustomServersError(f"Invalid line: {line!r}")
            host = IPv4Address(match.group(1))
            port = _port(match.group(2))
        else:
            match = _V6_ADDR.fullmatch(address)
            if match is None:
                raise CustomServersError(f"Invalid line: {line!r}")
            addr_text, scope, port_text = match.groups()
            host = IPv6Address(f"{addr_text}%{scope}" if scope else addr_text)
            port = _port(port_text)
    except (AddressValueError, ValueError) as exc:
        if isinstance(exc, CustomServersError):
            raise
        raise CustomServersError(f"Invalid line: {line!r}") from exc

    return DnsEntry(name, host, port)


def read_custom_servers_list(
    filepath: str | PathLike[str], ip: IpVersion
) -> list[DnsEntry]:
    """Read every line of ``filepath`` as a server entry.

    Raises ``OSError`` if the file cannot be read and
    ``CustomServersError`` on the first line that does not parse.
    """
    with Path(filepath).open(encoding="utf-8") as handle:
        return [parse_line(line.rstrip("\r\n"), ip) for line in handle]