"""Built-in lists of public DNS servers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from ipaddress import IPv4Address, IPv6Address

from dnsbench.args import IpVersion

DNS_PORT = 53


@dataclass(frozen=True)
class DnsEntry:
    """A named DNS server reachable at an address and port."""

    name: str
    ip: IPv4Address | IPv6Address
    port: int = DNS_PORT

    @property
    def socket_addr(self) -> str:
        """The address in ``host:port`` form, brackets around IPv6 hosts."""
        if self.ip.version == 6:
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"

    def __str__(self) -> str:
        return f"{self.name} ({self.ip})"


def _v4(name: str, *octets: int) -> DnsEntry:
    return DnsEntry(name, IPv4Address(bytes(octets)), DNS_PORT)


def _v6(name: str, *groups: int) -> DnsEntry:
    value = reduce(lambda acc, group: (acc << 16) | group, groups, 0)
    return DnsEntry(name, IPv6Address(value), DNS_PORT)


IPV4_DNS_ENTRIES: tuple[DnsEntry, ...] = (
    _v4("Google", 8, 8, 8, 8),
    _v4("Google", 8, 8, 4, 4),
    _v4("Cloudflare", 1, 1, 1, 1),
    _v4("Cloudflare", 1, 0, 0, 1),
    _v4("Quad9", 9, 9, 9, 9),
    _v4("Quad9", 149, 112, 112, 112),
    _v4("Router", 192, 168, 0, 1),
    _v4("Control D", 76, 76, 2, 0),
    _v4("Control D", 76, 76, 10, 0),
    _v4("OpenDNS Home", 208, 67, 222, 222),
    _v4("OpenDNS Home", 208, 67, 220, 220),
    _v4("CleanBrowsing", 185, 228, 168, 9),
    _v4("CleanBrowsing", 185, 228, 169, 9),
    _v4("AdGuard DNS", 94, 140, 14, 14),
    _v4("AdGuard DNS", 94, 140, 15, 15),
    _v4("Comodo Secure DNS", 8, 26, 56, 26),
    _v4("Comodo Secure DNS", 8, 20, 247, 20),
    _v4("Level3", 209, 244, 0, 3),
    _v4("Level3", 209, 244, 0, 4),
    _v4("Verisign", 64, 6, 64, 6),
    _v4("Verisign", 64, 6, 65, 6),
    _v4("DNS.WATCH", 84, 200, 69, 80),
    _v4("DNS.WATCH", 84, 200, 70, 40),
    _v4("Norton ConnectSafe", 199, 85, 126, 10),
    _v4("Norton ConnectSafe", 199, 85, 127, 10),
    _v4("SafeDNS", 195, 46, 39, 39),
    _v4("SafeDNS", 195, 46, 39, 40),
    _v4("NextDNS", 45, 90, 28, 100),
    _v4("NextDNS", 45, 90, 30, 100),
    _v4("Dyn", 216, 146, 35, 35),
    _v4("Dyn", 216, 146, 36, 36),
    _v4("Hurricane Electric", 74, 82, 42, 42),
    _v4("Surfshark DNS", 162, 252, 172, 57),
    _v4("Surfshark DNS", 149, 154, 159, 92),
    _v4("SafeServe", 198, 54, 117, 10),
    _v4("SafeServe", 198, 54, 117, 11),
)

IPV6_DNS_ENTRIES: tuple[DnsEntry, ...] = (
    _v6("Google", 0x2001, 0x4860, 0x4860, 0, 0, 0, 0, 0x8888),
    _v6("Google", 0x2001, 0x4860, 0x4860, 0, 0, 0, 0, 0x8844),
    _v6("Cloudflare", 0x2606, 0x4700, 0x4700, 0, 0, 0, 0, 0x1111),
    _v6("Cloudflare", 0x2606, 0x4700, 0x4700, 0, 0, 0, 0, 0x1001),
    _v6("Quad9", 0x2620, 0x00FE, 0, 0, 0, 0, 0, 0x00FE),
    _v6("Quad9", 0x2620, 0x00FE, 0, 0, 0, 0, 0, 0x0009),
    _v6("Router", 0xFE80, 0, 0, 0, 0, 0, 0, 0x0001),
    _v6("Control D", 0x2606, 0x1A40, 0, 0, 0, 0, 0, 0),
    _v6("Control D", 0x2606, 0x1A40, 0x0001, 0, 0, 0, 0, 0),
    _v6("OpenDNS Home", 0x2620, 0x0119, 0x0035, 0, 0, 0, 0, 0x0035),
    _v6("OpenDNS Home", 0x2620, 0x0119, 0x0053, 0, 0, 0, 0, 0x0053),
    _v6("CleanBrowsing", 0x2A0D, 0x2A00, 0x0001, 0, 0, 0, 0, 0x0002),
    _v6("CleanBrowsing", 0x2A0D, 0x2A00, 0x0002, 0, 0, 0, 0, 0x0002),
    _v6("AdGuard DNS", 0x2A10, 0x50C0, 0, 0, 0, 0, 0x0AD1, 0x00FF),
    _v6("AdGuard DNS", 0x2A10, 0x50C0, 0, 0, 0, 0, 0x0AD2, 0x00FF),
    _v6("Verisign", 0x2620, 0x0074, 0x001B, 0, 0, 0, 0x0001, 0x0001),
    _v6("Verisign", 0x2620, 0x0074, 0x001C, 0, 0, 0, 0x0002, 0x0002),
    _v6("DNS.WATCH", 0x2001, 0x1608, 0x0010, 0x0025, 0, 0, 0x1C04, 0xB12F),
    _v6("DNS.WATCH", 0x2001, 0x1608, 0x0010, 0x0025, 0, 0, 0x9249, 0xD69B),
    _v6("NextDNS", 0x2A07, 0xA8C0, 0, 0, 0, 0, 0x006E, 0x3F39),
    _v6("NextDNS", 0x2A07, 0xA8C1, 0, 0, 0, 0, 0x006E, 0x3F39),
    _v6("Hurricane Electric", 0x2001, 0x0470, 0x0020, 0, 0, 0, 0, 0x0002),
)


def default_entries(ip: IpVersion) -> list[DnsEntry]:
    """Return a fresh list of the built-in servers for the given IP version."""
    if ip is IpVersion.V6:
        return list(IPV6_DNS_ENTRIES)
    return list(IPV4_DNS_ENTRIES)