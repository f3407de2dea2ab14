"""Command-line arguments and the option enumerations they use."""

from __future__ import annotations

import argparse
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TypeVar

_VERSION = "0.9.1"
_DESCRIPTION = (
    "Find the fastest DNS in your location to improve internet browsing experience."
)

_C = TypeVar("_C", bound="_Choice")


class _Choice(Enum):
    """An option value: written on the command line in kebab case,
    stored in the configuration file in camel case."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_str(cls: type[_C], text: str) -> _C:
        """Return the member whose command-line name is exactly ``text``."""
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Invalid variant: {text}")

    @property
    def serde_name(self) -> str:
        """The name used for this value in the configuration file."""
        return "".join(part.capitalize() for part in self.value.split("-"))

    @classmethod
    def from_serde_name(cls: type[_C], name: str) -> _C:
        """Return the member stored in the configuration file as ``name``."""
        for member in cls:
            if member.serde_name == name:
                return member
        expected = ", ".join(f"`{member.serde_name}`" for member in cls)
        raise ValueError(f"unknown variant `{name}`, expected one of {expected}")


class IpVersion(_Choice):
    V4 = "v4"
    V6 = "v6"


class Protocol(_Choice):
    TCP = "tcp"
    UDP = "udp"


class Style(_Choice):
    EMPTY = "empty"
    BLANK = "blank"
    ASCII = "ascii"
    PSQL = "psql"
    MARKDOWN = "markdown"
    MODERN = "modern"
    SHARP = "sharp"
    ROUNDED = "rounded"
    MODERN_ROUNDED = "modern-rounded"
    EXTENDED = "extended"
    DOTS = "dots"
    RE_STRUCTURED_TEXT = "re-structured-text"
    ASCII_ROUNDED = "ascii-rounded"


class Format(_Choice):
    HUMAN_READABLE = "human-readable"
    JSON = "json"
    XML = "xml"
    CSV = "csv"


@dataclass
class Arguments:
    """Options given on the command line; ``None`` means not given."""

    domain: str | None = None
    threads: int | None = None
    requests: int | None = None
    timeout: int | None = None
    protocol: Protocol | None = None
    name_servers_ip: IpVersion | None = None
    lookup_ip: IpVersion | None = None
    style: Style | None = None
    save_config: bool = False
    custom_servers_file: Path | None = None
    format: Format | None = None


_DIGITS = re.compile(r"\+?[0-9]+")


def _ranged(low: int, high: int) -> Callable[[str], int]:
    """Integer converter accepting ``low <= value < high``."""

    def convert(text: str) -> int:
        if not _DIGITS.fullmatch(text):
            raise argparse.ArgumentTypeError(f"invalid digit found in string: {text!r}")
        value = int(text)
        if not low <= value < high:
            raise argparse.ArgumentTypeError(f"{value} is not in {low}..{high}")
        return value

    return convert


def _choice(cls: type[_C]) -> Callable[[str], _C]:
    def convert(text: str) -> _C:
        try:
            return cls.from_str(text)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    return convert


def _metavar(cls: type[_Choice]) -> str:
    return "{" + ",".join(member.value for member in cls) + "}"


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(prog="dns-bench", description=_DESCRIPTION)
    parser.add_argument("--version", action="version", version=f"%(prog)s {_VERSION}")
    parser.add_argument("--domain", help="The domain to resolve.")
    parser.add_argument(
        "--threads", type=_ranged(1, 256), help="The number of threads to use."
    )
    parser.add_argument(
        "--requests", type=_ranged(1, 1000), help="The number of requests to make."
    )
    parser.add_argument(
        "--timeout", type=_ranged(1, 60), help="The timeout in seconds."
    )
    parser.add_argument(
        "--protocol",
        type=_choice(Protocol),
        metavar=_metavar(Protocol),
        help="The protocol to use.",
    )
    parser.add_argument(
        "--name-servers-ip",
        type=_choice(IpVersion),
        metavar=_metavar(IpVersion),
        help="The IP version to use for the name servers.",
    )
    parser.add_argument(
        "--lookup-ip",
        type=_choice(IpVersion),
        metavar=_metavar(IpVersion),
        help="The IP version to use for the lookup.",
    )
    parser.add_argument(
        "--style",
        type=_choice(Style),
        metavar=_metavar(Style),
        help="The style to use for the table.",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Save the configurations to a file in users home directory.",
    )
    parser.add_argument(
        "--custom-servers-file",
        type=Path,
        help="Provide a custom list of servers to use instead of the default ones.",
    )
    parser.add_argument(
        "--format",
        type=_choice(Format),
        metavar=_metavar(Format),
        help="The output format.",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> Arguments:
    """Parse ``argv`` (the process arguments when ``None``)."""
    namespace = build_parser().parse_args(argv)
    return Arguments(**vars(namespace))