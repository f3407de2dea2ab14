"""Benchmark settings and their file in the user's home directory."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Any, TypeVar

import tomli_w

from dnsbench.args import Arguments, Format, IpVersion, Protocol, Style

CONFIG_DIR_NAME = ".dns-bench"
CONFIG_FILE_NAME = "config.toml"
USER_DIRS_ERROR = (
    "No valid home directory path could be retrieved from the operating system."
)

_U16_MAX = 0xFFFF
_U64_MAX = 0xFFFF_FFFF_FFFF_FFFF

_E = TypeVar("_E", IpVersion, Protocol, Style, Format)


class ConfigError(Exception):
    """The configuration file could not be located, read, parsed or written."""


def _int_field(data: dict[str, Any], key: str, maximum: int) -> int:
    value = _required(data, key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"invalid type for `{key}`: expected an integer")
    if not 0 <= value <= maximum:
        raise ConfigError(f"invalid value for `{key}`: {value} is out of range")
    return value


def _required(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ConfigError(f"missing field `{key}`")
    return data[key]


def _variant(cls: type[_E], key: str, value: Any) -> _E:
    if not isinstance(value, str):
        raise ConfigError(f"invalid type for `{key}`: expected a string")
    try:
        return cls.from_serde_name(value)
    except ValueError as exc:
        raise ConfigError(f"invalid value for `{key}`: {exc}") from exc


@dataclass
class DnsBenchConfig:
    """Effective benchmark settings."""

    domain: str = "google.com"
    threads: int = 8
    requests: int = 25
    timeout: int = 3
    protocol: Protocol = Protocol.UDP
    name_servers_ip: IpVersion = IpVersion.V4
    lookup_ip: IpVersion = IpVersion.V4
    style: Style = Style.ROUNDED
    custom_servers_file: Path | None = None
    format: Format = Format.HUMAN_READABLE

    def resolve_args(self, args: Arguments) -> None:
        """Override settings with every option given on the command line."""
        if args.domain is not None:
            self.domain = args.domain
        if args.threads is not None:
            self.threads = args.threads
        if args.requests is not None:
            self.requests = args.requests
        if args.timeout is not None:
            self.timeout = args.timeout
        if args.protocol is not None:
            self.protocol = args.protocol
        if args.name_servers_ip is not None:
            self.name_servers_ip = args.name_servers_ip
        if args.lookup_ip is not None:
            self.lookup_ip = args.lookup_ip
        if args.style is not None:
            self.style = args.style
        if args.custom_servers_file is not None:
            try:
                self.custom_servers_file = Path(args.custom_servers_file).resolve(
                    strict=True
                )
            except (OSError, RuntimeError):
                self.custom_servers_file = None
        if args.format is not None:
            self.format = args.format

    def to_dict(self) -> dict[str, Any]:
        """Return the settings as stored in the configuration file."""
        data: dict[str, Any] = {
            "domain": self.domain,
            "threads": self.threads,
            "requests": self.requests,
            "timeout": self.timeout,
            "protocol": self.protocol.serde_name,
            "name_servers_ip": self.name_servers_ip.serde_name,
            "lookup_ip": self.lookup_ip.serde_name,
            "style": self.style.serde_name,
        }
        if self.custom_servers_file is not None:
            data["custom_servers_file"] = str(self.custom_servers_file)
        data["format"] = self.format.serde_name
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DnsBenchConfig:
        """Build settings from a configuration-file mapping.

        Every field is required except ``custom_servers_file`` and ``format``.
        """
        domain = _required(data, "domain")
        if not isinstance(domain, str):
            raise ConfigError("invalid type for `domain`: expected a string")

        custom = data.get("custom_servers_file")
        if custom is not None and not isinstance(custom, str):
            raise ConfigError("invalid type for `custom_servers_file`: expected a string")

        fmt = data.get("format")
        return cls(
            domain=domain,
            threads=_int_field(data, "threads", _U16_MAX),
            requests=_int_field(data, "requests", _U16_MAX),
            timeout=_int_field(data, "timeout", _U64_MAX),
            protocol=_variant(Protocol, "protocol", _required(data, "protocol")),
            name_servers_ip=_variant(
                IpVersion, "name_servers_ip", _required(data, "name_servers_ip")
            ),
            lookup_ip=_variant(IpVersion, "lookup_ip", _required(data, "lookup_ip")),
            style=_variant(Style, "style", _required(data, "style")),
            custom_servers_file=Path(custom) if custom is not None else None,
            format=Format.HUMAN_READABLE if fmt is None else _variant(Format, "format", fmt),
        )


def _home(home: str | PathLike[str] | None) -> Path:
    if home is not None:
        return Path(home)
    try:
        return Path.home()
    except (RuntimeError, KeyError) as exc:
        raise ConfigError(f"UserDirs: {USER_DIRS_ERROR}") from exc


def config_path(home: str | PathLike[str] | None = None) -> Path:
    """Location of the configuration file under ``home`` (the user's by default)."""
    return _home(home) / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config(home: str | PathLike[str] | None = None) -> DnsBenchConfig | None:
    """Load the saved settings, or return ``None`` when no file exists.

    Raises ``ConfigError`` when the file cannot be read or parsed.
    """
    path = config_path(home)
    if not path.exists():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Io: {exc}") from exc
    try:
        return DnsBenchConfig.from_dict(tomllib.loads(text))
    except (tomllib.TOMLDecodeError, ConfigError) as exc:
        raise ConfigError(f"Toml: {exc}") from exc


def save_config(config: DnsBenchConfig, home: str | PathLike[str] | None = None) -> Path:
    """Write ``config`` to the configuration file and return its path."""
    path = config_path(home)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(tomli_w.dumps(config.to_dict()), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(str(exc)) from exc
    return path