"""Per-request measurements and their summary per server."""

from __future__ import annotations

import math
import struct
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from ipaddress import IPv4Address, IPv6Address

IpAddress = IPv4Address | IPv6Address

_NANOS_PER_SEC = 1_000_000_000
_NANOS_PER_MILLI = 1_000_000
_NANOS_PER_MICRO = 1_000
_NO_SUCCESS = "No successful requests"


def _f32(value: float) -> float:
    """Round ``value`` to the nearest single-precision float."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


class Color(Enum):
    """Terminal foreground colours used to highlight table cells."""

    FG_BRIGHT_GREEN = "\x1b[92m"
    FG_BRIGHT_YELLOW = "\x1b[93m"
    FG_BRIGHT_RED = "\x1b[91m"
    FG_RED = "\x1b[31m"

    RESET = "\x1b[39m"

    def paint(self, text: str) -> str:
        """Wrap ``text`` in this colour."""
        return f"{self.value}{text}{Color.RESET.value}"


def format_duration(nanos: int) -> str:
    """Render a duration the way a debug-printed duration looks: ``150ns``,
    ``1.5ms``, ``2.000000001s``."""
    if nanos < 0:
        raise ValueError("duration cannot be negative")
    secs, sub = divmod(nanos, _NANOS_PER_SEC)
    if secs > 0:
        integer, fraction, divisor, suffix = secs, sub, _NANOS_PER_SEC // 10, "s"
    elif sub >= _NANOS_PER_MILLI:
        integer, fraction = divmod(sub, _NANOS_PER_MILLI)
        divisor, suffix = _NANOS_PER_MILLI // 10, "ms"
    elif sub >= _NANOS_PER_MICRO:
        integer, fraction = divmod(sub, _NANOS_PER_MICRO)
        divisor, suffix = _NANOS_PER_MICRO // 10, "µs"
    else:
        integer, fraction, divisor, suffix = sub, 0, 1, "ns"

    digits = []
    while fraction > 0 and divisor > 0:
        digit, fraction = divmod(fraction, divisor)
        digits.append(str(digit))
        divisor //= 10
    text = str(integer)
    if digits:
        text += "." + "".join(digits)
    return text + suffix


def format_f32(value: float) -> str:
    """Shortest decimal text that reads back as the same single-precision
    float, written without an exponent (``66.66667``, ``100``)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    target = _f32(value)
    if target == 0:
        return "-0" if math.copysign(1.0, target) < 0 else "0"
    shortest = repr(target)
    for precision in range(1, 18):
        candidate = f"{target:.{precision}g}"
        if _f32(float(candidate)) == target:
            shortest = candidate
            break
    return f"{Decimal(shortest):f}"


def _divide_duration(nanos: int, divisor: int) -> int:
    """Divide a duration by a whole number, seconds and nanoseconds apart."""
    secs, sub = divmod(nanos, _NANOS_PER_SEC)
    secs_q, carry = divmod(secs, divisor)
    extra = carry * _NANOS_PER_SEC // divisor
    return secs_q * _NANOS_PER_SEC + sub // divisor + extra


@dataclass(frozen=True)
class TimeResult:
    """Outcome of a timed lookup: a duration in nanoseconds or an error."""

    nanos: int | None = None
    error: str | None = None

    @classmethod
    def succeeded(cls, nanos: int) -> TimeResult:
        if nanos < 0:
            raise ValueError("duration cannot be negative")
        return cls(nanos=nanos)

    @classmethod
    def failed(cls, error: str) -> TimeResult:
        return cls(error=error)

    @property
    def is_succeeded(self) -> bool:
        return self.nanos is not None

    @property
    def is_failed(self) -> bool:
        return self.nanos is None

    def xml_type(self) -> str:
        """The ``type`` attribute used for this result in XML output."""
        return "succeeded" if self.is_succeeded else "failed"

    def duration_millis(self) -> str | None:
        """Milliseconds with six decimals, or ``None`` for a failure."""
        if self.nanos is None:
            return None
        millis, fraction = divmod(self.nanos, _NANOS_PER_MILLI)
        return f"{millis + fraction / 1_000_000.0:.6f}"

    def color(self) -> Color:
        """Green up to 30 ms, yellow up to 80 ms, bright red beyond, red on failure."""
        if self.nanos is None:
            return Color.FG_RED
        millis = self.nanos // _NANOS_PER_MILLI
        if millis <= 30:
            return Color.FG_BRIGHT_GREEN
        if millis <= 80:
            return Color.FG_BRIGHT_YELLOW
        return Color.FG_BRIGHT_RED

    def __str__(self) -> str:
        if self.nanos is None:
            return self.error or ""
        return format_duration(self.nanos)


@dataclass(frozen=True)
class MeasureResult:
    """One timed lookup against one server."""

    name: str
    ip: IpAddress
    resolved_ip: IpAddress
    time: TimeResult


@dataclass(frozen=True)
class RawResultEntry:
    """Summary of every lookup made against one server."""

    name: str
    ip: IpAddress
    last_resolved_ip: IpAddress
    total_requests: int
    successful_requests: int
    successful_requests_percentage: float
    successful_requests_color: Color
    first_duration: TimeResult
    first_duration_color: Color
    average_duration: TimeResult
    average_duration_color: Color

    @classmethod
    def from_measurements(cls, measurements: Sequence[MeasureResult]) -> RawResultEntry:
        """Summarise the lookups made against one server, in the order made."""
        if not measurements:
            raise ValueError("at least one measurement is required")

        successes = [m for m in measurements if m.time.is_succeeded]
        total_nanos = sum(m.time.nanos for m in successes)
        last_resolved_ip: IpAddress = (
            successes[-1].resolved_ip if successes else IPv4Address("0.0.0.0")
        )

        if successes:
            average = TimeResult.succeeded(_divide_duration(total_nanos, len(successes)))
        else:
            average = TimeResult.failed(_NO_SUCCESS)

        total = len(measurements)
        percentage = _f32(_f32(len(successes) / total) * 100.0)
        if percentage == 100.0:
            rate_color = Color.FG_BRIGHT_GREEN
        elif percentage >= 50.0:
            rate_color = Color.FG_BRIGHT_YELLOW
        elif percentage >= 20.0:
            rate_color = Color.FG_BRIGHT_RED
        else:
            rate_color = Color.FG_RED

        first = measurements[0]
        return cls(
            name=first.name,
            ip=first.ip,
            last_resolved_ip=last_resolved_ip,
            total_requests=total,
            successful_requests=len(successes),
            successful_requests_percentage=percentage,
            successful_requests_color=rate_color,
            first_duration=first.time,
            first_duration_color=first.time.color(),
            average_duration=average,
            average_duration_color=average.color(),
        )


@dataclass(frozen=True)
class TabledResultEntry:
    """A summary prepared for display as a table row."""

    HEADERS = (
        "Server name",
        "IP address",
        "Last resolved IP",
        "Success rate",
        "First duration",
        "Average duration",
    )

    name: str
    ip: IpAddress
    last_resolved_ip: IpAddress
    successful_requests: str
    successful_requests_color: Color
    first_duration: TimeResult
    first_duration_color: Color
    average_duration: TimeResult
    average_duration_color: Color

    @classmethod
    def from_raw(cls, raw: RawResultEntry) -> TabledResultEntry:
        return cls(
            name=raw.name,
            ip=raw.ip,
            last_resolved_ip=raw.last_resolved_ip,
            successful_requests=(
                f"{raw.successful_requests}/{raw.total_requests} "
                f"({raw.successful_requests_percentage:.2f}%)"
            ),
            successful_requests_color=raw.successful_requests_color,
            first_duration=raw.first_duration,
            first_duration_color=raw.first_duration_color,
            average_duration=raw.average_duration,
            average_duration_color=raw.average_duration_color,
        )

    @property
    def cells(self) -> tuple[str, ...]:
        """The row's cell texts, in header order."""
        return (
            self.name,
            str(self.ip),
            str(self.last_resolved_ip),
            self.successful_requests,
            str(self.first_duration),
            str(self.average_duration),
        )

    @property
    def colors(self) -> dict[int, Color]:
        """Colours of the highlighted cells, keyed by column index."""
        return {
            3: self.successful_requests_color,
            4: self.first_duration_color,
            5: self.average_duration_color,
        }


def sort_result_entries(entries: Iterable[RawResultEntry]) -> list[RawResultEntry]:
    """Order by average duration, fastest first; failed averages go last.

    The order of equal entries is kept.
    """
    return sorted(
        entries,
        key=lambda entry: (
            entry.average_duration.nanos
            if entry.average_duration.nanos is not None
            else math.inf
        ),
    )