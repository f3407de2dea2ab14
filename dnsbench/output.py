"""Rendering benchmark results as JSON, XML, CSV or a text table."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from dnsbench.args import Style
from dnsbench.result import (
    Color,
    RawResultEntry,
    TabledResultEntry,
    TimeResult,
    format_f32,
)

_NANOS_PER_SEC = 1_000_000_000

CSV_HEADERS = (
    "name",
    "ip",
    "last_resolved_ip",
    "total_requests",
    "successful_requests",
    "successful_requests_percentage",
    "first_duration_value_ms",
    "first_duration_error",
    "average_duration_value_ms",
    "average_duration_error",
)


class _Number(str):
    """Number text written into JSON as is."""


def _float_text(value: float) -> str:
    """A single-precision float as a serialiser writes it: ``66.66667``, ``100.0``."""
    text = format_f32(value)
    if text in {"NaN", "inf", "-inf"}:
        return text
    if "." not in text:
        text += ".0"
    return text


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def _json_time(time: TimeResult) -> dict[str, Any]:
    if time.nanos is None:
        return {"failed": time.error or ""}
    secs, nanos = divmod(time.nanos, _NANOS_PER_SEC)
    return {"succeeded": {"secs": secs, "nanos": nanos}}


def _json_entry(entry: RawResultEntry) -> dict[str, Any]:
    percentage = entry.successful_requests_percentage
    return {
        "name": entry.name,
        "ip": str(entry.ip),
        "last_resolved_ip": str(entry.last_resolved_ip),
        "total_requests": entry.total_requests,
        "successful_requests": entry.successful_requests,
        "successful_requests_percentage": (
            _Number(_float_text(percentage))
            if _float_text(percentage) not in {"NaN", "inf", "-inf"}
            else None
        ),
        "first_duration": _json_time(entry.first_duration),
        "average_duration": _json_time(entry.average_duration),
    }


def _dump(value: Any, level: int) -> str:
    inner = "  " * (level + 1)
    outer = "  " * level
    if isinstance(value, _Number):
        return str(value)
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, dict):
        if not value:
            return "{}"
        items = ",\n".join(
            f"{inner}{json.dumps(key, ensure_ascii=False)}: {_dump(item, level + 1)}"
            for key, item in value.items()
        )
        return "{\n" + items + "\n" + outer + "}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        items = ",\n".join(f"{inner}{_dump(item, level + 1)}" for item in value)
        return "[\n" + items + "\n" + outer + "]"
    raise TypeError(f"cannot serialise {type(value).__name__} to JSON")


def to_json(entries: Iterable[RawResultEntry]) -> str:
    """Pretty-printed JSON array of the result entries."""
    return _dump([_json_entry(entry) for entry in entries], 0)


# ---------------------------------------------------------------------------
# XML
# ---------------------------------------------------------------------------

_XML_ESCAPES = str.maketrans(
    {"&": "&amp;", "<": "&lt;", ">": "&gt;", "'": "&apos;", '"': "&quot;"}
)


def _escape(text: str) -> str:
    return text.translate(_XML_ESCAPES)


def _element(tag: str, content: str, attributes: dict[str, str] | None = None) -> str:
    attrs = "".join(
        f' {key}="{_escape(value)}"' for key, value in (attributes or {}).items()
    )
    return f"<{tag}{attrs}>{content}</{tag}>"


def _xml_entry(entry: RawResultEntry) -> str:
    requests = "".join(
        (
            _element("TotalRequests", _escape(str(entry.total_requests))),
            _element("SuccessfulRequests", _escape(str(entry.successful_requests))),
            _element(
                "SuccessfulRequestsPercentage",
                _escape(format_f32(entry.successful_requests_percentage)),
            ),
        )
    )
    parts = (
        _element("Name", _escape(entry.name)),
        _element("Ip", _escape(str(entry.ip))),
        _element("LastResolvedIp", _escape(str(entry.last_resolved_ip))),
        _element("SuccessfulRequests", requests),
        _element(
            "FirstDuration",
            _escape(str(entry.first_duration)),
            {"type": entry.first_duration.xml_type()},
        ),
        _element(
            "AverageDuration",
            _escape(str(entry.average_duration)),
            {"type": entry.average_duration.xml_type()},
        ),
    )
    return _element("ResultEntry", "".join(parts))


def to_xml(entries: Iterable[RawResultEntry]) -> str:
    """Compact XML document holding the result entries."""
    return _element("DnsBenchResultEntries", "".join(_xml_entry(e) for e in entries))


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


def _csv_row(entry: RawResultEntry) -> tuple[str, ...]:
    return (
        entry.name,
        str(entry.ip),
        str(entry.last_resolved_ip),
        str(entry.total_requests),
        str(entry.successful_requests),
        _float_text(entry.successful_requests_percentage),
        entry.first_duration.duration_millis() or "",
        entry.first_duration.error or "" if entry.first_duration.is_failed else "",
        entry.average_duration.duration_millis() or "",
        entry.average_duration.error or "" if entry.average_duration.is_failed else "",
    )


def to_csv(entries: Iterable[RawResultEntry]) -> str:
    """CSV text with a header row; empty when there are no entries."""
    rows = [_csv_row(entry) for entry in entries]
    if not rows:
        return ""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(rows)
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Line:
    """A horizontal rule: left corner, fill, column joint, right corner."""

    left: str | None
    fill: str
    joint: str | None
    right: str | None


@dataclass(frozen=True)
class _TableStyle:
    top: _Line | None = None
    header: _Line | None = None
    between_rows: _Line | None = None
    bottom: _Line | None = None
    left: str | None = None
    vertical: str | None = None
    right: str | None = None


def _boxed(top: str, middle: str, bottom: str, fill: str, side: str, all_rows: bool) -> _TableStyle:
    top_line = _Line(top[0], fill, top[1], top[2])
    mid_line = _Line(middle[0], fill, middle[1], middle[2])
    return _TableStyle(
        top=top_line,
        header=mid_line,
        between_rows=mid_line if all_rows else None,
        bottom=_Line(bottom[0], fill, bottom[1], bottom[2]),
        left=side,
        vertical=side,
        right=side,
    )


_RST_LINE = _Line(None, "=", " ", None)
_DOTS_MIDDLE = _Line(":", ".", ":", ":")

_STYLES: dict[Style, _TableStyle] = {
    Style.EMPTY: _TableStyle(),
    Style.BLANK: _TableStyle(vertical=" "),
    Style.ASCII: _boxed("+++", "+++", "+++", "-", "|", True),
    Style.PSQL: _TableStyle(header=_Line(None, "-", "+", None), vertical="|"),
    Style.MARKDOWN: _TableStyle(
        header=_Line("|", "-", "|", "|"), left="|", vertical="|", right="|"
    ),
    Style.MODERN: _boxed("┌┬┐", "├┼┤", "└┴┘", "─", "│", True),
    Style.SHARP: _boxed("┌┬┐", "├┼┤", "└┴┘", "─", "│", False),
    Style.ROUNDED: _boxed("╭┬╮", "├┼┤", "╰┴╯", "─", "│", False),
    Style.MODERN_ROUNDED: _boxed("╭┬╮", "├┼┤", "╰┴╯", "─", "│", True),
    Style.EXTENDED: _boxed("╔╦╗", "╠╬╣", "╚╩╝", "═", "║", True),
    Style.DOTS: _TableStyle(
        top=_Line(".", ".", ".", "."),
        header=_DOTS_MIDDLE,
        between_rows=_DOTS_MIDDLE,
        bottom=_Line(":", ".", ":", ":"),
        left=":",
        vertical=":",
        right=":",
    ),
    Style.RE_STRUCTURED_TEXT: _TableStyle(
        top=_RST_LINE, header=_RST_LINE, bottom=_RST_LINE, vertical=" "
    ),
    Style.ASCII_ROUNDED: _TableStyle(
        top=_Line(".", "-", "-", "."),
        bottom=_Line("'", "-", "-", "'"),
        left="|",
        vertical="|",
        right="|",
    ),
}


def _rule(line: _Line, widths: Sequence[int]) -> str:
    joint = line.joint or ""
    body = joint.join(line.fill * (width + 2) for width in widths)
    return f"{line.left or ''}{body}{line.right or ''}"


def _row(
    cells: Sequence[str],
    widths: Sequence[int],
    style: _TableStyle,
    colors: dict[int, Color] | None = None,
) -> str:
    rendered = []
    for index, (cell, width) in enumerate(zip(cells, widths)):
        text = cell
        if colors and index in colors:
            text = colors[index].paint(cell)
        rendered.append(f" {text}{' ' * (width - len(cell))} ")
    body = (style.vertical or "").join(rendered)
    return f"{style.left or ''}{body}{style.right or ''}"


def render_table(entries: Iterable[RawResultEntry], style: Style) -> str:
    """Render the entries as a text table in ``style``, with coloured cells."""
    table_style = _STYLES[style]
    rows = [TabledResultEntry.from_raw(entry) for entry in entries]
    headers = TabledResultEntry.HEADERS
    widths = [len(header) for header in headers]
    for row in rows:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row.cells)]

    lines: list[str] = []
    if table_style.top is not None:
        lines.append(_rule(table_style.top, widths))
    lines.append(_row(headers, widths, table_style))
    for position, row in enumerate(rows):
        separator = table_style.header if position == 0 else table_style.between_rows
        if separator is not None:
            lines.append(_rule(separator, widths))
        lines.append(_row(row.cells, widths, table_style, row.colors))
    if table_style.bottom is not None:
        lines.append(_rule(table_style.bottom, widths))
    return "\n".join(lines)