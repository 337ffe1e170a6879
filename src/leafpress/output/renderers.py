"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`; unknown
ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from leafpress.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from leafpress.services.result import ServiceResult

Renderer = Callable[..., None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    if result.op == "list_collections":
        return "\n".join(row["name"] for row in result.data.get("collections", []))
    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(_extract_key(item) for item in items if _extract_key(item))
    if result.op == "lookup":
        return str(result.data.get("url", ""))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_key(item: Any) -> str:
    if isinstance(item, dict):
        for key in ("slug", "objectID"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="leaf.ok"), Text(f"  {result.op}", style="leaf.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="leaf.key")
    if key == "slug":
        v = Text(str(value), style="leaf.slug")
    elif key in ("url", "input_path", "output", "output_dir", "search_export"):
        v = Text(str(value), style="leaf.path")
    elif key == "title":
        v = Text(str(value), style="leaf.title")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v)


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the telemetry span tree (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _item_table(items: list[dict[str, Any]], *, verbose: bool = False) -> Table:
    """Build a Rich Table for a list of content item summaries."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Slug", style="leaf.slug", no_wrap=True)
    table.add_column("Title", style="leaf.title")
    table.add_column("Date")
    table.add_column("URL", style="leaf.path")
    if verbose:
        table.add_column("Source", style="dim")

    for item in items:
        slug = str(item.get("slug", item.get("objectID", "")))
        if item.get("draft"):
            slug += " (draft)"
        row = [
            slug,
            str(item.get("title", "")),
            str(item.get("date", ""))[:10],
            str(item.get("url", "")),
        ]
        if verbose:
            row.append(str(item.get("input_path", "")))
        table.add_row(*row)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="leaf.error"),
        Text(f"  {result.op}{code}", style="leaf.op"),
        Text(f"  {msg}"),
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("output_dir", "page_count", "skipped", "search_records", "search_export"):
        if d.get(key) is not None:
            _field(console, key, d[key])
    if d.get("copied_files"):
        _field(console, "copied_files", d["copied_files"])
    if verbose:
        _render_meta(console, result)


def _render_collections(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Collection", style="leaf.title")
    table.add_column("Items", style="leaf.count", justify="right")
    for row in result.data.get("collections", []):
        table.add_row(str(row["name"]), str(row["count"]))
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_collection(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "name", result.data.get("name"))
    _field(console, "count", result.data.get("count", 0))
    items = result.data.get("items", [])
    if items:
        console.print(_item_table(items, verbose=verbose))
    if verbose:
        _render_meta(console, result)


def _render_lookup(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("slug", "title", "url", "date", "language", "tags", "draft", "input_path"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "count", d.get("count", 0))
    _field(console, "env", d.get("env"))
    if "output" in d:
        _field(console, "output", d["output"])
    elif d.get("records"):
        console.print(_item_table(d["records"], verbose=False))
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Renderer] = {
    "build": _render_build,
    "list_collections": _render_collections,
    "show_collection": _render_collection,
    "lookup": _render_lookup,
    "export_search": _render_export,
}
