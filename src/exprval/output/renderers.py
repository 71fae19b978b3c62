"""Operation-specific Rich renderers for ServiceResult.

Renderers write to a StringIO-backed Console and are dispatched by
``result.op`` in :func:`render_result`. Unknown ops fall through to a
generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from exprval.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from exprval.services.result import ServiceResult


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
    """Minimal output for ``--quiet``: names for listings, a status line otherwise."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "list_formats":
        return "\n".join(result.data.get("formats", []))
    if result.op == "list_predicates":
        return "\n".join(item["name"] for item in result.data.get("predicates", []))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "xv.ok"), (f"  {result.op}", "xv.op")))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    style = "xv.path" if key in ("path", "rules") else ""
    console.print(Text.assemble((f"  {key}: ", "xv.key"), (str(value), style)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block, including the telemetry span tree."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            _render_telemetry_tree(console, value, indent=4)
        else:
            console.print(Text(f"    {key}: {value}"))


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


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text.assemble(("ERROR", "xv.error"), (f"  {result.op}", "xv.op"), f" — {msg}"))
    if err is None:
        return

    detail = err.detail
    if detail.get("field"):
        _field(console, "field", detail["field"])
    if detail.get("kind") == "validation":
        rule = detail.get("rule", "")
        param = detail.get("param", "")
        console.print(
            Text.assemble(("  rule: ", "xv.key"), (f"{rule}={param}" if param else rule, "xv.rule"))
        )
    elif detail.get("kind") == "syntax" and detail.get("near"):
        console.print(Text.assemble(("  near: ", "xv.key"), (detail["near"], "xv.near")))

    if verbose:
        console.print(Text("  detail:", style="dim"))
        for key, value in detail.items():
            console.print(Text(f"    {key}: {value}"))
        _render_meta(console, result)


# ── Operation renderers ───────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check_document / check_record results."""
    _status_line(console, result)
    for key in ("path", "record", "rules", "expression"):
        value = result.data.get(key)
        if value is not None:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_explain(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the dive levels of an expression as an indented outline."""
    _status_line(console, result)
    _field(console, "expression", result.data.get("expression", ""))
    _render_levels(console, result.data.get("levels", []), indent=2)
    if verbose:
        _render_meta(console, result)


def _render_levels(console: Console, levels: list[dict[str, Any]], *, indent: int) -> None:
    prefix = " " * indent
    for level in levels:
        depth = level.get("depth", 0)
        label = "value" if depth == 0 else f"dive {depth}"
        groups = level.get("groups", [])
        if groups:
            rendered = " | ".join(" & ".join(group) for group in groups)
        else:
            rendered = "(no rules)"
        console.print(Text.assemble((f"{prefix}{label}: ", "xv.depth"), (rendered, "xv.rule")))
        if level.get("key"):
            console.print(Text(f"{prefix}  keys:", style="xv.depth"))
            _render_levels(console, level["key"], indent=indent + 4)


def _render_formats(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    formats = result.data.get("formats", [])
    console.print(Text(f"{len(formats)} formats", style="bold"))
    console.print(Text(", ".join(formats)))


def _render_predicates(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Rule", style="xv.rule", no_wrap=True)
    table.add_column("Description")
    for item in result.data.get("predicates", []):
        table.add_row(Text(item.get("name", "")), Text(item.get("description", "")))
    console.print(table)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "check_document": _render_check,
    "check_record": _render_check,
    "explain": _render_explain,
    "list_formats": _render_formats,
    "list_predicates": _render_predicates,
}
