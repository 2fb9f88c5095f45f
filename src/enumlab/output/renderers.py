"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console backed by StringIO. Renderers are
dispatched by ``result.op`` in :func:`render_result`; unknown ops fall
through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from enumlab.output.console import create_console, get_output, style_for_amount

if TYPE_CHECKING:
    from rich.console import Console

    from enumlab.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(
    result: ServiceResult,
    *,
    verbose: bool = False,
    width: int | None = None,
) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console(width=width)

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: one value or one name per line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    data = result.data
    if result.op == "replay":
        return str(data.get("remaining", ""))
    if result.op == "list":
        return "\n".join(str(item["name"]) for item in data.get("items", []))
    if result.op == "describe":
        entries = data.get("variants") or data.get("members") or []
        return "\n".join(str(e["name"]) for e in entries)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="enumlab.ok")
    op = Text(f"  {result.op}", style="enumlab.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="enumlab.key")
    style = "enumlab.variant" if key in ("variant", "state") else ""
    console.print(k, Text(str(value), style=style), end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block, including the telemetry span tree."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {escape(str(name))}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += escape(f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})")
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="enumlab.error")
    op = Text(f"  {result.op}", style="enumlab.op")
    console.print(label, op, Text(" — "), Text(msg))

    if not err:
        return
    suggestions = err.detail.get("suggestions")
    if suggestions:
        console.print(Text(f"  did you mean: {', '.join(suggestions)}"))
    if verbose and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            if k != "steps":
                console.print(Text(f"    {k}: {v}"))


# ── Account renderers ─────────────────────────────────────────────────


def _render_replay(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    _field(console, "state", data.get("state", ""))
    _field(console, "remaining", f"{data.get('remaining', 0)} {data.get('currency', '')}".rstrip())

    steps = data.get("steps") or []
    if verbose and steps:
        table = Table(show_header=True, pad_edge=False, expand=False)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Amount", justify="right")
        table.add_column("From")
        table.add_column("To", style="enumlab.variant")
        for step in steps:
            amount = int(step["amount"])
            table.add_row(
                str(step["step"]),
                Text(f"{amount:+d}", style=style_for_amount(amount)),
                Text(str(step["from"])),
                Text(str(step["to"])),
            )
        console.print(table)
    if verbose:
        _render_meta(console, result)


# ── Catalog renderers ─────────────────────────────────────────────────


def _render_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Name", style="bold")
    table.add_column("Kind")
    table.add_column("Cases", justify="right")
    table.add_column("Notes", style="dim")
    for item in result.data.get("items", []):
        notes: list[str] = []
        if item.get("params"):
            notes.append(f"generic[{', '.join(item['params'])}]")
        if item.get("recursive"):
            notes.append("recursive")
        table.add_row(item["name"], item["kind"], str(item["size"]), Text(" ".join(notes)))
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_describe(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    _status_line(console, result)
    heading = data["name"]
    if data.get("params"):
        heading += f"[{', '.join(data['params'])}]"
    console.print(Text(f"  {heading}", style="bold"), Text(f"  ({data['kind']})", style="dim"))
    if data.get("doc"):
        console.print(Text(f"  {data['doc']}"))
    if data.get("recursive"):
        _field(console, "recursive", "yes")
    if data.get("capabilities"):
        _field(console, "capabilities", ", ".join(data["capabilities"]))

    table = Table(show_header=True, pad_edge=False, expand=False)
    if data["kind"] == "union":
        table.add_column("Variant", style="enumlab.variant")
        table.add_column("Payload", style="enumlab.shape")
        table.add_column("Notes", style="dim")
        for v in data.get("variants", []):
            table.add_row(v["name"], Text(", ".join(v["fields"]) or "—"), Text(v.get("doc", "")))
    else:
        table.add_column("Member", style="enumlab.variant")
        table.add_column("Value")
        for m in data.get("members", []):
            table.add_row(m["name"], Text(str(m["value"])))
    console.print(table)
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "replay": _render_replay,
    "list": _render_list,
    "describe": _render_describe,
}
