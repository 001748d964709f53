"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from sdui.output.console import create_console, get_output, style_for_severity

if TYPE_CHECKING:
    from rich.console import Console

    from sdui.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
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
        return f"ERROR: {result.op} — {msg}"

    if result.op == "resolve":
        tree = result.data.get("tree")
        if isinstance(tree, dict):
            return "\n".join(_walk_ids(tree))

    issues = result.data.get("issues")
    if issues and isinstance(issues, list):
        return "\n".join(str(i.get("node_id", "")) for i in issues if isinstance(i, dict))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _walk_ids(node: dict[str, Any]) -> list[str]:
    ids = [str(node.get("id", ""))]
    for children in (node.get("children") or {}).values():
        for child in children:
            ids.extend(_walk_ids(child))
    for item in node.get("items") or []:
        ids.extend(_walk_ids(item))
    return ids


def _format_value(value: Any) -> Text:
    if value is None:
        return Text("absent", style="sdui.absent")
    if isinstance(value, str):
        return Text(_json.dumps(value), style="sdui.value")
    return Text(_json.dumps(value, separators=(",", ":")), style="sdui.value")


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    console.print(Text("OK", style="sdui.ok"), Text(f"  {result.op}", style="sdui.op"), sep="")


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="sdui.key")
    if key in ("id", "root") or key.endswith("_id"):
        v = Text(str(value), style="sdui.id")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _render_warnings(console: Console, result: ServiceResult) -> None:
    for warning in result.warnings:
        console.print(Text("  warning: ", style="sdui.warning"), Text(warning), sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {v}"))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="sdui.error")
    op = Text(f"  {result.op}", style="sdui.op")
    console.print(label, op, Text(" — "), Text(msg), sep="")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Resolve ───────────────────────────────────────────────────────────


def _node_label(node: dict[str, Any]) -> Text:
    return Text.assemble(
        (str(node.get("id", "?")), "sdui.id"),
        " ",
        (str(node.get("type", "?")), "sdui.type"),
    )


def _build_tree(branch: Tree, node: dict[str, Any]) -> None:
    children: dict[str, list[dict[str, Any]]] = node.get("children") or {}
    for prop, value in (node.get("properties") or {}).items():
        if prop in children:
            continue
        branch.add(Text.assemble((f"{prop}: ", "sdui.prop"), _format_value(value)))
    for prop, nodes in children.items():
        group = branch.add(Text(prop, style="sdui.prop"))
        for child in nodes:
            _build_tree(group.add(_node_label(child)), child)
    items = node.get("items") or []
    if items:
        group = branch.add(Text(f"items ({len(items)})", style="sdui.prop"))
        for item in items:
            _build_tree(group.add(_node_label(item)), item)


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the resolved layout as a tree of nodes and property values."""
    d = result.data
    _status_line(console, result)
    _field(console, "root", d.get("root", ""))
    _field(console, "nodes", d.get("node_count", 0))
    _render_warnings(console, result)

    tree_data = d.get("tree")
    if isinstance(tree_data, dict):
        tree = Tree(_node_label(tree_data))
        _build_tree(tree, tree_data)
        console.print()
        console.print(tree)

    if verbose:
        _render_meta(console, result)


# ── Patch ─────────────────────────────────────────────────────────────


def _render_patch(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render apply_state / apply_layout reports."""
    d = result.data
    _status_line(console, result)
    for key in ("applied", "skipped", "version", "node_count", "output"):
        if key in d:
            _field(console, key, d[key])

    diagnostics = d.get("diagnostics") or []
    if diagnostics:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Code", style="sdui.warning", no_wrap=True)
        table.add_column("Message")
        for diag in diagnostics:
            table.add_row(Text(str(diag.get("code", ""))), Text(str(diag.get("message", ""))))
        console.print(table)

    packet = d.get("packet")
    if packet is not None:
        console.print()
        console.print(Text(_json.dumps(packet, indent=2)))


# ── Check ─────────────────────────────────────────────────────────────


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check results with issues grouped by category."""
    issues = result.data.get("issues", [])
    count = result.data.get("count", len(issues))

    if count == 0:
        console.print(Text("OK", style="sdui.ok"), Text("  No issues found."), sep="")
        return

    by_category: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        by_category.setdefault(str(issue.get("category", "unknown")), []).append(issue)

    for cat, cat_issues in by_category.items():
        console.print()
        console.print(Text(cat, style="bold"))
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Severity", no_wrap=True)
        table.add_column("Node", style="sdui.id", no_wrap=True)
        table.add_column("Message")
        for issue in cat_issues:
            sev = str(issue.get("severity", "warning"))
            table.add_row(
                Text(sev, style=style_for_severity(sev)),
                Text(str(issue.get("node_id", ""))),
                Text(str(issue.get("message", ""))),
            )
        console.print(table)

    errors = sum(1 for i in issues if i.get("severity") == "error")
    console.print(f"\n{errors} errors, {count - errors} warnings")


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "resolve": _render_resolve,
    "apply_state": _render_patch,
    "apply_layout": _render_patch,
    "check": _render_check,
}
