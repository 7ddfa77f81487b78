"""Graph command - summarize the typed link graph of a vault."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..models import LINK_TYPES, KnowledgeGraph
from ..vault.graph import all_note_names, build_graph, dangling_edges, degree_counts, edge_counts
from ..vault.loader import load_vault


def load_graph(vault_path: Path, *, infer: bool = True, reduce: bool = False) -> KnowledgeGraph:
    """Load the vault and build its knowledge graph."""
    vault = load_vault(vault_path)
    return build_graph(vault.notes, infer=infer, reduce=reduce)


def run_graph(
    vault_path: Path,
    *,
    infer: bool = True,
    reduce: bool = False,
    fmt: str = "md",
    out: Path | None = None,
    top: int = 25,
) -> int:
    """Output a summary of the knowledge graph."""
    console = Console(stderr=True)

    graph = load_graph(vault_path, infer=infer, reduce=reduce)
    title = "Knowledge graph" + (" (inferred)" if infer else " (declared)") + (", reduced" if reduce else "")
    payload = _summarize_graph(graph, title=title, top=top)

    if fmt == "rich":
        if out:
            rich_console = Console(record=True)
            _print_rich(payload, console=rich_console)
            out.write_text(rich_console.export_text(), encoding="utf-8")
            console.print(f"Wrote graph output to {out}", style="green")
        else:
            _print_rich(payload, console=Console())
        return 0

    if fmt == "json":
        text = json.dumps(payload, indent=2, sort_keys=True) + "\n"
    else:
        text = _to_markdown(payload)

    if out:
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote graph output to {out}", style="green")
    else:
        print(text, end="" if text.endswith("\n") else "\n")

    return 0


def run_names(vault_path: Path) -> int:
    """Print every note name, one per line."""
    vault = load_vault(vault_path)
    for name in vault.names:
        print(name)
    return 0


def _summarize_graph(graph: KnowledgeGraph, *, title: str, top: int) -> dict:
    degree = degree_counts(graph)
    rows = [{"name": name, "degree": degree[name]} for name in all_note_names(graph)]
    rows.sort(key=lambda r: (-r["degree"], r["name"]))

    dangling = [
        {"source": e.source, "target": e.target, "type": e.type}
        for e in dangling_edges(graph)
    ]

    return {
        "title": title,
        "node_count": len(graph),
        "edge_counts": edge_counts(graph),
        "dangling": dangling,
        "top_degree": rows[: max(0, top)],
        "graph": {name: graph[name].to_dict() for name in all_note_names(graph)},
    }


def _to_markdown(payload: dict) -> str:
    lines: list[str] = []
    lines.append(f"## {payload['title']}")
    lines.append("")
    lines.append(f"- Nodes: {payload['node_count']}")
    for kind in LINK_TYPES:
        lines.append(f"- {kind}: {payload['edge_counts'][kind]}")
    lines.append(f"- Dangling: {len(payload['dangling'])}")
    lines.append("")

    lines.append("### Most connected")
    lines.append("")
    lines.append("| Note | Degree |")
    lines.append("|---|---:|")
    for r in payload["top_degree"]:
        lines.append(f"| {r['name']} | {r['degree']} |")
    lines.append("")

    if payload["dangling"]:
        lines.append("### Dangling links")
        lines.append("")
        lines.append("| Source | Type | Target |")
        lines.append("|---|---|---|")
        for d in payload["dangling"]:
            lines.append(f"| {d['source']} | {d['type']} | {d['target']} |")
        lines.append("")

    return "\n".join(lines)


def _print_rich(payload: dict, *, console: Console) -> None:
    console.print(f"[bold]{payload['title']}[/bold]")
    counts = "  ".join(f"{k}: {v}" for k, v in payload["edge_counts"].items())
    console.print(f"Nodes: {payload['node_count']}  {counts}")
    console.print()

    t = Table(title="Most connected")
    t.add_column("Note")
    t.add_column("Degree", justify="right")
    for r in payload["top_degree"]:
        t.add_row(r["name"], str(r["degree"]))
    console.print(t)

    if payload["dangling"]:
        console.print()
        d = Table(title="Dangling links")
        d.add_column("Source")
        d.add_column("Type")
        d.add_column("Target")
        for row in payload["dangling"]:
            d.add_row(row["source"], row["type"], row["target"])
        console.print(d)
