"""Tree command - folio and mindmap views rooted at one note."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console

from ..layout.tree import RootedLayout, build_rooted_layout
from ..models import KnowledgeGraph
from ..render.folio import to_markdown, to_rich_tree
from ..render.svg import render_mindmap_svg, wrap_html
from .graph_cmd import load_graph


def render_tree(layout: RootedLayout, *, fmt: str) -> str:
    """Render a rooted layout as md, json, svg or html text."""
    if fmt == "json":
        return json.dumps(layout.to_dict(), indent=2) + "\n"
    if fmt == "svg":
        return render_mindmap_svg(layout)
    if fmt == "html":
        return wrap_html(render_mindmap_svg(layout), title=f"Mindmap: {layout.root.name}")
    return to_markdown(layout)


def write_tree(
    graph: KnowledgeGraph,
    root: str,
    *,
    child_depth: int,
    parent_depth: int,
    fmt: str,
    out: Path | None,
    console: Console,
) -> None:
    layout = build_rooted_layout(graph, root, child_depth, parent_depth)

    if fmt == "rich":
        if out:
            rich_console = Console(record=True)
            rich_console.print(to_rich_tree(layout))
            out.write_text(rich_console.export_text(), encoding="utf-8")
            console.print(f"Wrote tree to {out}", style="green")
        else:
            Console().print(to_rich_tree(layout))
        return

    text = render_tree(layout, fmt=fmt)
    if out:
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote tree to {out}", style="green")
    else:
        print(text, end="" if text.endswith("\n") else "\n")


def run_tree(
    vault_path: Path,
    root: str,
    *,
    mode: str = "folio",
    child_depth: int = 4,
    parent_depth: int = 2,
    fmt: str | None = None,
    reduce: bool = False,
    out: Path | None = None,
) -> int:
    """Render the ancestor/descendant tree of root.

    mode picks the default format: folio -> rich text tree, mindmap -> svg.
    """
    console = Console(stderr=True)

    graph = load_graph(vault_path, infer=True, reduce=reduce)
    if root not in graph:
        console.print(f"[red]Note not found:[/red] {root}")
        return 1

    if fmt is None:
        fmt = "svg" if mode == "mindmap" else "rich"

    write_tree(
        graph,
        root,
        child_depth=child_depth,
        parent_depth=parent_depth,
        fmt=fmt,
        out=out,
        console=console,
    )
    return 0
