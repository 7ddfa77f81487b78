"""Watch command - re-render a note's tree whenever the vault changes."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.console import Console

from ..watcher import run_watch_loop
from .graph_cmd import load_graph
from .tree_cmd import write_tree


def run_watch(
    vault_path: Path,
    root: str,
    *,
    mode: str = "mindmap",
    child_depth: int = 4,
    parent_depth: int = 2,
    out: Path | None = None,
) -> None:
    """
    Rebuild the graph and re-render root's tree after every change.

    This is a blocking command that runs until interrupted (Ctrl+C).
    """
    console = Console(stderr=True)
    fmt = "svg" if mode == "mindmap" else "rich"
    if out is not None and out.suffix.lower() == ".html":
        fmt = "html"

    refreshes = 0

    def refresh(changed: set[Path] | None = None) -> None:
        nonlocal refreshes
        graph = load_graph(vault_path, infer=True)
        if root not in graph:
            console.print(f"[yellow]Note not found:[/yellow] {root}")
            return
        write_tree(
            graph,
            root,
            child_depth=child_depth,
            parent_depth=parent_depth,
            fmt=fmt,
            out=out,
            console=console,
        )
        refreshes += 1
        if changed:
            timestamp = datetime.now().strftime("%H:%M:%S")
            names = ", ".join(sorted(p.stem for p in changed))
            console.print(f"[dim]{timestamp}[/dim] refreshed after changes to {names}")

    console.print(f"[bold]Watching[/bold] {vault_path}")
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    refresh()

    run_watch_loop(vault_path, refresh)
    console.print()
    console.print(f"[bold]Stopped.[/bold] Rendered {refreshes} time(s).")
