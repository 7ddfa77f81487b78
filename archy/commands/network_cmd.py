"""Network command - force-directed layout of the whole vault."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.progress import Progress

from ..layout.force import ForceConfig, ForceLayout, mount_force_layout
from ..render.svg import render_network_svg, wrap_html
from .graph_cmd import load_graph


def run_network(
    vault_path: Path,
    *,
    root: str | None = None,
    config: ForceConfig | None = None,
    fmt: str = "svg",
    out: Path | None = None,
    show_progress: bool = False,
) -> int:
    """Lay out every note with the force simulation and render the settled result.

    Only declared links are drawn; inferred inverse edges would double every
    leadsto/dependson pair.
    """
    console = Console(stderr=True)
    config = config or ForceConfig()

    graph = load_graph(vault_path, infer=False)
    if root is not None and root not in graph:
        console.print(f"[yellow]Root note not found, rendering without highlight:[/yellow] {root}")

    sim = mount_force_layout(graph, root_name=root, config=config)
    if show_progress:
        with Progress(console=console, transient=True) as progress:
            task = progress.add_task("Settling layout", total=config.max_ticks)

            def on_frame(layout: ForceLayout) -> None:
                progress.update(task, completed=layout.tick)

            sim.run(on_frame=on_frame)
    else:
        sim.run()

    title = f"Network: {vault_path.name}"
    if fmt == "json":
        text = json.dumps(sim.to_dict(), indent=2) + "\n"
    elif fmt == "html":
        text = wrap_html(render_network_svg(sim, title=title), title=title, viewport=sim.viewport_state())
    else:
        text = render_network_svg(sim, title=title)

    if out:
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote network ({len(sim.nodes)} notes, {sim.tick} ticks) to {out}", style="green")
    else:
        print(text, end="" if text.endswith("\n") else "\n")
    return 0
