"""CLI entrypoint for archy."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import load_settings
from .errors import ArchyError
from .layout.force import ForceConfig
from .models import LINK_TYPES


def _auto_detect_vault(start: Path) -> Path | None:
    """Find a ./content vault folder by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if p.is_dir() and p.name.lower() == "content":
            return p
        candidate = p / "content"
        if candidate.is_dir():
            return candidate
    return None


class ArchyGroup(click.Group):
    """Click group that reports ArchyError as a clean CLI error."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except ArchyError as e:
            raise click.ClickException(str(e)) from e


@click.group(cls=ArchyGroup)
@click.version_option(__version__, prog_name="archy")
@click.option(
    "--vault",
    "-v",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Path to vault content directory (defaults to auto-detected ./content)",
)
@click.option("--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, vault: Path | None, verbose: bool) -> None:
    """archy - typed knowledge graph over a markdown vault.

    Notes link to each other with frontmatter arrays (leadsto, dependson,
    informedby) or inline tags such as leadsto@note, >@note, <@note, !@note.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    if vault is None:
        detected = _auto_detect_vault(Path.cwd())
        if detected is None:
            raise click.ClickException("Vault not found. Pass --vault /path/to/content or run from inside the repo.")
        vault = detected

    if not vault.exists() or not vault.is_dir():
        raise click.BadParameter(f"Directory '{vault}' does not exist.", param_hint="--vault / -v")

    ctx.obj["vault"] = vault.resolve()
    ctx.obj["settings"] = load_settings(ctx.obj["vault"])


@cli.command()
@click.option(
    "--infer/--no-infer",
    default=True,
    show_default=True,
    help="Add inverse leadsto/dependson links (in memory only)",
)
@click.option("--reduce", is_flag=True, help="Drop leadsto links implied by a longer leadsto path")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "md", "json"]),
    default="md",
    show_default=True,
    help="Output format",
)
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write output to a file")
@click.option("--top", type=int, default=25, show_default=True, help="How many notes to show in the top list")
@click.pass_context
def graph(ctx: click.Context, infer: bool, reduce: bool, fmt: str, out: Path | None, top: int) -> None:
    """Summarize the typed link graph."""
    from .commands.graph_cmd import run_graph

    sys.exit(run_graph(ctx.obj["vault"], infer=infer, reduce=reduce, fmt=fmt, out=out, top=top))


@cli.command()
@click.argument("root")
@click.option(
    "--mode",
    type=click.Choice(["folio", "mindmap"]),
    default=None,
    help="Folio (text tree) or mindmap (SVG); defaults to the settings view_mode",
)
@click.option("--child-depth", type=click.IntRange(1, 8), default=None, help="Levels of children to show")
@click.option("--parent-depth", type=click.IntRange(1, 6), default=None, help="Levels of ancestors to show")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "md", "json", "svg", "html"]),
    default=None,
    help="Output format (defaults to rich for folio, svg for mindmap)",
)
@click.option("--reduce", is_flag=True, help="Drop leadsto links implied by a longer leadsto path")
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write output to a file")
@click.pass_context
def tree(
    ctx: click.Context,
    root: str,
    mode: str | None,
    child_depth: int | None,
    parent_depth: int | None,
    fmt: str | None,
    reduce: bool,
    out: Path | None,
) -> None:
    """Show ancestors and descendants of ROOT.

    Examples:

        archy tree "my note"

        archy tree idea --mode mindmap --format html --out idea.html
    """
    from .commands.tree_cmd import run_tree

    settings = ctx.obj["settings"]
    if mode is None:
        mode = settings.view_mode if settings.view_mode in ("folio", "mindmap") else "folio"

    sys.exit(
        run_tree(
            ctx.obj["vault"],
            root,
            mode=mode,
            child_depth=child_depth or settings.max_depth,
            parent_depth=parent_depth or settings.parent_depth,
            fmt=fmt,
            reduce=reduce,
            out=out,
        )
    )


@cli.command()
@click.option("--root", type=str, default=None, help="Note to highlight")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["svg", "html", "json"]),
    default="svg",
    show_default=True,
    help="Output format",
)
@click.option("--max-ticks", type=click.IntRange(min=0), default=None, help="Simulation ticks before settling")
@click.option("--seed", type=int, default=None, help="Seed for the initial jitter (reproducible layouts)")
@click.option("--progress/--no-progress", default=False, help="Show a progress bar while settling")
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write output to a file")
@click.pass_context
def network(
    ctx: click.Context,
    root: str | None,
    fmt: str,
    max_ticks: int | None,
    seed: int | None,
    progress: bool,
    out: Path | None,
) -> None:
    """Force-directed layout of every note."""
    from dataclasses import replace

    from .commands.network_cmd import run_network

    config: ForceConfig = ctx.obj["settings"].force
    if max_ticks is not None:
        config = replace(config, max_ticks=max_ticks)
    if seed is not None:
        config = replace(config, seed=seed)

    sys.exit(run_network(ctx.obj["vault"], root=root, config=config, fmt=fmt, out=out, show_progress=progress))


@cli.command()
@click.argument("note")
@click.argument("link_type", metavar="TYPE", type=click.Choice(list(LINK_TYPES)))
@click.argument("target")
@click.pass_context
def link(ctx: click.Context, note: str, link_type: str, target: str) -> None:
    """Add TYPE@TARGET to NOTE's frontmatter.

    Examples:

        archy link idea leadsto "next step"
    """
    from .commands.link_cmd import run_link

    sys.exit(run_link(ctx.obj["vault"], note, link_type, target))


@cli.command()
@click.pass_context
def names(ctx: click.Context) -> None:
    """List every note name."""
    from .commands.graph_cmd import run_names

    sys.exit(run_names(ctx.obj["vault"]))


@cli.command()
@click.argument("root")
@click.option("--mode", type=click.Choice(["folio", "mindmap"]), default="mindmap", show_default=True)
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="File to rewrite on each change")
@click.pass_context
def watch(ctx: click.Context, root: str, mode: str, out: Path | None) -> None:
    """Re-render ROOT's tree whenever a note changes."""
    from .commands.watch_cmd import run_watch

    settings = ctx.obj["settings"]
    run_watch(
        ctx.obj["vault"],
        root,
        mode=mode,
        child_depth=settings.max_depth,
        parent_depth=settings.parent_depth,
        out=out,
    )


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
