"""Link command - add a typed link to a note's frontmatter."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from ..errors import LinkInsertError
from ..vault.editor import add_frontmatter_link
from ..vault.loader import load_vault


def run_link(vault_path: Path, note: str, link_type: str, target: str) -> int:
    """Insert link_type@target into note; warns (but still writes) when target is unknown."""
    console = Console(stderr=True)

    vault = load_vault(vault_path)
    source = vault.get(note)
    if source is None:
        raise LinkInsertError(f"Note not found: {note}")
    if vault.get(target.strip()) is None:
        console.print(f"[yellow]Target is not a note in this vault yet:[/yellow] {target}")

    add_frontmatter_link(source.path, link_type, target)
    console.print(f'Added {link_type}@{target} to "{note}"', style="green")
    return 0
