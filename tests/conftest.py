"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Callable

import pytest

from archy.models import KnowledgeGraph, NoteLinks


def make_graph(notes: dict[str, dict[str, list[str]]]) -> KnowledgeGraph:
    """Build a graph from {name: {kind: [targets]}} without touching disk."""
    graph: KnowledgeGraph = {}
    for name, kinds in notes.items():
        links = NoteLinks(name=name)
        for kind, targets in kinds.items():
            for target in targets:
                links.add(kind, target)
        graph[name] = links
    return graph


def write_note(
    vault: Path,
    name: str,
    *,
    links: dict[str, list[str]] | None = None,
    body: str = "",
    folder: str = "",
) -> Path:
    """Write a markdown note with link arrays in its frontmatter."""
    directory = vault / folder if folder else vault
    directory.mkdir(parents=True, exist_ok=True)
    lines = []
    if links:
        lines.append("---")
        for kind, targets in links.items():
            lines.append(f"{kind}:")
            lines.extend(f'  - "{t}"' for t in targets)
        lines.append("---")
        lines.append("")
    lines.append(f"# {name}")
    lines.append("")
    lines.append(body)
    lines.append("")
    path = directory / f"{name}.md"
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


@pytest.fixture
def vault_path(tmp_path: Path) -> Path:
    """An empty vault content directory."""
    vault = tmp_path / "content"
    vault.mkdir()
    return vault


@pytest.fixture
def sample_vault(vault_path: Path) -> Path:
    """A small vault mixing frontmatter arrays and inline tags.

    idea -> plan -> launch (leadsto), idea informedby research,
    review dependson launch, and a dangling link to "someday".
    """
    write_note(vault_path, "idea", links={"leadsto": ["plan"]}, body="Background: !@research")
    write_note(vault_path, "plan", body="Next: >@launch and leadsto@someday")
    write_note(vault_path, "launch")
    write_note(vault_path, "research", folder="sources")
    write_note(vault_path, "review", links={"dependson": ["launch"]})
    return vault_path


@pytest.fixture
def graph_factory() -> Callable[[dict], KnowledgeGraph]:
    return make_graph
