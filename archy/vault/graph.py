"""Knowledge graph construction from vault notes."""

from __future__ import annotations

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, NamedTuple

from ..models import LINK_TYPES, KnowledgeGraph, LinkType, Note, NoteLinks
from .inference import infer_bidirectional_links, transitive_reduction
from .parser import extract_note_links

logger = logging.getLogger(__name__)


class Edge(NamedTuple):
    source: str
    target: str
    type: LinkType


def read_note_links(note: Note) -> NoteLinks:
    """Extract links for one note, falling back to frontmatter when the body is unreadable."""
    try:
        body: str | None = note.read_text()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s, using frontmatter links only: %s", note.path, e)
        body = None
    return extract_note_links(note.name, note.frontmatter, body)


def build_graph(
    notes: Iterable[Note],
    *,
    infer: bool = True,
    reduce: bool = False,
    max_workers: int | None = None,
) -> KnowledgeGraph:
    """Build the name -> NoteLinks map for a collection of notes.

    Extraction is independent per note and runs in a thread pool; results are
    assembled in enumeration order, so a duplicated name keeps the last note.

    Args:
        notes: Notes to extract links from
        infer: Add inverse leadsto/dependson edges (in memory only)
        reduce: Drop leadsto edges implied by a longer leadsto path
        max_workers: Thread pool size (executor default when None)
    """
    notes = list(notes)
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        extracted = list(pool.map(read_note_links, notes))

    graph: KnowledgeGraph = {}
    for links in extracted:
        graph[links.name] = links

    if infer:
        graph = infer_bidirectional_links(graph)
    if reduce:
        graph = transitive_reduction(graph)
    return graph


def all_note_names(graph: KnowledgeGraph) -> list[str]:
    """All note names, sorted (autocomplete source)."""
    return sorted(graph)


def informed_by_index(graph: KnowledgeGraph) -> dict[str, list[str]]:
    """Invert informedby: target -> notes that declare informedby@target."""
    index: dict[str, list[str]] = defaultdict(list)
    for name, links in graph.items():
        for target in links.informedby:
            index[target].append(name)
    return dict(index)


def resolved_edges(graph: KnowledgeGraph) -> list[Edge]:
    """All edges whose target is a known note, in graph then kind order."""
    edges = []
    for name, links in graph.items():
        for kind, target in links.iter_links():
            if target in graph:
                edges.append(Edge(name, target, kind))
    return edges


def dangling_edges(graph: KnowledgeGraph) -> list[Edge]:
    """Edges pointing at names that are not in the graph."""
    edges = []
    for name, links in graph.items():
        for kind, target in links.iter_links():
            if target not in graph:
                edges.append(Edge(name, target, kind))
    return edges


def degree_counts(graph: KnowledgeGraph) -> dict[str, int]:
    """Total (in + out) degree per note, counting resolved edges only."""
    degree = {name: 0 for name in graph}
    for edge in resolved_edges(graph):
        degree[edge.source] += 1
        degree[edge.target] += 1
    return degree


def edge_counts(graph: KnowledgeGraph) -> dict[str, int]:
    """Number of declared targets per link type (dangling included)."""
    return {kind: sum(len(links.targets(kind)) for links in graph.values()) for kind in LINK_TYPES}
