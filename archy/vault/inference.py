"""Graph transforms: bidirectional inference and transitive reduction.

Both passes are pure: they return a new graph and leave their input alone.
Every decision is made against a snapshot of the input taken before any
write, so edges added or removed while processing one note never feed back
into the same pass.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from ..models import KnowledgeGraph

logger = logging.getLogger(__name__)


def copy_graph(graph: KnowledgeGraph) -> KnowledgeGraph:
    return {name: links.copy() for name, links in graph.items()}


def infer_bidirectional_links(graph: KnowledgeGraph) -> KnowledgeGraph:
    """Add inverse edges in memory (never written back to notes).

    Rule A: A leadsto B   -> B dependson A
    Rule B: A dependson B -> B leadsto A

    Targets missing from the graph are skipped. informedby has no inverse
    and is left untouched. Running the pass twice adds nothing new.
    """
    snapshot = [
        (name, tuple(links.leadsto), tuple(links.dependson))
        for name, links in graph.items()
    ]
    result = copy_graph(graph)

    added = 0
    for name, leadsto, dependson in snapshot:
        for child in leadsto:
            child_links = result.get(child)
            if child_links is not None and child_links.add("dependson", name):
                added += 1
        for parent in dependson:
            parent_links = result.get(parent)
            if parent_links is not None and parent_links.add("leadsto", name):
                added += 1

    logger.debug("Inferred %d inverse edges", added)
    return result


def is_reachable(
    leadsto: Mapping[str, Sequence[str]],
    start: str,
    goal: str,
    origin: str,
) -> bool:
    """Depth-first search for goal along leadsto edges, starting at start.

    The visited set is seeded with origin so a cycle cannot walk back into
    the note whose edges are being reduced.
    """
    if start == goal:
        return True
    visited = {origin}
    stack = [start]
    while stack:
        node = stack.pop()
        if node in visited:
            continue
        visited.add(node)
        for nxt in leadsto.get(node, ()):
            if nxt == goal:
                return True
            if nxt not in visited:
                stack.append(nxt)
    return False


def transitive_reduction(graph: KnowledgeGraph) -> KnowledgeGraph:
    """Remove leadsto edges already implied by a longer leadsto path.

    A -> C is dropped when another direct target B of A reaches C. The
    matching inferred back edge (A in C.dependson) is dropped with it.
    Reachability is always checked against the unreduced snapshot.

    In a cycle two edges can each be judged redundant because of the other,
    so a target may end up unreachable: with A and B leading to each other
    and both leading to C, both edges into C are dropped. Acyclic graphs
    keep their reachability.
    """
    snapshot: dict[str, tuple[str, ...]] = {
        name: tuple(links.leadsto) for name, links in graph.items()
    }
    result = copy_graph(graph)

    removed = 0
    for name, targets in snapshot.items():
        if len(targets) < 2:
            continue
        for target in targets:
            redundant = any(
                other != target and is_reachable(snapshot, other, target, origin=name)
                for other in targets
            )
            if not redundant:
                continue
            result[name].discard("leadsto", target)
            target_links = result.get(target)
            if target_links is not None:
                target_links.discard("dependson", name)
            removed += 1

    logger.debug("Transitive reduction removed %d leadsto edges", removed)
    return result
