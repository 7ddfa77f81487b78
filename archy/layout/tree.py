"""Rooted tree layout: descendants below the root, ancestors above it.

Horizontal placement gives every subtree a slot as wide as its children's
slots plus the gaps between them, and centres each node over its children,
so sibling subtrees never overlap.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Literal

from ..models import KnowledgeGraph, LinkType
from ..vault.graph import informed_by_index

NodeKind = LinkType | Literal["root", "parent"]

# Layout constants (px)
NODE_RADIUS = 14
SLOT_WIDTH = 54  # horizontal slot per leaf
SIBLING_GAP = 20  # gap between sibling slots
LEVEL_SPACING = 80  # vertical distance between level centres
PADDING = 40  # outer padding
LABEL_HEIGHT = 24


@dataclass
class TreeNode:
    name: str
    link_type: NodeKind
    depth: int = 0
    x: float = 0.0
    y: float = 0.0
    children: list[TreeNode] = field(default_factory=list)

    def walk(self) -> Iterator[TreeNode]:
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "link_type": self.link_type,
            "x": round(self.x, 2),
            "y": round(self.y, 2),
            "children": [c.to_dict() for c in self.children],
        }


@dataclass
class RootedLayout:
    """Placed root tree plus the ancestor forest above it."""

    root: TreeNode
    ancestors: list[TreeNode]
    width: float
    min_y: float
    max_y: float

    @property
    def height(self) -> float:
        return (self.max_y - self.min_y) + NODE_RADIUS * 2 + PADDING * 2 + LABEL_HEIGHT

    @property
    def offset_y(self) -> float:
        """Top of the drawing in layout coordinates."""
        return self.min_y - PADDING - NODE_RADIUS

    def walk(self) -> Iterator[TreeNode]:
        for ancestor in self.ancestors:
            yield from ancestor.walk()
        yield from self.root.walk()

    def to_dict(self) -> dict:
        return {
            "root": self.root.to_dict(),
            "ancestors": [a.to_dict() for a in self.ancestors],
            "width": self.width,
            "height": self.height,
        }


def build_descendant_tree(
    graph: KnowledgeGraph,
    name: str,
    *,
    max_depth: int,
    link_type: NodeKind = "root",
    depth: int = 0,
    visited: frozenset[str] = frozenset(),
) -> TreeNode:
    """Build the leadsto/informedby subtree below name.

    visited holds the names on the current path only, so siblings never
    suppress each other; a repeated name or max_depth ends the branch.
    """
    node = TreeNode(name=name, link_type=link_type, depth=depth)
    if depth >= max_depth or name in visited:
        return node

    links = graph.get(name)
    if links is None:
        return node

    seen = visited | {name}
    # dependson are parents, shown above the root, never as children
    for child in links.leadsto:
        node.children.append(
            build_descendant_tree(graph, child, max_depth=max_depth, link_type="leadsto", depth=depth + 1, visited=seen)
        )
    for child in links.informedby:
        node.children.append(
            build_descendant_tree(graph, child, max_depth=max_depth, link_type="informedby", depth=depth + 1, visited=seen)
        )
    return node


def build_ancestor_nodes(
    graph: KnowledgeGraph,
    name: str,
    *,
    depth: int,
    visited: frozenset[str],
    informed_by: dict[str, list[str]] | None = None,
) -> list[TreeNode]:
    """Build ancestors of name, nearest first.

    Two kinds of parents:
    - hierarchical: notes in name's dependson (link_type "parent")
    - context: notes that declare informedby@name (link_type "informedby")
    """
    if depth <= 0:
        return []
    if informed_by is None:
        informed_by = informed_by_index(graph)

    links = graph.get(name)
    hierarchical = list(links.dependson) if links is not None else []
    context = informed_by.get(name, [])

    parents: list[TreeNode] = []
    for parent_kind, names in (("parent", hierarchical), ("informedby", context)):
        for parent_name in names:
            if parent_name in visited:
                continue
            seen = visited | {parent_name}
            parents.append(
                TreeNode(
                    name=parent_name,
                    link_type=parent_kind,
                    children=build_ancestor_nodes(
                        graph, parent_name, depth=depth - 1, visited=seen, informed_by=informed_by
                    ),
                )
            )
    return parents


def slot_width(node: TreeNode) -> float:
    """Total horizontal slot required by node and all its descendants."""
    if not node.children:
        return SLOT_WIDTH
    return max(SLOT_WIDTH, band_width(node.children))


def band_width(nodes: list[TreeNode]) -> float:
    """Width of a row of sibling slots including the gaps between them."""
    if not nodes:
        return 0
    return sum(slot_width(n) for n in nodes) + (len(nodes) - 1) * SIBLING_GAP


def _layout_band(nodes: list[TreeNode], center_x: float, y: float, step: float) -> None:
    x = center_x - band_width(nodes) / 2
    for node in nodes:
        sw = slot_width(node)
        node.x = x + sw / 2
        node.y = y
        _layout_band(node.children, node.x, y + step, step)
        x += sw + SIBLING_GAP


def layout_down(children: list[TreeNode], parent_x: float, y: float) -> None:
    """Place children (and their subtrees) downward, centred under parent_x."""
    _layout_band(children, parent_x, y, LEVEL_SPACING)


def layout_up(children: list[TreeNode], parent_x: float, y: float) -> None:
    """Place ancestors upward, centred over parent_x."""
    _layout_band(children, parent_x, y, -LEVEL_SPACING)


def build_rooted_layout(
    graph: KnowledgeGraph,
    root: str,
    child_depth: int,
    parent_depth: int,
) -> RootedLayout:
    """Build and place the descendant tree and ancestor forest of root."""
    tree = build_descendant_tree(graph, root, max_depth=child_depth)
    ancestors = build_ancestor_nodes(graph, root, depth=parent_depth, visited=frozenset({root}))

    child_band = slot_width(tree)
    parent_band = band_width(ancestors)
    width = max(child_band, parent_band, SLOT_WIDTH) + PADDING * 2

    tree.x = width / 2
    tree.y = PADDING + (LEVEL_SPACING if ancestors else 0)
    layout_down(tree.children, tree.x, tree.y + LEVEL_SPACING)
    # Direct parents share one row above the root
    layout_up(ancestors, tree.x, tree.y - LEVEL_SPACING)

    ys = [n.y for a in ancestors for n in a.walk()] + [n.y for n in tree.walk()]
    return RootedLayout(root=tree, ancestors=ancestors, width=width, min_y=min(ys), max_y=max(ys))
