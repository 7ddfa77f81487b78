"""Folio view: the rooted layout as an indented text tree."""

from __future__ import annotations

from rich.text import Text
from rich.tree import Tree

from ..layout.tree import RootedLayout, TreeNode

ICONS = {
    "leadsto": "→",
    "dependson": "↑",
    "parent": "↑",
    "informedby": "◎",
}

STYLES = {
    "leadsto": "green",
    "dependson": "blue",
    "parent": "blue",
    "informedby": "yellow",
    "root": "bold magenta",
}


def _label(node: TreeNode) -> Text:
    text = Text()
    icon = ICONS.get(node.link_type)
    if icon:
        text.append(f"{icon} ", style=STYLES.get(node.link_type, ""))
    text.append(node.name, style="bold" if node.link_type == "root" else "")
    return text


def _add_children(branch: Tree, node: TreeNode) -> None:
    for child in node.children:
        _add_children(branch.add(_label(child)), child)


def to_rich_tree(layout: RootedLayout) -> Tree:
    """Ancestors first (nearest at the top level), then the root and its descendants."""
    tree = Tree(Text(f"◆ {layout.root.name}", style=STYLES["root"]), guide_style="dim")
    if layout.ancestors:
        parents = tree.add(Text("ancestors", style="dim italic"))
        for ancestor in layout.ancestors:
            _add_children(parents.add(_label(ancestor)), ancestor)
    _add_children(tree, layout.root)
    return tree


def _md_lines(node: TreeNode, level: int, lines: list[str]) -> None:
    icon = ICONS.get(node.link_type, "")
    prefix = f"{icon} " if icon else ""
    lines.append(f"{'  ' * level}- {prefix}{node.name}")
    for child in node.children:
        _md_lines(child, level + 1, lines)


def to_markdown(layout: RootedLayout) -> str:
    lines: list[str] = [f"## {layout.root.name}", ""]
    if layout.ancestors:
        lines.append("### Ancestors")
        lines.append("")
        for ancestor in layout.ancestors:
            _md_lines(ancestor, 0, lines)
        lines.append("")
    lines.append("### Descendants")
    lines.append("")
    if layout.root.children:
        for child in layout.root.children:
            _md_lines(child, 0, lines)
    else:
        lines.append("- None")
    lines.append("")
    return "\n".join(lines)
