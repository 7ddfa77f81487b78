import pytest

from archy.layout.tree import (
    LEVEL_SPACING,
    PADDING,
    SIBLING_GAP,
    SLOT_WIDTH,
    TreeNode,
    build_ancestor_nodes,
    build_descendant_tree,
    build_rooted_layout,
    slot_width,
)
from archy.vault.inference import infer_bidirectional_links


def _names(node: TreeNode) -> list[str]:
    return [n.name for n in node.walk()]


def test_diamond_siblings_do_not_suppress_each_other(graph_factory) -> None:
    graph = graph_factory(
        {
            "A": {"leadsto": ["B", "C"]},
            "B": {"leadsto": ["D"]},
            "C": {"leadsto": ["D"]},
            "D": {},
        }
    )
    tree = build_descendant_tree(graph, "A", max_depth=4)

    assert _names(tree) == ["A", "B", "D", "C", "D"]


def test_cycle_ends_branch(graph_factory) -> None:
    graph = graph_factory({"A": {"leadsto": ["B"]}, "B": {"leadsto": ["A"]}})
    tree = build_descendant_tree(graph, "A", max_depth=8)

    assert _names(tree) == ["A", "B", "A"]
    assert tree.children[0].children[0].children == []


def test_depth_bound(graph_factory) -> None:
    graph = graph_factory({c: {"leadsto": [chr(ord(c) + 1)]} for c in "ABCDE"})
    tree = build_descendant_tree(graph, "A", max_depth=2)

    assert _names(tree) == ["A", "B", "C"]
    assert max(n.depth for n in tree.walk()) == 2


def test_children_are_leadsto_then_informedby(graph_factory) -> None:
    graph = graph_factory({"A": {"informedby": ["Z"], "leadsto": ["B"], "dependson": ["P"]}, "B": {}, "Z": {}, "P": {}})
    tree = build_descendant_tree(graph, "A", max_depth=4)

    assert [(c.name, c.link_type) for c in tree.children] == [("B", "leadsto"), ("Z", "informedby")]


def test_ancestors_include_dependson_and_informedby_context(graph_factory) -> None:
    graph = graph_factory(
        {
            "C": {"dependson": ["B"]},
            "B": {"dependson": ["A"]},
            "A": {},
            "Z": {"informedby": ["C"]},
        }
    )
    parents = build_ancestor_nodes(graph, "C", depth=2, visited=frozenset({"C"}))

    assert [(p.name, p.link_type) for p in parents] == [("B", "parent"), ("Z", "informedby")]
    assert [(g.name, g.link_type) for g in parents[0].children] == [("A", "parent")]

    shallow = build_ancestor_nodes(graph, "C", depth=1, visited=frozenset({"C"}))
    assert all(p.children == [] for p in shallow)


def test_ancestors_skip_visited(graph_factory) -> None:
    graph = graph_factory({"A": {"dependson": ["B"]}, "B": {"dependson": ["A"]}})
    parents = build_ancestor_nodes(graph, "A", depth=6, visited=frozenset({"A"}))

    assert [p.name for p in parents] == ["B"]
    assert parents[0].children == []


def test_slot_width() -> None:
    leaf = TreeNode("leaf", "leadsto")
    assert slot_width(leaf) == SLOT_WIDTH

    parent = TreeNode("p", "root", children=[TreeNode("a", "leadsto"), TreeNode("b", "leadsto")])
    assert slot_width(parent) == 2 * SLOT_WIDTH + SIBLING_GAP


def _assert_no_sibling_overlap(node: TreeNode) -> None:
    spans = [(c.x - slot_width(c) / 2, c.x + slot_width(c) / 2) for c in node.children]
    for (_, right), (left, _) in zip(spans, spans[1:]):
        assert right + SIBLING_GAP <= left + 1e-9
    if node.children:
        # Parent is centred over its children's combined span
        assert node.x == pytest.approx((spans[0][0] + spans[-1][1]) / 2)
    for child in node.children:
        _assert_no_sibling_overlap(child)


def test_rooted_layout_has_no_overlapping_siblings(graph_factory) -> None:
    graph = infer_bidirectional_links(
        graph_factory(
            {
                "root": {"leadsto": ["a", "b", "c"], "dependson": ["p1", "p2"]},
                "a": {"leadsto": ["a1", "a2", "a3"]},
                "a2": {"leadsto": ["x", "y"]},
                "b": {"informedby": ["src"]},
                "c": {"leadsto": ["c1"]},
                "p1": {"dependson": ["g1", "g2"]},
                "a1": {}, "a3": {}, "x": {}, "y": {}, "c1": {}, "src": {}, "p2": {}, "g1": {}, "g2": {},
            }
        )
    )
    layout = build_rooted_layout(graph, "root", child_depth=4, parent_depth=2)

    _assert_no_sibling_overlap(layout.root)
    for ancestor in layout.ancestors:
        _assert_no_sibling_overlap(ancestor)

    for node in layout.walk():
        assert PADDING <= node.x <= layout.width - PADDING


def test_rooted_layout_vertical_levels(graph_factory) -> None:
    graph = infer_bidirectional_links(
        graph_factory({"gp": {"leadsto": ["p"]}, "p": {"leadsto": ["root"]}, "root": {"leadsto": ["kid"]}, "kid": {}})
    )
    layout = build_rooted_layout(graph, "root", child_depth=4, parent_depth=2)

    root = layout.root
    assert root.y == PADDING + LEVEL_SPACING
    assert root.children[0].y == root.y + LEVEL_SPACING
    (parent,) = layout.ancestors
    assert parent.name == "p"
    assert parent.y == root.y - LEVEL_SPACING
    assert parent.children[0].name == "gp"
    assert parent.children[0].y == root.y - 2 * LEVEL_SPACING
    assert layout.min_y == root.y - 2 * LEVEL_SPACING
    assert layout.max_y == root.y + LEVEL_SPACING


def test_rooted_layout_is_deterministic(graph_factory) -> None:
    notes = {"r": {"leadsto": ["a", "b"]}, "a": {"leadsto": ["c"]}, "b": {}, "c": {}}
    first = build_rooted_layout(graph_factory(notes), "r", 4, 2).to_dict()
    second = build_rooted_layout(graph_factory(notes), "r", 4, 2).to_dict()

    assert first == second


def test_unknown_root_yields_single_node(graph_factory) -> None:
    layout = build_rooted_layout(graph_factory({"a": {}}), "missing", 4, 2)

    assert layout.root.children == []
    assert layout.ancestors == []
    assert layout.width == SLOT_WIDTH + 2 * PADDING
    assert layout.root.y == PADDING
