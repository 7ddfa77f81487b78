from pathlib import Path

import frontmatter
import pytest

from archy.errors import LinkInsertError
from archy.vault.editor import add_frontmatter_link, yaml_item

from conftest import write_note


def test_creates_frontmatter_when_missing(vault_path: Path) -> None:
    path = vault_path / "plain.md"
    path.write_text("# Plain\n\nJust text with >@inline.\n", encoding="utf-8")

    add_frontmatter_link(path, "leadsto", "next")

    post = frontmatter.load(path)
    assert post.metadata == {"leadsto": ["next"]}
    assert "Just text with >@inline." in post.content
    assert path.read_text(encoding="utf-8").endswith("\n")


def test_appends_to_existing_list_and_keeps_other_keys(vault_path: Path) -> None:
    path = vault_path / "note.md"
    path.write_text("---\ntitle: Note\ndependson:\n  - base\n---\n\nBody stays.\n", encoding="utf-8")

    add_frontmatter_link(path, "dependson", "  second  ")

    post = frontmatter.load(path)
    assert post.metadata["dependson"] == ["base", "second"]
    assert post.metadata["title"] == "Note"
    assert post.content.strip() == "Body stays."


def test_scalar_value_is_promoted_to_list(vault_path: Path) -> None:
    path = vault_path / "note.md"
    path.write_text("---\ninformedby: paper\n---\nbody\n", encoding="utf-8")

    add_frontmatter_link(path, "informedby", "book")

    assert frontmatter.load(path).metadata["informedby"] == ["paper", "book"]


def test_duplicate_target_is_rejected_and_file_untouched(vault_path: Path) -> None:
    path = write_note(vault_path, "idea", links={"leadsto": ["plan"]})
    before = path.read_text(encoding="utf-8")

    with pytest.raises(LinkInsertError, match='"plan" is already listed under leadsto'):
        add_frontmatter_link(path, "leadsto", "plan")

    assert path.read_text(encoding="utf-8") == before


def test_same_target_under_another_type_is_allowed(vault_path: Path) -> None:
    path = write_note(vault_path, "idea", links={"leadsto": ["plan"]})

    add_frontmatter_link(path, "informedby", "plan")

    metadata = frontmatter.load(path).metadata
    assert metadata["leadsto"] == ["plan"]
    assert metadata["informedby"] == ["plan"]


@pytest.mark.parametrize(("link_type", "target"), [("parent", "x"), ("leadsto", "   ")])
def test_invalid_arguments_are_rejected(vault_path: Path, link_type: str, target: str) -> None:
    path = write_note(vault_path, "idea")

    with pytest.raises(LinkInsertError):
        add_frontmatter_link(path, link_type, target)


def test_malformed_frontmatter_is_reported(vault_path: Path) -> None:
    path = vault_path / "bad.md"
    path.write_text("---\nleadsto: [unclosed\n---\nbody\n", encoding="utf-8")

    with pytest.raises(LinkInsertError, match="Malformed frontmatter"):
        add_frontmatter_link(path, "leadsto", "x")


def test_insert_leaves_the_rest_of_the_frontmatter_untouched(vault_path: Path) -> None:
    path = vault_path / "idea.md"
    path.write_text(
        '---\ntitle: Idea\n# keep me\nleadsto:\n  - "[[plan]]"\naliases: [x]\n---\n\nBody.\n',
        encoding="utf-8",
    )

    add_frontmatter_link(path, "leadsto", "next")

    assert path.read_text(encoding="utf-8") == (
        '---\ntitle: Idea\n# keep me\nleadsto:\n  - "[[plan]]"\n  - next\naliases: [x]\n---\n\nBody.\n'
    )


def test_wiki_link_entry_counts_as_duplicate(vault_path: Path) -> None:
    path = vault_path / "idea.md"
    path.write_text('---\nleadsto:\n  - "[[plan]]"\n---\n', encoding="utf-8")

    with pytest.raises(LinkInsertError, match="already listed"):
        add_frontmatter_link(path, "leadsto", "plan")


def test_new_key_is_appended_before_closing_line(vault_path: Path) -> None:
    path = vault_path / "idea.md"
    path.write_text("---\ntitle: Idea  # shown in lists\n---\nBody.\n", encoding="utf-8")

    add_frontmatter_link(path, "informedby", "paper 2")

    assert path.read_text(encoding="utf-8") == (
        "---\ntitle: Idea  # shown in lists\ninformedby:\n  - paper 2\n---\nBody.\n"
    )


def test_flow_list_keeps_its_style_and_comment(vault_path: Path) -> None:
    path = vault_path / "idea.md"
    path.write_text('---\nleadsto: [a, "[[b]]"]  # refs\ntags: [x]\n---\n', encoding="utf-8")

    add_frontmatter_link(path, "leadsto", "c")

    assert path.read_text(encoding="utf-8") == '---\nleadsto: [a, "[[b]]", c]  # refs\ntags: [x]\n---\n'
    assert frontmatter.load(path).metadata["leadsto"] == ["a", "[[b]]", "c"]


def test_scalar_promotion_keeps_raw_value(vault_path: Path) -> None:
    path = vault_path / "idea.md"
    path.write_text('---\ndependson: "[[base]]"\n---\n', encoding="utf-8")

    add_frontmatter_link(path, "dependson", "other")

    assert path.read_text(encoding="utf-8") == '---\ndependson:\n  - "[[base]]"\n  - other\n---\n'


def test_unindented_block_list_keeps_its_indent(vault_path: Path) -> None:
    path = vault_path / "idea.md"
    path.write_text("---\nleadsto:\n- a\ntitle: Idea\n---\n", encoding="utf-8")

    add_frontmatter_link(path, "leadsto", "b")

    assert path.read_text(encoding="utf-8") == "---\nleadsto:\n- a\n- b\ntitle: Idea\n---\n"


def test_unclosed_frontmatter_is_reported(vault_path: Path) -> None:
    path = vault_path / "bad.md"
    path.write_text("---\ntitle: never closed\n\nBody.\n", encoding="utf-8")

    with pytest.raises(LinkInsertError, match="Malformed frontmatter"):
        add_frontmatter_link(path, "leadsto", "x")
    assert path.read_text(encoding="utf-8") == "---\ntitle: never closed\n\nBody.\n"


def test_yaml_item_quotes_only_when_needed() -> None:
    assert yaml_item("new idea") == "new idea"
    assert yaml_item("[[x]]") == '"[[x]]"'
    assert yaml_item("yes") == '"yes"'
    assert yaml_item("2024") == '"2024"'
    assert yaml_item("a: b") == '"a: b"'
