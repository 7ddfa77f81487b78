"""Write typed links into a note's frontmatter.

The note text is edited in place: the new entry is spliced into the raw
frontmatter lines, so comments, key order and quoting of everything else
stay exactly as the user wrote them. python-frontmatter is only used to
validate the block and to check for duplicates.
"""

import json
import logging
import re
from pathlib import Path

import frontmatter
import yaml

from ..errors import LinkInsertError
from ..models import LINK_TYPES
from .parser import normalize_link_values

logger = logging.getLogger(__name__)

PLAIN_SCALAR_PATTERN = re.compile(r"[\w][\w .\-/]*")

# value and optional trailing comment of a "key: value  # comment" line
KEY_VALUE_PATTERN = re.compile(r"(?P<value>.*?)(?P<comment>[ \t]+#.*)?$")


def yaml_item(target: str) -> str:
    """Plain scalar when YAML reads it back unchanged, double-quoted otherwise."""
    if PLAIN_SCALAR_PATTERN.fullmatch(target) and yaml.safe_load(target) == target:
        return target
    # A JSON string is a valid YAML double-quoted scalar
    return json.dumps(target, ensure_ascii=False)


def _split_frontmatter(path: Path, lines: list[str]) -> int:
    """Index of the closing --- line."""
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            return i
    raise LinkInsertError(f"Malformed frontmatter in {path.name}: no closing ---")


def _find_key(block: list[str], link_type: str) -> int | None:
    key = re.compile(rf"{link_type}:(?:\s|$)")
    for i, line in enumerate(block):
        if key.match(line):
            return i
    return None


def _is_list_line(line: str) -> bool:
    return line.startswith((" ", "\t", "- ")) or line.rstrip("\r\n") == "-"


def _insert_into_block(block: list[str], link_type: str, item: str) -> list[str]:
    key_idx = _find_key(block, link_type)
    if key_idx is None:
        return block + [f"{link_type}:\n", f"  - {item}\n"]

    key_line = block[key_idx].rstrip("\r\n")
    match = KEY_VALUE_PATTERN.match(key_line[len(link_type) + 1 :])
    value = match.group("value").strip()
    comment = match.group("comment") or ""

    if not value:
        # Block list (possibly empty): append after its last entry
        end = key_idx + 1
        while end < len(block) and _is_list_line(block[end]):
            end += 1
        indent = "  "
        if end > key_idx + 1:
            first = block[key_idx + 1]
            indent = first[: len(first) - len(first.lstrip())]
        return block[:end] + [f"{indent}- {item}\n"] + block[end:]

    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1].strip()
        items = f"{inner}, {item}" if inner else item
        return block[:key_idx] + [f"{link_type}: [{items}]{comment}\n"] + block[key_idx + 1 :]

    # Scalar: promote to a list, keeping the original value text as written
    return (
        block[:key_idx]
        + [f"{link_type}:{comment}\n", f"  - {value}\n", f"  - {item}\n"]
        + block[key_idx + 1 :]
    )


def add_frontmatter_link(path: Path, link_type: str, target: str) -> None:
    """Append target under the link_type key of the note's frontmatter.

    Creates the frontmatter block or the key when missing; a scalar value is
    promoted to a list. Raises LinkInsertError for an unknown link type, a
    blank target, unparseable frontmatter, or a target that is already listed.
    """
    if link_type not in LINK_TYPES:
        raise LinkInsertError(f"Unknown link type {link_type!r} (expected one of {', '.join(LINK_TYPES)})")
    target = target.strip()
    if not target:
        raise LinkInsertError("Link target must not be empty")

    text = path.read_text(encoding="utf-8")
    item = yaml_item(target)

    if not text.startswith("---"):
        path.write_text(f"---\n{link_type}:\n  - {item}\n---\n\n{text}", encoding="utf-8")
        logger.info("Added %s@%s to %s", link_type, target, path.stem)
        return

    lines = text.splitlines(keepends=True)
    close_idx = _split_frontmatter(path, lines)

    try:
        post = frontmatter.loads(text)
    except Exception as e:
        raise LinkInsertError(f"Malformed frontmatter in {path.name}: {e}") from e

    existing = normalize_link_values(post.metadata.get(link_type))
    if target in existing:
        raise LinkInsertError(f'"{target}" is already listed under {link_type}.')

    block = _insert_into_block(lines[1:close_idx], link_type, item)
    path.write_text("".join([lines[0], *block, *lines[close_idx:]]), encoding="utf-8")
    logger.info("Added %s@%s to %s", link_type, target, path.stem)
