"""Parsing utilities for typed links in frontmatter and inline tags."""

import re
from typing import Any, NamedTuple

from ..models import LINK_TYPES, LinkType, NoteLinks

# Match leadsto@target, dependson@target, informedby@target and the
# shorthands >@target, <@target, !@target. Targets are either a run of
# word/hyphen characters or a double-quoted string that may hold spaces.
# Groups: [1] keyword | [2] shorthand | [3] quoted target | [4] bare target
INLINE_TAG_PATTERN = re.compile(
    r"""(?:\b(leadsto|dependson|informedby)|([><!]))@(?:"([^"\n]*)"|([\w\-]+))"""
)

SHORTHAND_LINK_TYPES: dict[str, LinkType] = {
    ">": "leadsto",
    "<": "dependson",
    "!": "informedby",
}

# Leading --- ... --- metadata block
FRONTMATTER_PATTERN = re.compile(r"\A---.*?---\n?", re.DOTALL)

# Match [[target]], [[target|display]], [[target#section]]
WIKILINK_PATTERN = re.compile(r"^\[\[([^\]|#]+)(?:#[^\]|]+)?(?:\|[^\]]+)?\]\]$")


class InlineTag(NamedTuple):
    link_type: LinkType
    target: str
    start: int
    end: int


def strip_frontmatter(text: str) -> str:
    """Remove a leading frontmatter block, if present."""
    if not text.startswith("---"):
        return text
    return FRONTMATTER_PATTERN.sub("", text, count=1)


def resolve_tag_match(match: re.Match) -> tuple[LinkType, str] | None:
    """Resolve link type and target from a pattern match.

    Returns None when either part is missing; partial tags are common in
    free-form prose and are not errors.
    """
    keyword, shorthand, quoted, bare = match.groups()
    link_type = keyword or SHORTHAND_LINK_TYPES.get(shorthand or "")
    target = (quoted if quoted is not None else bare) or ""
    target = target.strip()
    if not link_type or not target:
        return None
    return link_type, target


def extract_inline_tags(text: str) -> list[InlineTag]:
    """Return every resolvable inline tag in text, in document order."""
    tags = []
    for match in INLINE_TAG_PATTERN.finditer(text):
        resolved = resolve_tag_match(match)
        if resolved is None:
            continue
        link_type, target = resolved
        tags.append(InlineTag(link_type, target, match.start(), match.end()))
    return tags


def _unwrap_wikilink(value: str) -> str:
    match = WIKILINK_PATTERN.match(value)
    return match.group(1).strip() if match else value


def normalize_link_values(value: Any) -> list[str]:
    """Normalize a frontmatter value to a list of link targets.

    Handles:
    - missing / empty -> []
    - scalar -> [str(value)]
    - list -> each element stringified, blanks dropped
    - "[[target]]" wiki-link strings -> "target"
    """
    if value is None or value == "" or value == []:
        return []
    if isinstance(value, (list, tuple, set)):
        items = list(value)
    else:
        items = [value]

    result = []
    for item in items:
        if item is None:
            continue
        text = _unwrap_wikilink(str(item).strip())
        if text:
            result.append(text)
    return result


def extract_note_links(name: str, metadata: dict, body: str | None) -> NoteLinks:
    """Merge frontmatter link arrays and inline body tags into NoteLinks.

    Args:
        name: Note identifier
        metadata: Parsed frontmatter
        body: Raw note text, or None when it could not be read (only
            frontmatter links are returned then)
    """
    links = NoteLinks(name=name)
    for kind in LINK_TYPES:
        for target in normalize_link_values(metadata.get(kind)):
            links.add(kind, target)

    if body is not None:
        for tag in extract_inline_tags(strip_frontmatter(body)):
            links.add(tag.link_type, tag.target)

    return links
