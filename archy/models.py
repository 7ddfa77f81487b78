"""Data models for vault notes and their typed links."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Literal

# Relationship kinds between notes
LinkType = Literal[
    "leadsto",
    "dependson",
    "informedby",
]

LINK_TYPES: tuple[LinkType, ...] = ("leadsto", "dependson", "informedby")

# informedby is terminal context and has no inverse
INVERSE_LINK_TYPE: dict[str, LinkType] = {
    "leadsto": "dependson",
    "dependson": "leadsto",
}


@dataclass
class Note:
    """A markdown note as seen by the vault loader."""

    path: Path
    name: str  # filename without extension
    frontmatter: dict  # parsed YAML, empty when missing or unparseable

    def read_text(self) -> str:
        """Read the raw note text (frontmatter included).

        Raises OSError / UnicodeDecodeError when the file cannot be read.
        """
        return self.path.read_text(encoding="utf-8")


@dataclass
class NoteLinks:
    """Typed outgoing links of a single note.

    Each kind is an insertion-ordered set (dict keys), so duplicate targets
    collapse while output order stays deterministic.
    """

    name: str
    leadsto: dict[str, None] = field(default_factory=dict)
    dependson: dict[str, None] = field(default_factory=dict)
    informedby: dict[str, None] = field(default_factory=dict)

    def targets(self, kind: LinkType) -> dict[str, None]:
        return getattr(self, kind)

    def add(self, kind: LinkType, target: str) -> bool:
        """Add a target; returns False if it was already present."""
        targets = self.targets(kind)
        if target in targets:
            return False
        targets[target] = None
        return True

    def discard(self, kind: LinkType, target: str) -> None:
        self.targets(kind).pop(target, None)

    def iter_links(self) -> Iterator[tuple[LinkType, str]]:
        for kind in LINK_TYPES:
            for target in self.targets(kind):
                yield kind, target

    def copy(self) -> "NoteLinks":
        return NoteLinks(
            name=self.name,
            leadsto=dict(self.leadsto),
            dependson=dict(self.dependson),
            informedby=dict(self.informedby),
        )

    def to_dict(self) -> dict[str, list[str]]:
        return {kind: list(self.targets(kind)) for kind in LINK_TYPES}


# name -> links, rebuilt from the vault on every refresh
KnowledgeGraph = dict[str, NoteLinks]
