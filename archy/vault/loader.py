"""Vault loading: note enumeration and frontmatter cache."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import frontmatter

from ..models import Note

logger = logging.getLogger(__name__)


@dataclass
class Vault:
    """Container for all notes found in a vault directory."""

    path: Path
    notes: list[Note] = field(default_factory=list)

    # Lookup by note name (built after loading)
    _by_name: dict[str, Note] = field(default_factory=dict, repr=False)

    def _build_lookups(self) -> None:
        self._by_name = {}
        for note in self.notes:
            if note.name in self._by_name:
                logger.warning(
                    "Duplicate note name %r: %s shadows %s",
                    note.name,
                    note.path,
                    self._by_name[note.name].path,
                )
            self._by_name[note.name] = note

    def get(self, name: str) -> Note | None:
        """Get a note by name."""
        return self._by_name.get(name)

    @property
    def names(self) -> list[str]:
        return sorted(self._by_name)


def iter_markdown_files(vault_path: Path) -> list[Path]:
    """List markdown files under the vault, skipping hidden files and directories."""
    files = []
    for md_file in sorted(vault_path.rglob("*.md")):
        rel = md_file.relative_to(vault_path)
        if any(part.startswith(".") for part in rel.parts):
            continue
        files.append(md_file)
    return files


def load_note(path: Path) -> Note:
    """Load a note and its frontmatter.

    Unreadable or unparseable frontmatter yields an empty mapping so that a
    single broken note never aborts a vault load.
    """
    try:
        post = frontmatter.load(path)
        fm = dict(post.metadata)
    except Exception as e:
        logger.warning("Failed to read frontmatter of %s: %s", path, e)
        fm = {}

    return Note(path=path, name=path.stem, frontmatter=fm)


def load_vault(vault_path: Path) -> Vault:
    """Load all markdown notes from the vault.

    Args:
        vault_path: Path to the vault content directory

    Returns:
        Vault object with notes in path order
    """
    vault = Vault(path=vault_path)

    for md_file in iter_markdown_files(vault_path):
        vault.notes.append(load_note(md_file))

    vault._build_lookups()
    logger.debug("Loaded %d notes from %s", len(vault.notes), vault_path)

    return vault
