"""Exceptions raised at the edges of archy (settings, vault edits)."""


class ArchyError(Exception):
    """Base class for archy errors surfaced to the CLI."""


class ConfigError(ArchyError):
    """Invalid settings file or layout option."""


class LinkInsertError(ArchyError):
    """A typed link could not be written into a note's frontmatter."""
