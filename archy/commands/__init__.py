"""Command implementations behind the archy CLI."""
