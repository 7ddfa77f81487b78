"""Vault loading, link extraction and graph construction."""

from .loader import load_vault, Vault
from .parser import extract_inline_tags, extract_note_links, normalize_link_values
from .graph import build_graph, informed_by_index, resolved_edges
from .inference import infer_bidirectional_links, transitive_reduction

__all__ = [
    "load_vault",
    "Vault",
    "extract_inline_tags",
    "extract_note_links",
    "normalize_link_values",
    "build_graph",
    "informed_by_index",
    "resolved_edges",
    "infer_bidirectional_links",
    "transitive_reduction",
]
