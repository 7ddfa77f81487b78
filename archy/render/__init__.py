"""Renderers for folio, mindmap and network views."""
