"""Bundled JSON content for hunterevo."""
