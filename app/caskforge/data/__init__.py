"""Bundled recipe files."""
