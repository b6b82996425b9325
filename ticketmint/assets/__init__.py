"""Bundled fonts for ticket rendering."""
