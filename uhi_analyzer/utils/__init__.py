"""Presentation helpers shared by the CLI and any results view."""
