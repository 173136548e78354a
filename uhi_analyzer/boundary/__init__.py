"""Circular analysis boundary: derivation, user edits and outline geometry."""
