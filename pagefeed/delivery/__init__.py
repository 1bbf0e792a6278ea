"""Presentation helpers for generated feeds."""
