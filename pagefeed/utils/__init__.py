"""Shared utilities: errors, logging, validation."""
