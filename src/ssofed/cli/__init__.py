"""Command-line interface for ssofed."""
