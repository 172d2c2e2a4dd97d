"""Command-line interface for valuediff."""
