"""Command-line interface for weave-api."""
