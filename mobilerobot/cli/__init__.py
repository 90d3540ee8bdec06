"""Command line interface for mobilerobot."""
