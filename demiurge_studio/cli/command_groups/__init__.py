"""Command group registration for the CLI."""
