"""Output formatting for the CLI."""
