"""Command executors."""
