"""Command-line interface."""

from budgetbuddy.presentation.cli.app import app, cli

__all__ = ["app", "cli"]
