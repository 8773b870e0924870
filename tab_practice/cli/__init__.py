"""Command-line interface for tab_practice."""

from .main import cli

__all__ = ["cli"]
