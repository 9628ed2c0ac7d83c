"""
CLI module for xyaml.

Provides the command-line interface using Click.
"""

from xyaml.cli.main import cli, main

__all__ = ["main", "cli"]
