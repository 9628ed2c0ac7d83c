"""
Shared constants for xyaml.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Placeholder delimiters
DEFAULT_PLACEHOLDER_OPEN = "{{"
"""Text that opens a placeholder token, as in ``{{NAME}}``."""

DEFAULT_PLACEHOLDER_CLOSE = "}}"
"""Text that closes a placeholder token."""

# Serializer defaults
DEFAULT_INDENT = 2
"""Indentation of block-style YAML output."""

DEFAULT_WIDTH = 80
"""Preferred line width of YAML output."""

# Process exit codes
EXIT_FAILURE = 1
"""Exit code for any reported xyaml error."""
