"""
Configuration module for xyaml.

Uses pydantic-settings for environment variable loading.
"""

from xyaml.config.settings import Settings

__all__ = ["Settings"]
