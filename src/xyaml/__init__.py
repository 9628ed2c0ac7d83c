"""
xyaml - YAML configuration transformer

Rewrites values at YAML paths, substitutes environment placeholders,
and optionally runs a command with the result in place.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("xyaml")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "xyaml Contributors"

from xyaml.config import Settings  # noqa: E402
from xyaml.errors import XyamlError  # noqa: E402

__all__ = ["__version__", "__version_info__", "Settings", "XyamlError"]
