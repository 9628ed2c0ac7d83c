"""
Path decoding for xyaml.

A path is written in YAML sequence syntax. Each element is one hop:

    [server, port]          # mapping keys
    [servers, [0], host]    # [N] indexes a sequence
    [ports, 8080]           # non-string keys are matched as parsed

A one-element sequence holding a non-negative integer is an index
segment. Every other value is a key segment, except sequences of other
shapes, which the resolver rejects.
"""

from __future__ import annotations

import typing as _typing

import yaml as _yaml

import xyaml.errors as errors
import xyaml.tree._yaml as tree_yaml


def decode_path(path: str) -> list[_typing.Any]:
    """
    Decode a path specification into its segments.

    Args:
        path: YAML text that must decode to a sequence.

    Returns:
        The segments in order. An empty list addresses the document root.

    Raises:
        MalformedPathError: If the text is not YAML or not a sequence.
    """
    try:
        segments = tree_yaml.parse(path)
    except (_yaml.YAMLError, tree_yaml.AliasError) as e:
        raise errors.MalformedPathError(path, str(e)) from e

    if not isinstance(segments, list):
        raise errors.MalformedPathError(path)
    return segments


def segment_text(segment: _typing.Any) -> str:
    """Canonical single-line form of a segment, used in error cursors."""
    return tree_yaml.dump_inline(segment)


def is_index_value(value: _typing.Any) -> bool:
    """Check if a value can be used as a sequence index (bool excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
