"""
Path resolution and in-place mutation.

Resolution is a single forward walk. Each hop records the segment's
canonical text in a cursor first, so an error can show how far the walk
got, including the segment that failed:

    >>> doc = Document({"a": {"b": [1, 2, 3]}})
    >>> update_value(doc, "[a, b, [1]]", "99")
    >>> doc.root
    {'a': {'b': [1, 99, 3]}}
    >>> update_value(doc, "[a, c]", "1")
    PathNotFoundError: No key `c`
      cursor=`['a', 'c']`
      path=`[a, c]`

Nodes are addressed through Slots (container + key) rather than by
reference, so the root itself can be replaced with the empty path.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import yaml as _yaml

import xyaml.errors as errors
import xyaml.tree._path as tree_path
import xyaml.tree._yaml as tree_yaml

_logger = _logging.getLogger(__name__)


class Document:
    """
    Mutable holder for a parsed YAML tree.

    The tree itself is plain Python data; the holder exists so that the
    root can be overwritten like any other node.
    """

    __slots__ = ("root",)

    def __init__(self, root: _typing.Any = None) -> None:
        self.root = root

    def __repr__(self) -> str:
        return f"Document({self.root!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Document):
            return bool(self.root == other.root)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]


@_dataclasses.dataclass(frozen=True, slots=True)
class Slot:
    """
    Location of one node: a container and the key or index within it.

    A Slot whose container is a Document addresses the document root.
    """

    container: _typing.Any
    key: _typing.Any = None

    def get(self) -> _typing.Any:
        """Read the node at this location."""
        if isinstance(self.container, Document):
            return self.container.root
        return self.container[self.key]

    def set(self, value: _typing.Any) -> None:
        """Overwrite the node at this location."""
        if isinstance(self.container, Document):
            self.container.root = value
        else:
            self.container[self.key] = value


_MISSING = object()


def _find_key(mapping: dict[_typing.Any, _typing.Any], segment: _typing.Any) -> _typing.Any:
    """
    Find the mapping key equal to segment.

    Equality is type-strict: YAML `1`, `1.0` and `true` are different
    keys even though Python considers them equal.

    Returns:
        The stored key, or _MISSING.
    """
    for key in mapping:
        if type(key) is type(segment) and key == segment:
            return key
    return _MISSING


def resolve(
    document: Document,
    segments: _typing.Sequence[_typing.Any],
    path: str,
) -> Slot:
    """
    Walk a document along decoded segments.

    Args:
        document: The document to walk.
        segments: Segments from decode_path().
        path: The original path text, for error messages.

    Returns:
        Slot of the addressed node.

    Raises:
        UnsupportedPathError: If a segment is a sequence of length != 1.
        PathNotFoundError: If a key or index does not resolve.
    """
    slot = Slot(document)
    cursor: list[str] = []

    for segment in segments:
        cursor.append(tree_path.segment_text(segment))
        current = slot.get()

        if isinstance(segment, list):
            if len(segment) != 1:
                raise errors.UnsupportedPathError(path, cursor)
            index = segment[0]
            if not tree_path.is_index_value(index):
                raise errors.PathNotFoundError(
                    f"Invalid sequence index `{tree_path.segment_text(index)}`", path, cursor
                )
            if not isinstance(current, list) or index >= len(current):
                raise errors.PathNotFoundError(f"No entry at index {index}", path, cursor)
            slot = Slot(current, index)
        else:
            key = _find_key(current, segment) if isinstance(current, dict) else _MISSING
            if key is _MISSING:
                raise errors.PathNotFoundError(f"No key `{cursor[-1]}`", path, cursor)
            slot = Slot(current, key)

    return slot


def parse_value(value: str, *, path: str | None = None, variable: str | None = None) -> _typing.Any:
    """
    Parse a replacement value as YAML.

    Raises:
        InvalidValueError: If the value is not valid YAML.
    """
    try:
        return tree_yaml.parse(value)
    except (_yaml.YAMLError, tree_yaml.AliasError) as e:
        raise errors.InvalidValueError(value, str(e), path=path, variable=variable) from e


def update_value(
    document: Document,
    path: str,
    new_value: str,
    require_null: bool = False,
) -> None:
    """
    Overwrite the node at path with new_value parsed as YAML.

    Nothing is modified unless every step succeeds.

    Args:
        document: The document to modify in place.
        path: Path specification in YAML sequence syntax.
        new_value: YAML text of the new value.
        require_null: Fail unless the node currently holds null.

    Raises:
        MalformedPathError: If path is not a YAML sequence.
        UnsupportedPathError: If a segment is a multi-element sequence.
        PathNotFoundError: If the path does not resolve.
        PreconditionFailedError: If require_null is set and the node is not null.
        InvalidValueError: If new_value is not valid YAML.
    """
    segments = tree_path.decode_path(path)
    slot = resolve(document, segments, path)

    current = slot.get()
    if require_null and current is not None:
        raise errors.PreconditionFailedError(
            path, [tree_path.segment_text(s) for s in segments], current
        )

    value = parse_value(new_value, path=path)
    slot.set(value)
    _logger.debug("Set %s to %r", path, value)
