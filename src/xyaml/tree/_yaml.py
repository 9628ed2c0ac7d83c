"""
YAML loader and dumper for xyaml documents.

Provides:
- TreeLoader: safe loader whose output is a plain tree of dicts, lists and scalars
- TreeDumper: safe dumper that never emits anchors or aliases
- parse / dump / dump_inline convenience functions

Both classes resolve plain scalars with the YAML 1.2 core schema, so
`on`, `yes`, `0755` and `1:30` stay strings and are written back
unchanged.

PyYAML constructs every alias as a reference to the anchored object, so
a loaded document may share nodes. parse() detaches the result into an
unshared tree, which lets a path mutation touch exactly one node:

    >>> doc = parse('''
    ... base: &base {port: 80}
    ... copy: *base
    ... ''')
    >>> doc["base"] is doc["copy"]
    False
"""

from __future__ import annotations

import re as _re
import typing as _typing

import yaml as _yaml

# Flow output for single values must stay on one line
_INLINE_WIDTH = 2**31 - 1

_DOCUMENT_END = "\n..."

# Detaching may build at most this many nodes per node of the loaded graph
_REPETITION_FACTOR = 100
_MIN_NODE_BUDGET = 1000

# (tag, pattern, first characters) of the YAML 1.2 core schema
_CORE_SCHEMA = (
    (
        "tag:yaml.org,2002:null",
        r"^(?:~|null|Null|NULL|)$",
        ["~", "n", "N", ""],
    ),
    (
        "tag:yaml.org,2002:bool",
        r"^(?:true|True|TRUE|false|False|FALSE)$",
        list("tTfF"),
    ),
    (
        "tag:yaml.org,2002:int",
        r"^(?:[-+]?(?:0|[1-9][0-9]*)|0o[0-7]+|0x[0-9a-fA-F]+)$",
        list("-+0123456789"),
    ),
    (
        "tag:yaml.org,2002:float",
        r"""^(?:[-+]?(?:\.[0-9]+(?:[eE][-+]?[0-9]+)?
                  |[0-9]+\.[0-9]*(?:[eE][-+]?[0-9]+)?
                  |[0-9]+[eE][-+]?[0-9]+)
               |[-+]?\.(?:inf|Inf|INF)
               |\.(?:nan|NaN|NAN))$""",
        list("-+0123456789."),
    ),
)


def _use_core_schema(cls: type) -> type:
    """Replace the inherited YAML 1.1 implicit resolvers of a loader or dumper."""
    cls.yaml_implicit_resolvers = {}
    for tag, pattern, first in _CORE_SCHEMA:
        cls.add_implicit_resolver(tag, _re.compile(pattern, _re.X), first)
    return cls


@_use_core_schema
class TreeLoader(_yaml.SafeLoader):
    """
    YAML loader for xyaml documents.

    SafeLoader construction with YAML 1.2 core-schema scalar resolution:
    only `true`/`false` (three casings) are booleans, integers are decimal,
    `0o` octal or `0x` hex, and there are no sexagesimal numbers,
    timestamps or merge keys. A decimal with a leading zero is a string.
    """

    pass


@_use_core_schema
class TreeDumper(_yaml.SafeDumper):
    """
    YAML dumper for xyaml documents.

    Quotes strings by the same core schema the loader applies, and writes
    no anchors or aliases, even for values that are the same object.
    """

    def ignore_aliases(self, data: _typing.Any) -> bool:  # noqa: ARG002 - required by Dumper API
        return True


class AliasError(ValueError):
    """Base for documents whose aliases cannot be expanded into a tree."""

    pass


class RecursiveDocumentError(AliasError):
    """Raised when a loaded document refers to itself through an alias."""

    pass


class RepetitionLimitError(AliasError):
    """Raised when expanding aliases would build too many nodes."""

    pass


class _NodeBudget:
    """Countdown of nodes that detaching may still build."""

    __slots__ = ("remaining",)

    def __init__(self, limit: int) -> None:
        self.remaining = limit

    def spend(self) -> None:
        self.remaining -= 1
        if self.remaining < 0:
            raise RepetitionLimitError("repetition limit exceeded while expanding aliases")


def _graph_size(value: _typing.Any) -> int:
    """Count the edges of a loaded graph, visiting each shared container once."""
    seen: set[int] = set()
    stack = [value]
    size = 1
    while stack:
        node = stack.pop()
        if not isinstance(node, (dict, list)) or id(node) in seen:
            continue
        seen.add(id(node))
        items = node.values() if isinstance(node, dict) else node
        for item in items:
            size += 1
            stack.append(item)
    return size


def _detach(value: _typing.Any, active: set[int], budget: _NodeBudget) -> _typing.Any:
    """
    Copy containers recursively so that no node is shared.

    Args:
        value: Loaded value.
        active: ids of the containers on the current descent path.
        budget: Nodes left to build before giving up.

    Raises:
        RecursiveDocumentError: If a container contains itself.
        RepetitionLimitError: If the copy outgrows the budget.
    """
    budget.spend()
    if not isinstance(value, (dict, list)):
        return value

    marker = id(value)
    if marker in active:
        raise RecursiveDocumentError("recursive document structures are not supported")
    active.add(marker)
    try:
        if isinstance(value, dict):
            return {key: _detach(item, active, budget) for key, item in value.items()}
        return [_detach(item, active, budget) for item in value]
    finally:
        active.discard(marker)


# =============================================================================
# Convenience Functions
# =============================================================================


def parse(stream: _typing.Any) -> _typing.Any:
    """
    Parse a single YAML document into an unshared tree.

    Args:
        stream: YAML content (string, bytes, or file-like object).

    Returns:
        The document value. Empty input yields None.

    Raises:
        yaml.YAMLError: If the YAML is malformed.
        RecursiveDocumentError: If the document contains itself.
        RepetitionLimitError: If aliases expand far beyond the document size.
    """
    loaded = _yaml.load(stream, Loader=TreeLoader)
    limit = max(_MIN_NODE_BUDGET, _REPETITION_FACTOR * _graph_size(loaded))
    return _detach(loaded, set(), _NodeBudget(limit))


def dump(
    value: _typing.Any,
    *,
    indent: int = 2,
    width: int = 80,
    allow_unicode: bool = True,
) -> str:
    """
    Serialize a tree as block-style YAML.

    Mapping order is preserved, never sorted.
    """
    return _yaml.dump(
        value,
        Dumper=TreeDumper,
        default_flow_style=False,
        sort_keys=False,
        indent=indent,
        width=width,
        allow_unicode=allow_unicode,
    )


def dump_inline(value: _typing.Any) -> str:
    """
    Serialize a value as single-line flow YAML.

    Trailing newline and document-end marker are trimmed, so `a` dumps
    as ``a`` and ``[0]`` as ``[0]``.
    """
    text = _yaml.dump(
        value,
        Dumper=TreeDumper,
        default_flow_style=True,
        sort_keys=False,
        width=_INLINE_WIDTH,
        allow_unicode=True,
    ).rstrip("\n")
    if text.endswith(_DOCUMENT_END):
        text = text[: -len(_DOCUMENT_END)].rstrip("\n")
    return text
