"""
Path addressing, mutation and substitution for YAML trees.

Example:
    >>> from xyaml.tree import Document, update_value
    >>> doc = Document(parse("{a: {b: [1, 2, 3]}}"))
    >>> update_value(doc, "[a, b, [1]]", "99")
    >>> doc.root
    {'a': {'b': [1, 99, 3]}}
"""

from xyaml.tree._path import decode_path, is_index_value, segment_text
from xyaml.tree._resolver import Document, Slot, parse_value, resolve, update_value
from xyaml.tree._substitute import placeholder, placeholder_table, substitute_env
from xyaml.tree._yaml import (
    AliasError,
    RecursiveDocumentError,
    RepetitionLimitError,
    TreeDumper,
    TreeLoader,
    dump,
    dump_inline,
    parse,
)

__all__ = [
    "AliasError",
    "Document",
    "RecursiveDocumentError",
    "RepetitionLimitError",
    "Slot",
    "TreeDumper",
    "TreeLoader",
    "decode_path",
    "dump",
    "dump_inline",
    "is_index_value",
    "parse",
    "parse_value",
    "placeholder",
    "placeholder_table",
    "resolve",
    "segment_text",
    "substitute_env",
    "update_value",
]
