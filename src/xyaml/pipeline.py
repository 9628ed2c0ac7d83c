"""
Document transformation pipeline.

Flow:
1. Read the input (file or stdin)
2. Parse it into a Document
3. Apply replacements strictly in the order given
4. Substitute environment placeholders (always after all replacements)
5. Serialize the result
6. Write it (file or stdout)

Every step raises an XyamlError on failure; the first one aborts the run.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import os as _os
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import yaml as _yaml

import xyaml.config as config
import xyaml.errors as errors
import xyaml.tree as tree

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass(frozen=True, slots=True)
class Replacement:
    """Set the node at path to value parsed as YAML."""

    path: str
    value: str


@_dataclasses.dataclass(frozen=True)
class TransformRequest:
    """Everything one run needs besides settings and environment."""

    replacements: tuple[Replacement, ...] = ()
    substitutions: tuple[str, ...] = ()
    require_null: bool = False
    input_path: _pathlib.Path | None = None
    output_path: _pathlib.Path | None = None


def resolve_env_values(
    replacements: _typing.Iterable[Replacement],
    environ: _typing.Mapping[str, str] | None = None,
) -> list[Replacement]:
    """
    Treat each replacement value as an environment variable name.

    Returns:
        Replacements whose values are the variables' raw contents.

    Raises:
        MissingEnvVarError: If a named variable is not defined.
    """
    if environ is None:
        environ = _os.environ

    resolved = []
    for replacement in replacements:
        if replacement.value not in environ:
            raise errors.MissingEnvVarError(replacement.value)
        resolved.append(Replacement(replacement.path, environ[replacement.value]))
    return resolved


# =============================================================================
# Input / Output
# =============================================================================


def read_input(path: _pathlib.Path | None = None) -> str:
    """
    Read the YAML source text.

    Args:
        path: File to read. None reads stdin.

    Raises:
        InputError: If the file cannot be opened or read.
    """
    if path is None:
        try:
            return _sys.stdin.read()
        except (OSError, UnicodeDecodeError) as e:
            raise errors.InputError("<stdin>", str(e)) from e

    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise errors.InputError(str(path), str(e)) from e


def write_output(
    text: str,
    path: _pathlib.Path | None = None,
    stream: _typing.TextIO | None = None,
) -> None:
    """
    Write the serialized document.

    A file is created if absent and truncated if present.

    Args:
        text: Serialized YAML.
        path: File to write. None writes to stream.
        stream: Stream used when path is None. Defaults to stdout.

    Raises:
        OutputError: If the file cannot be opened or written.
    """
    if path is None:
        (stream or _sys.stdout).write(text)
        return

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise errors.OutputError(str(path), str(e)) from e
    _logger.debug("Wrote %d characters to %s", len(text), path)


# =============================================================================
# Document
# =============================================================================


def load_document(text: str) -> tree.Document:
    """
    Parse source text into a Document.

    Raises:
        DocumentError: If the text is not a single valid YAML document.
    """
    try:
        return tree.Document(tree.parse(text))
    except (_yaml.YAMLError, tree.AliasError) as e:
        raise errors.DocumentError("parse", str(e)) from e


def dump_document(document: tree.Document, settings: config.Settings) -> str:
    """
    Serialize a Document as block-style YAML.

    Raises:
        DocumentError: If the tree holds a value YAML cannot represent.
    """
    try:
        return tree.dump(
            document.root,
            indent=settings.indent,
            width=settings.width,
            allow_unicode=settings.allow_unicode,
        )
    except _yaml.YAMLError as e:
        raise errors.DocumentError("serialize", str(e)) from e


def transform(
    document: tree.Document,
    request: TransformRequest,
    settings: config.Settings,
    environ: _typing.Mapping[str, str] | None = None,
) -> tree.Document:
    """
    Apply replacements, then placeholder substitution, in place.

    A replacement value containing a placeholder is itself substituted,
    and a later replacement can address a node set by an earlier one.

    Returns:
        The same document, for chaining.
    """
    for replacement in request.replacements:
        tree.update_value(
            document,
            replacement.path,
            replacement.value,
            require_null=request.require_null,
        )

    count = tree.substitute_env(
        document,
        request.substitutions,
        environ,
        open_delim=settings.placeholder_open,
        close_delim=settings.placeholder_close,
    )
    _logger.debug(
        "Applied %d replacement(s) and %d substitution(s)",
        len(request.replacements),
        count,
    )
    return document


def render(
    request: TransformRequest,
    settings: config.Settings,
    environ: _typing.Mapping[str, str] | None = None,
) -> str:
    """
    Read, transform and serialize a document.

    Returns:
        The serialized result. Writing it is left to the caller.
    """
    document = load_document(read_input(request.input_path))
    transform(document, request, settings, environ)
    return dump_document(document, settings)
