"""
Environment placeholder substitution.

A string node that is exactly a placeholder such as ``{{DB_PORT}}`` is
replaced by the environment variable's value parsed as YAML. Strings
that only contain a placeholder are left alone:

    >>> doc = Document({"a": "{{FOO}}", "b": "x{{FOO}}y"})
    >>> substitute_env(doc, ["FOO"], {"FOO": "[1, 2]"})
    1
    >>> doc.root
    {'a': [1, 2], 'b': 'x{{FOO}}y'}
"""

from __future__ import annotations

import logging as _logging
import os as _os
import typing as _typing

import xyaml.constants as _constants
import xyaml.errors as errors
import xyaml.tree._resolver as resolver

_logger = _logging.getLogger(__name__)


def placeholder(
    name: str,
    open_delim: str = _constants.DEFAULT_PLACEHOLDER_OPEN,
    close_delim: str = _constants.DEFAULT_PLACEHOLDER_CLOSE,
) -> str:
    """Return the placeholder token for a variable name."""
    return f"{open_delim}{name}{close_delim}"


def placeholder_table(
    names: _typing.Iterable[str],
    open_delim: str = _constants.DEFAULT_PLACEHOLDER_OPEN,
    close_delim: str = _constants.DEFAULT_PLACEHOLDER_CLOSE,
) -> dict[str, str]:
    """Map each placeholder token to its variable name."""
    return {placeholder(name, open_delim, close_delim): name for name in names}


def _env_value(variable: str, environ: _typing.Mapping[str, str]) -> _typing.Any:
    """Read a variable and parse it as YAML."""
    if variable not in environ:
        raise errors.MissingEnvVarError(variable)
    return resolver.parse_value(environ[variable], variable=variable)


def _visit(
    slot: resolver.Slot,
    table: dict[str, str],
    environ: _typing.Mapping[str, str],
) -> int:
    value = slot.get()

    if isinstance(value, dict):
        # Keys are never substituted
        return sum(_visit(resolver.Slot(value, key), table, environ) for key in list(value))
    if isinstance(value, list):
        return sum(_visit(resolver.Slot(value, i), table, environ) for i in range(len(value)))
    if isinstance(value, str) and value in table:
        variable = table[value]
        slot.set(_env_value(variable, environ))
        _logger.debug("Substituted %s from environment", value)
        return 1
    return 0


def substitute_env(
    document: resolver.Document,
    names: _typing.Iterable[str],
    environ: _typing.Mapping[str, str] | None = None,
    *,
    open_delim: str = _constants.DEFAULT_PLACEHOLDER_OPEN,
    close_delim: str = _constants.DEFAULT_PLACEHOLDER_CLOSE,
) -> int:
    """
    Replace whole-string placeholders with parsed environment values.

    Substituted values are not scanned again.

    Args:
        document: The document to modify in place.
        names: Declared variable names. Only their placeholders are replaced.
        environ: Variable source. Defaults to os.environ.
        open_delim: Text opening a placeholder.
        close_delim: Text closing a placeholder.

    Returns:
        Number of nodes replaced.

    Raises:
        MissingEnvVarError: If a referenced variable is not defined.
        InvalidValueError: If a variable's value is not valid YAML.
    """
    table = placeholder_table(names, open_delim, close_delim)
    if not table:
        return 0
    if environ is None:
        environ = _os.environ
    return _visit(resolver.Slot(document), table, environ)
