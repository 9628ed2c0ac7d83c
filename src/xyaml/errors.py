"""
Exception hierarchy for xyaml.

Every failure in the library is raised as a subclass of XyamlError and
propagates to the CLI, which prints the message and exits non-zero.
Nothing is retried or recovered along the way.

Messages share one layout: a headline, then indented ``key=`value```
lines locating the fault:

    No key `port`
      cursor=`['server', 'port']`
      path=`[server, port]`
"""

from __future__ import annotations

import typing as _typing


def _format(headline: str, **details: _typing.Any) -> str:
    """Build a headline followed by one indented line per detail."""
    lines = [headline]
    for name, value in details.items():
        lines.append(f"  {name}=`{value}`")
    return "\n".join(lines)


class XyamlError(Exception):
    """Base class for all xyaml errors."""

    pass


# =============================================================================
# Path errors
# =============================================================================


class PathError(XyamlError):
    """Base class for errors raised while resolving a path."""

    def __init__(
        self,
        headline: str,
        path: str,
        cursor: _typing.Sequence[str] | None = None,
        **details: _typing.Any,
    ) -> None:
        self.headline = headline
        self.path = path
        self.cursor = list(cursor) if cursor is not None else []
        if cursor is not None:
            details["cursor"] = self.cursor
        details["path"] = path
        super().__init__(_format(headline, **details))


class MalformedPathError(PathError):
    """The path specification is not valid YAML or not a YAML sequence."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        self.reason = reason
        if reason is None:
            super().__init__("Path is not a YAML sequence", path)
        else:
            super().__init__("Failed to parse the path as YAML", path, error=reason)


class UnsupportedPathError(PathError):
    """A segment is a sequence with other than exactly one element."""

    def __init__(self, path: str, cursor: _typing.Sequence[str]) -> None:
        super().__init__("Multiple sequence indexes are not supported", path, cursor)


class PathNotFoundError(PathError):
    """A key or index is absent, or the node has the wrong type for the hop."""

    pass


class PreconditionFailedError(PathError):
    """The target node is not null although null was required."""

    def __init__(self, path: str, cursor: _typing.Sequence[str], value: _typing.Any) -> None:
        self.value = value
        super().__init__("Object at path is not `null`", path, cursor, obj=repr(value))


# =============================================================================
# Value and environment errors
# =============================================================================


class InvalidValueError(XyamlError):
    """A replacement value or environment value is not valid YAML."""

    def __init__(
        self,
        value: str,
        reason: str,
        *,
        path: str | None = None,
        variable: str | None = None,
    ) -> None:
        self.value = value
        self.reason = reason
        self.path = path
        self.variable = variable
        details: dict[str, _typing.Any] = {"new_value": value}
        if path is not None:
            details["path"] = path
        if variable is not None:
            details["env_var"] = variable
        details["error"] = reason
        super().__init__(_format("New value is not a valid YAML", **details))


class MissingEnvVarError(XyamlError):
    """A referenced environment variable is not defined."""

    def __init__(self, variable: str, *, context: str | None = None) -> None:
        self.variable = variable
        self.context = context
        headline = f"Failed to read the referred env variable `{variable}`"
        if context:
            headline = f"{context}: {headline}"
        super().__init__(headline)


# =============================================================================
# I/O, document and process errors
# =============================================================================


class InputError(XyamlError):
    """The input file or stream could not be read."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        super().__init__(_format(f"Failed to read the input `{source}`", error=reason))


class OutputError(XyamlError):
    """The output file could not be opened or written."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        super().__init__(_format(f"Failed to write the output `{target}`", error=reason))


class DocumentError(XyamlError):
    """The document could not be parsed or serialized."""

    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        super().__init__(_format(f"Failed to {action} YAML", error=reason))


class ExecError(XyamlError):
    """The child process could not be spawned."""

    def __init__(self, argv: _typing.Sequence[str], reason: str) -> None:
        self.argv = list(argv)
        super().__init__(_format("Failed to spawn the process", cmd=self.argv, error=reason))
