"""
Child process execution after the document is written.

Typical use is a container entrypoint that renders its config and then
hands over to the real program:

    xyaml --input app.tmpl.yaml --output app.yaml --env-subst DB_URL \\
        exec --subst-args-with-env server --token {{API_TOKEN}}
"""

from __future__ import annotations

import logging as _logging
import os as _os
import subprocess as _subprocess
import typing as _typing

import xyaml.constants as _constants
import xyaml.errors as errors

_logger = _logging.getLogger(__name__)


def substitute_args(
    args: _typing.Sequence[str],
    environ: _typing.Mapping[str, str] | None = None,
    *,
    open_delim: str = _constants.DEFAULT_PLACEHOLDER_OPEN,
    close_delim: str = _constants.DEFAULT_PLACEHOLDER_CLOSE,
) -> list[str]:
    """
    Replace placeholder-shaped arguments with raw environment values.

    Only whole arguments such as ``{{NAME}}`` are replaced, and the value
    is used verbatim (not parsed as YAML).

    Raises:
        MissingEnvVarError: If a referenced variable is not defined.
    """
    if environ is None:
        environ = _os.environ

    result = []
    min_length = len(open_delim) + len(close_delim)
    for arg in args:
        if len(arg) >= min_length and arg.startswith(open_delim) and arg.endswith(close_delim):
            variable = arg[len(open_delim) : len(arg) - len(close_delim)]
            if variable not in environ:
                raise errors.MissingEnvVarError(variable, context="exec")
            arg = environ[variable]
        result.append(arg)
    return result


def run_command(argv: _typing.Sequence[str]) -> int:
    """
    Run a command and wait for it to finish.

    There is no timeout. The child's exit status is returned for logging
    only; callers do not propagate it.

    Raises:
        ExecError: If the process cannot be spawned.
    """
    _logger.debug("Running %s", argv)
    try:
        completed = _subprocess.run(list(argv), check=False)
    except (OSError, ValueError) as e:
        raise errors.ExecError(argv, str(e)) from e

    _logger.debug("Command %s exited with %d", argv[0], completed.returncode)
    return completed.returncode
