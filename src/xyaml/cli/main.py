"""
Main CLI entry point for xyaml.

Provides the command-line interface using Click. This is the only place
errors are reported: library code raises XyamlError, and the handlers
here print the message to stderr and exit with status 1.
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic
import rich.console as _rich_console
import rich.logging as _rich_logging
import rich.syntax as _rich_syntax

import xyaml
import xyaml.config as config
import xyaml.constants as _constants
import xyaml.errors as errors
import xyaml.pipeline as pipeline
import xyaml.process as process

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _fail(error: Exception) -> _typing.NoReturn:
    """Report an error on stderr and exit."""
    _click.echo(str(error), err=True)
    raise SystemExit(_constants.EXIT_FAILURE) from None


def _configure_logging(level: str) -> None:
    """Send xyaml log records to stderr through rich."""
    logger = _logging.getLogger("xyaml")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = _rich_logging.RichHandler(
        console=_rich_console.Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(_logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def _should_use_color(cli_flag: bool | None, settings: config.Settings) -> tuple[bool, bool]:
    """Determine whether to highlight YAML written to stdout.

    Priority:
    1. CLI flag (--color / --no-color) if specified
    2. XYAML_COLOR setting
    3. NO_COLOR env var (if set, disable color) - standard convention
    4. Auto-detect: color if stdout is a TTY

    Returns:
        Tuple of (color_enabled, force_color).
        force_color is True when color was explicitly requested (not auto-detected).
    """
    if cli_flag is not None:
        return (cli_flag, cli_flag)

    if settings.color is not None:
        return (settings.color, settings.color)

    if _os.environ.get("NO_COLOR") is not None:
        return (False, False)

    return (_sys.stdout.isatty(), False)


def _print_yaml(yaml_text: str, *, color: bool, force_color: bool) -> None:
    """Print YAML text, optionally with syntax highlighting."""
    if not color:
        _click.echo(yaml_text, nl=False)
        return

    # When forcing color (explicit --color flag):
    # - force_terminal=True: output color even when piped
    # - no_color=False: override NO_COLOR env var
    console = _rich_console.Console(
        force_terminal=force_color,
        no_color=False if force_color else None,
        color_system="truecolor" if force_color else "auto",
        soft_wrap=True,
    )
    syntax = _rich_syntax.Syntax(
        yaml_text.rstrip("\n"),
        "yaml",
        theme="monokai",
        background_color="default",
        word_wrap=False,
    )
    console.print(syntax)


def _emit(ctx: _click.Context) -> None:
    """Run the pipeline and write the result."""
    settings: config.Settings = ctx.obj["settings"]
    request: pipeline.TransformRequest = ctx.obj["request"]

    try:
        text = pipeline.render(request, settings)
        if request.output_path is not None:
            pipeline.write_output(text, request.output_path)
            return
    except errors.XyamlError as e:
        _fail(e)

    color_enabled, force_color = _should_use_color(ctx.obj["color"], settings)
    _print_yaml(text, color=color_enabled, force_color=force_color)


@_click.group(invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@_click.version_option(xyaml.__version__, "-v", "--version", prog_name="xyaml")
@_click.option(
    "--set",
    "replacements",
    type=(str, str),
    multiple=True,
    metavar="PATH VALUE",
    help="Set the value at the specified path (repeatable)",
)
@_click.option(
    "--env-values",
    is_flag=True,
    help="The values provided to --set are names of environment variables",
)
@_click.option(
    "--env-subst",
    "substitutions",
    multiple=True,
    metavar="VAR",
    help="Replace the {{VAR}} placeholder with the value of environment variable VAR "
    "(repeatable). Substitutions happen after the path replacements.",
)
@_click.option(
    "--require-null",
    is_flag=True,
    help="Require every replaced value to currently be null",
)
@_click.option(
    "--input",
    "input_path",
    type=_click.Path(path_type=_pathlib.Path),
    default=None,
    metavar="FILE",
    help="Read the YAML from FILE instead of stdin",
)
@_click.option(
    "--output",
    "output_path",
    type=_click.Path(path_type=_pathlib.Path),
    default=None,
    metavar="FILE",
    help="Write the result into FILE instead of printing to stdout",
)
@_click.option(
    "--color/--no-color",
    "color",
    default=None,
    help="Highlight YAML printed to stdout (default: auto)",
)
@_click.option(
    "--verbose",
    is_flag=True,
    help="Log each step to stderr",
)
@_click.pass_context
def cli(
    ctx: _click.Context,
    replacements: tuple[tuple[str, str], ...],
    env_values: bool,
    substitutions: tuple[str, ...],
    require_null: bool,
    input_path: _pathlib.Path | None,
    output_path: _pathlib.Path | None,
    color: bool | None,
    verbose: bool,
) -> None:
    """
    xyaml - YAML configuration transformer.

    Reads a YAML document, sets values at paths, substitutes environment
    placeholders and writes the result. PATH is a YAML sequence of mapping
    keys and [N] sequence indexes; VALUE is parsed as YAML.

    \b
    Examples:
        xyaml --set '[server, port]' 8080 < app.yaml
        xyaml --input app.yaml --set '[servers, [0], host]' db1
        xyaml --env-values --set '[db, url]' DATABASE_URL < app.yaml
        xyaml --env-subst TOKEN --output app.yaml < app.tmpl.yaml
        xyaml --output app.yaml < app.tmpl.yaml exec server --port 80
    """
    try:
        settings = config.Settings()
    except _pydantic.ValidationError as e:
        _fail(e)

    _configure_logging("DEBUG" if verbose else settings.log_level)

    requested = [pipeline.Replacement(path, value) for path, value in replacements]
    if env_values:
        try:
            requested = pipeline.resolve_env_values(requested)
        except errors.XyamlError as e:
            _fail(e)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["color"] = color
    ctx.obj["request"] = pipeline.TransformRequest(
        replacements=tuple(requested),
        substitutions=substitutions,
        require_null=require_null,
        input_path=input_path,
        output_path=output_path,
    )

    # If a subcommand is invoked, it emits the document itself
    if ctx.invoked_subcommand is not None:
        return

    _emit(ctx)


@cli.command(
    name="exec",
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        **CONTEXT_SETTINGS,
    },
)
@_click.option(
    "--subst-args-with-env",
    is_flag=True,
    help="Replace {{VAR}} arguments with the value of environment variable VAR",
)
@_click.argument("cmd", nargs=-1, required=True, type=_click.UNPROCESSED)
@_click.pass_context
def exec_command(
    ctx: _click.Context,
    subst_args_with_env: bool,
    cmd: tuple[str, ...],
) -> None:
    """Write the document, then run CMD with its arguments.

    The exit status of CMD is not propagated.
    """
    settings: config.Settings = ctx.obj["settings"]

    # Arguments are resolved before anything is written
    args = list(cmd[1:])
    if subst_args_with_env:
        try:
            args = process.substitute_args(
                args,
                open_delim=settings.placeholder_open,
                close_delim=settings.placeholder_close,
            )
        except errors.XyamlError as e:
            _fail(e)

    _emit(ctx)

    try:
        process.run_command([cmd[0], *args])
    except errors.XyamlError as e:
        _fail(e)


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="xyaml")


if __name__ == "__main__":
    main()
