"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with XYAML_ prefix
3. .env file named by XYAML_ENV_FILE (if set and present)
4. Field defaults

Examples:
  XYAML_LOG_LEVEL=debug
  XYAML_COLOR=false
  XYAML_PLACEHOLDER_OPEN='${'  XYAML_PLACEHOLDER_CLOSE='}'
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import xyaml.constants as _constants


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only an explicit XYAML_ENV_FILE is honored. If it is set but the file
    doesn't exist, no .env is loaded rather than falling back silently.
    """
    if env_file := _os.environ.get("XYAML_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    xyaml configuration settings.

    All settings can be overridden via environment variables with XYAML_ prefix.
    CLI flags override settings.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="XYAML_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading .env file.

        Useful for test isolation.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    # =========================================================================
    # Placeholders
    # =========================================================================

    placeholder_open: str = _pydantic.Field(
        default=_constants.DEFAULT_PLACEHOLDER_OPEN,
        min_length=1,
        description="Text opening a placeholder token",
    )

    placeholder_close: str = _pydantic.Field(
        default=_constants.DEFAULT_PLACEHOLDER_CLOSE,
        min_length=1,
        description="Text closing a placeholder token",
    )

    # =========================================================================
    # Output
    # =========================================================================

    indent: int = _pydantic.Field(
        default=_constants.DEFAULT_INDENT,
        ge=2,
        le=9,
        description="Indentation of YAML output",
    )

    width: int = _pydantic.Field(
        default=_constants.DEFAULT_WIDTH,
        ge=20,
        description="Preferred line width of YAML output",
    )

    allow_unicode: bool = _pydantic.Field(
        default=True,
        description="Write non-ASCII characters as-is instead of escaping them",
    )

    color: bool | None = _pydantic.Field(
        default=None,
        description="Highlight YAML written to stdout (None = auto-detect terminal)",
    )

    # =========================================================================
    # Logging
    # =========================================================================

    log_level: str = _pydantic.Field(
        default="WARNING",
        description="Log level for diagnostics on stderr",
    )

    @_pydantic.field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(_logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level
