"""
Shared pytest fixtures for xyaml tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import unittest.mock as _mock

import click.testing as _click_testing
import pytest as _pytest

import xyaml.config as config
import xyaml.tree as tree


def _without_xyaml_vars() -> dict[str, str]:
    return {
        k: v
        for k, v in _os.environ.items()
        if not k.startswith("XYAML_") and k != "NO_COLOR"
    }


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """
    Return environment dict with XYAML_* keys removed.

    Use with mock.patch.dict to isolate tests from the actual environment.
    """
    return _without_xyaml_vars()


@_pytest.fixture
def isolated_env(clean_env: dict[str, str]):
    """
    Context manager that isolates tests from environment variables.

    Usage:
        def test_something(isolated_env):
            with isolated_env:
                settings = config.Settings.construct_without_dotenv()
    """
    return _mock.patch.dict(_os.environ, clean_env, clear=True)


@_pytest.fixture
def clean_settings(isolated_env) -> config.Settings:
    """Settings instance isolated from environment and .env file."""
    with isolated_env:
        return config.Settings.construct_without_dotenv()


@_pytest.fixture
def runner() -> _click_testing.CliRunner:
    """CliRunner with XYAML_* variables removed from its environment."""
    env: dict[str, str | None] = {k: None for k in _os.environ if k.startswith("XYAML_")}
    env["NO_COLOR"] = None
    return _click_testing.CliRunner(env=env)


@_pytest.fixture
def nested_document() -> tree.Document:
    """A document mixing mappings, sequences and scalar kinds."""
    return tree.Document(
        tree.parse(
            """
server:
  host: localhost
  port: 8080
  tls: null
servers:
  - name: a
    weight: 1
  - name: b
    weight: 2
ports:
  80: http
  443: https
flags:
  true: enabled
"""
        )
    )


@_pytest.fixture
def config_file(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """A YAML file on disk for --input tests."""
    path = tmp_path / "app.yaml"
    path.write_text("a:\n  b:\n  - 1\n  - 2\n  - 3\nc: null\n", encoding="utf-8")
    return path
