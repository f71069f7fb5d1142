"""
CLI utilities for option merging, include globs and output.
"""

import json
import os
from fnmatch import fnmatch
from pathlib import Path
from typing import Any

import click
from click.core import ParameterSource

from .config import GeneratorConfig
from .oracle.base import TypeOracle


def apply_cli_overrides(ctx: click.Context, config: GeneratorConfig, options: dict[str, Any]) -> GeneratorConfig:
    """
    Override config values with options given explicitly on the command line.

    Options left at their default do not override the config file.

    Args:
        ctx: Current Click context
        config: Config loaded from file (or defaults)
        options: Click parameter values keyed by config attribute name

    Returns:
        The updated config
    """
    for name, value in options.items():
        if not hasattr(config, name):
            continue
        if ctx.get_parameter_source(name) != ParameterSource.COMMANDLINE:
            continue
        # multiple=True options arrive as tuples
        if isinstance(value, tuple):
            value = list(value)
        setattr(config, name, value)
    return config


def select_include_files(oracle: TypeOracle, patterns: list[str]) -> list[str] | None:
    """
    Select the program's units matching include globs.

    Patterns are matched against unit paths relative to the program's
    directory, with any leading ``./`` stripped.

    Args:
        oracle: Type oracle of the program
        patterns: Glob patterns

    Returns:
        Matching unit file names, or None when no pattern is given
    """
    if not patterns:
        return None

    patterns = [p[2:] if p.startswith("./") else p for p in patterns]
    working_dir = oracle.current_directory()

    selected = []
    for unit in oracle.source_units():
        relative_path = os.path.relpath(unit.file_name, working_dir)
        if any(fnmatch(relative_path, pattern) or fnmatch(unit.file_name, pattern) for pattern in patterns):
            selected.append(unit.file_name)
    return selected


def format_schema(schema: dict[str, Any]) -> str:
    """Stable JSON text of a schema: sorted keys, 4-space indent, two trailing newlines."""
    return json.dumps(schema, indent=4, sort_keys=True, ensure_ascii=False) + "\n\n"


def write_output(text: str, out: str) -> None:
    """Write text to a file (creating parent directories), or stdout if out is empty."""
    if not out:
        click.echo(text, nl=False)
        return

    path = Path(out)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
