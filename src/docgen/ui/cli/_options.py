"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
SNIPPET_PANEL = "Snippets"
DIAGNOSTICS_PANEL = "Diagnostics"

ScriptArgument = Annotated[
    Path | None,
    typer.Argument(
        metavar="SCRIPT",
        help="File containing a doc test snippet, or a Markdown file with --module-doc.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

ModuleOption = Annotated[
    bool,
    typer.Option(
        "--module",
        "-m",
        help="Emit module-level doc comments (//!).",
        rich_help_panel=SNIPPET_PANEL,
    ),
]

ModuleDocOption = Annotated[
    bool,
    typer.Option(
        "--module-doc",
        "-M",
        help="Input is a Markdown file containing code examples. Implies --module.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

QuestionOption = Annotated[
    bool,
    typer.Option(
        "--question",
        "-q",
        help="Wrap snippets in a fallible run() so the ? operator can be used.",
        rich_help_panel=SNIPPET_PANEL,
    ),
]

IndentOption = Annotated[
    str,
    typer.Option(
        "--indent",
        "-i",
        help="Indentation of item comments, in spaces ('4') or tabs ('1t').",
        rich_help_panel=SNIPPET_PANEL,
    ),
]

NoRunOption = Annotated[
    bool,
    typer.Option(
        "--no-run",
        "-n",
        help="Compile the snippets without running them.",
        rich_help_panel=SNIPPET_PANEL,
    ),
]

CrateOption = Annotated[
    str | None,
    typer.Option(
        "--crate",
        metavar="NAME",
        help="Crate referenced by snippets (defaults to the package in Cargo.toml).",
        rich_help_panel=SNIPPET_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
