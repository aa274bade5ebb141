"""Typer application wiring for the cargo-docgen CLI."""

from __future__ import annotations

from collections.abc import Sequence
import sys

import click
import typer
from typer.core import TyperCommand

from docgen.ui.cli.commands.generate import generate

from .state import debug_enabled, emit_error


SUBCOMMAND_NAME = "docgen"


class HelpOnEmptyCommand(TyperCommand):
    """Typer command that disables positional argument enforcement."""

    def __init__(self, *args: object, **kwargs: object) -> None:  # type: ignore[override]
        super().__init__(*args, **kwargs)
        for param in self.params:
            if isinstance(param, click.Argument):
                param.required = False


app = typer.Typer(
    help="Compile and run Rust doc test snippets, then emit them as doc comments.",
    context_settings={"help_option_names": ["--help", "-h"]},
)


app.command(cls=HelpOnEmptyCommand)(generate)


def strip_subcommand(argv: Sequence[str]) -> list[str]:
    """Drop the ``docgen`` word Cargo passes when invoked as ``cargo docgen``."""
    args = list(argv)
    if args[:1] == [SUBCOMMAND_NAME]:
        args = args[1:]
    return args


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app(args=strip_subcommand(sys.argv[1:]))
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - last resort for unexpected failures
        from .state import get_cli_state

        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main", "strip_subcommand"]
