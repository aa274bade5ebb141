"""Implementation of the primary ``cargo-docgen`` CLI command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from pydantic import ValidationError
import typer

from docgen.adapters.cargo import CargoRunner
from docgen.adapters.project import locate_project
from docgen.core.config import DocgenConfig
from docgen.core.exceptions import ConfigurationError, DocgenError
from docgen.core.orchestrator import process_document, process_snippet
from docgen.version import get_version

from .._options import (
    DIAGNOSTICS_PANEL,
    CrateOption,
    DebugOption,
    IndentOption,
    ModuleDocOption,
    ModuleOption,
    NoRunOption,
    QuestionOption,
    ScriptArgument,
    VerboseOption,
)
from ..diagnostics import CliEmitter
from ..state import CLIState, configure_logging, emit_error, set_cli_state


IGNORED_OUTPUT_BANNER = "****** tests will ignore this output ****"
COPY_BANNER = "****** Copy and paste this into your code ******"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit()


def _snippet_target(script: Path, examples_dir: Path) -> str:
    """Pick an example name that never clobbers the input file itself."""
    target = script.stem
    if (examples_dir / f"{target}.rs").resolve() == script.resolve():
        target = f"{target}_snippet"
    return target


def _run_snippet(
    state: CLIState,
    config: DocgenConfig,
    script: Path,
    runner: CargoRunner,
    emitter: CliEmitter,
) -> None:
    try:
        code = script.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocgenError(f"Unable to read '{script}': {exc}") from exc
    assert config.examples_dir is not None
    result = process_snippet(
        config,
        code,
        runner,
        target=_snippet_target(script, config.examples_dir),
        emitter=emitter,
    )
    if not result.success:
        emit_error(f"Snippet '{script.name}' failed to build or run.")
        raise typer.Exit(code=1)

    if result.stdout:
        state.err_console.print(IGNORED_OUTPUT_BANNER, markup=False)
        state.err_console.print(f"{result.stdout.rstrip()}\n******", markup=False)
    state.err_console.print(f"{COPY_BANNER}\n", markup=False)
    typer.echo(result.text)


def generate(
    ctx: typer.Context,
    script: ScriptArgument = None,
    module: ModuleOption = False,
    module_doc: ModuleDocOption = False,
    question: QuestionOption = False,
    indent: IndentOption = "0",
    no_run: NoRunOption = False,
    crate: CrateOption = None,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Print the version and exit.",
            rich_help_panel=DIAGNOSTICS_PANEL,
        ),
    ] = False,
) -> None:
    """Compile and run a doc test snippet, then print it as a doc comment."""
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    configure_logging(state)

    if script is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    try:
        project = locate_project(Path.cwd())
        try:
            config = DocgenConfig(
                crate_name=crate or project.crate_name,
                module=module,
                module_doc=module_doc,
                question=question,
                no_run=no_run,
                indent=indent,
                project_root=project.root,
            )
        except ValidationError as exc:
            message = exc.errors()[0].get("msg", str(exc))
            raise ConfigurationError(message) from exc

        runner = CargoRunner(project.root, config.examples_dir, console=state.err_console)
        emitter = CliEmitter(state)

        if not config.module_doc:
            _run_snippet(state, config, script, runner, emitter)
            return

        result = process_document(config, script, runner, emitter=emitter)
    except DocgenError as exc:
        if state.show_tracebacks:
            raise
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    typer.echo(result.text, nl=False)
    if not result.success:
        raise typer.Exit(code=1)


__all__ = ["generate"]
