"""Build and run synthesized programs as Cargo examples."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path
import shutil
import subprocess

from rich.console import Console
from rich.text import Text

from docgen.core.exceptions import BuildToolError, WorkspaceError
from docgen.core.execution import ExecutionResult
from docgen.core.program import Program


_log = logging.getLogger(__name__)


class CargoRunner:
    """Copy a program into ``examples/`` and hand it to ``cargo``.

    The example file only exists for the duration of the build; captured
    standard error is always streamed to ``console`` so compiler diagnostics
    reach the user, while standard output is returned to the caller. An
    existing example with the same name is never overwritten.
    """

    def __init__(
        self,
        project_root: Path,
        examples_dir: Path | None = None,
        *,
        console: Console | None = None,
        executable: str | None = None,
        color: bool = True,
    ) -> None:
        self.project_root = Path(project_root)
        self.examples_dir = Path(examples_dir) if examples_dir else self.project_root / "examples"
        self._console = console
        self._explicit_executable = executable
        self._cached_executable: str | None = None
        self.color = color

    def build_command(self, target: str, *, no_run: bool) -> list[str]:
        """Return the argv used to build or run ``target``."""
        command = [self._resolve_executable(), "build" if no_run else "run", "-q"]
        command.extend(["--color", "always" if self.color else "never"])
        command.extend(["--example", target])
        return command

    def run(self, target: str, program: Program, *, no_run: bool) -> ExecutionResult:
        """Compile ``program`` as example ``target`` and run it unless ``no_run``."""
        example = self._write_example(target, program)
        try:
            result = self._invoke(self.build_command(target, no_run=no_run))
        except BaseException:
            self._discard_example(example)
            raise
        self._remove_example(example)

        stderr = result.stderr or ""
        if stderr:
            self._report(stderr)
        return ExecutionResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=stderr,
            returncode=result.returncode,
        )

    def _write_example(self, target: str, program: Program) -> Path:
        try:
            self.examples_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WorkspaceError(
                f"Cannot create examples directory '{self.examples_dir}': {exc}"
            ) from exc
        example = self.examples_dir / f"{target}.rs"
        try:
            with example.open("x", encoding="utf-8") as handle:
                handle.write(program.source)
        except FileExistsError as exc:
            raise WorkspaceError(
                f"Refusing to overwrite existing example '{example}'; rename it or "
                "move the snippet document elsewhere."
            ) from exc
        except OSError as exc:
            raise WorkspaceError(f"Cannot write example '{example}': {exc}") from exc
        return example

    def _remove_example(self, example: Path) -> None:
        try:
            example.unlink()
        except OSError as exc:
            raise WorkspaceError(
                f"Cannot remove temporary example '{example}': {exc}"
            ) from exc

    def _discard_example(self, example: Path) -> None:
        """Remove ``example`` while another error propagates, logging any failure."""
        try:
            example.unlink(missing_ok=True)
        except OSError as exc:
            _log.warning("Cannot remove temporary example '%s': %s", example, exc)

    def _invoke(self, command: Sequence[str]) -> subprocess.CompletedProcess[str]:
        _log.debug("Running %s in %s", " ".join(command), self.project_root)
        try:
            return subprocess.run(
                list(command),
                cwd=self.project_root,
                check=False,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except FileNotFoundError as exc:
            self._cached_executable = None
            raise BuildToolError("Cargo executable could not be located.") from exc
        except OSError as exc:
            raise BuildToolError(f"Failed to invoke cargo: {exc}") from exc

    def _report(self, stderr: str) -> None:
        if self._console is None:
            self._console = Console(stderr=True, highlight=False)
        self._console.print(Text.from_ansi(stderr.rstrip("\n")))

    def _resolve_executable(self) -> str:
        if self._explicit_executable:
            return self._explicit_executable

        if self._cached_executable:
            return self._cached_executable

        executable = shutil.which("cargo")
        if not executable:
            raise BuildToolError("Cargo is required but was not found on PATH.")
        self._cached_executable = executable
        return executable


__all__ = ["CargoRunner"]
