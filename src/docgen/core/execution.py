"""Contract between the orchestrator and the build-and-run collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from docgen.core.program import Program


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of building (and possibly running) one example."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


@runtime_checkable
class BuildRunner(Protocol):
    """Anything able to compile a program and optionally execute it."""

    def run(self, target: str, program: Program, *, no_run: bool) -> ExecutionResult: ...


__all__ = ["BuildRunner", "ExecutionResult"]
