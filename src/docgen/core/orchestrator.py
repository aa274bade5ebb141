"""Drive snippets through transformation, execution and re-commenting."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path

from docgen.core.cache import DELIMITER, SnippetCache
from docgen.core.config import DocgenConfig
from docgen.core.diagnostics import DiagnosticEmitter, NullEmitter
from docgen.core.exceptions import DocgenError
from docgen.core.execution import BuildRunner
from docgen.core.formatter import append_indented
from docgen.core.program import transform
from docgen.core.scanner import CodeBlock, Passthrough, scan


_log = logging.getLogger(__name__)

STDOUT_MARKER = "//"


@dataclass(slots=True)
class DocumentResult:
    """Reconstructed document and the fate of each of its code blocks."""

    text: str
    executed: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failures: list[int] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures


@dataclass(slots=True)
class SnippetResult:
    """Outcome of processing a bare snippet."""

    success: bool
    text: str | None
    stdout: str = ""


def render_document(
    config: DocgenConfig,
    text: str,
    runner: BuildRunner,
    cache: SnippetCache,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> DocumentResult:
    """Rebuild ``text`` as doc comments, running each snippet not yet cached.

    ``cache`` is extended in memory only; persisting it is up to the caller.
    A malformed fence raises before any text is returned.
    """
    emitter = emitter or NullEmitter()
    comment = config.comment
    parts: list[str] = []
    result = DocumentResult(text="")

    for segment in scan(text):
        if isinstance(segment, Passthrough):
            append_indented(parts, segment.text, comment)
            continue

        block: CodeBlock = segment
        effective = config.with_directives(block.directives)
        program = transform(effective, block.body)
        payload = {"target": block.target, "line": block.line, "no_run": effective.no_run}

        if cache.contains(block.body):
            _log.debug("Snippet %s already verified, skipping", block.target)
            result.skipped.append(block.ordinal)
            emitter.event("snippet_cached", payload)
        else:
            if not cache.record(block.body):
                emitter.warning(
                    f"Snippet {block.target} (line {block.line}) contains the cache "
                    f"delimiter {DELIMITER!r} and will run again next time."
                )
            emitter.event("snippet_run", payload)
            outcome = runner.run(block.target, program, no_run=effective.no_run)
            result.executed.append(block.ordinal)
            if outcome.success:
                if outcome.stdout:
                    append_indented(parts, outcome.stdout, f"{comment} {STDOUT_MARKER}")
            else:
                result.failures.append(block.ordinal)
                emitter.event("snippet_failed", payload)
                emitter.error(
                    f"Snippet {block.target} (line {block.line}) failed "
                    f"with exit code {outcome.returncode}."
                )

        parts.append(program.format(comment))

    result.text = "".join(parts)
    return result


def process_document(
    config: DocgenConfig,
    document: Path,
    runner: BuildRunner,
    *,
    cache: SnippetCache | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> DocumentResult:
    """Process a Markdown ``document`` and persist its snippet cache."""
    try:
        text = Path(document).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocgenError(f"Unable to read '{document}': {exc}") from exc

    if cache is None:
        cache = SnippetCache.load(document)
    result = render_document(config, text, runner, cache, emitter=emitter)
    cache.save()
    _log.info(
        "Processed %s: %d executed, %d cached, %d failed",
        document,
        len(result.executed),
        len(result.skipped),
        len(result.failures),
    )
    return result


def process_snippet(
    config: DocgenConfig,
    code: str,
    runner: BuildRunner,
    *,
    target: str,
    emitter: DiagnosticEmitter | None = None,
) -> SnippetResult:
    """Run a bare snippet; only a successful run yields formatted text."""
    emitter = emitter or NullEmitter()
    program = transform(config, code)
    emitter.event("snippet_run", {"target": target, "no_run": config.no_run})
    outcome = runner.run(target, program, no_run=config.no_run)
    if not outcome.success:
        emitter.event("snippet_failed", {"target": target})
        return SnippetResult(success=False, text=None, stdout=outcome.stdout)
    return SnippetResult(success=True, text=program.format(config.comment), stdout=outcome.stdout)


__all__ = [
    "DocumentResult",
    "SnippetResult",
    "process_document",
    "process_snippet",
    "render_document",
]
