from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path

import pytest

from docgen.core.cache import SnippetCache, cache_path
from docgen.core.config import DocgenConfig
from docgen.core.diagnostics import LoggingEmitter
from docgen.core.exceptions import MalformedSnippetError
from docgen.core.execution import BuildRunner, ExecutionResult
from docgen.core.orchestrator import process_document, process_snippet, render_document
from docgen.core.program import Program


@dataclass
class RecordingRunner:
    """Runner double remembering every build request."""

    results: dict[str, ExecutionResult] = field(default_factory=dict)
    calls: list[tuple[str, Program, bool]] = field(default_factory=list)

    def run(self, target: str, program: Program, *, no_run: bool) -> ExecutionResult:
        self.calls.append((target, program, no_run))
        return self.results.get(target, ExecutionResult(success=True))


@pytest.fixture
def config() -> DocgenConfig:
    return DocgenConfig(crate_name="demo", module_doc=True)


def test_recording_runner_satisfies_protocol() -> None:
    assert isinstance(RecordingRunner(), BuildRunner)


def test_end_to_end_question_block(config: DocgenConfig, tmp_path: Path) -> None:
    runner = RecordingRunner()
    cache = SnippetCache.load(tmp_path / "readme.md")
    document = "before\n```rust?\nfoo();\n```\nafter\n"

    result = render_document(config, document, runner, cache)

    assert len(runner.calls) == 1
    target, program, no_run = runner.calls[0]
    assert target == "t1"
    assert no_run is False
    assert program.code == "foo();\n"
    assert "fn run()" in program.source
    assert cache.entries == ["foo();\n"]

    text = result.text
    assert text.startswith("//! before\n//! ```\n//! # fn run()")
    assert "//! foo();\n" in text
    assert text.endswith("//! ```\n//! after\n")
    assert text.index("//! before") < text.index("//! foo();") < text.index("//! after")
    assert result.executed == [1]
    assert result.skipped == []
    assert result.success is True


def test_second_run_is_idempotent(config: DocgenConfig, tmp_path: Path) -> None:
    document_path = tmp_path / "readme.md"
    document_path.write_text(
        "# Title\n```rust\nlet a = 1;\n```\ntext\n```rustn\nloop {}\n```\n",
        encoding="utf-8",
    )

    first_runner = RecordingRunner()
    first = process_document(config, document_path, first_runner)
    second_runner = RecordingRunner()
    second = process_document(config, document_path, second_runner)

    assert len(first_runner.calls) == 2
    assert second_runner.calls == []
    assert second.skipped == [1, 2]
    assert first.text == second.text


def test_directives_do_not_leak_into_following_blocks(
    config: DocgenConfig, tmp_path: Path
) -> None:
    runner = RecordingRunner()
    cache = SnippetCache.load(tmp_path / "readme.md")
    document = "```rust?n\nfoo()?;\n```\n```rust\nbar();\n```\n"

    result = render_document(config, document, runner, cache)

    (_, first, first_no_run), (_, second, second_no_run) = runner.calls
    assert first.uses_question and first_no_run is True
    assert not second.uses_question and second_no_run is False
    assert "//! ```rust,no_run\n" in result.text
    assert result.text.count("//! ```\n") == 3


def test_duplicate_snippet_runs_once(config: DocgenConfig, tmp_path: Path) -> None:
    runner = RecordingRunner()
    cache = SnippetCache.load(tmp_path / "readme.md")
    document = "```rust\nsame();\n```\nand again\n```rust\nsame();\n```\n"

    result = render_document(config, document, runner, cache)

    assert [call[0] for call in runner.calls] == ["t1"]
    assert result.executed == [1]
    assert result.skipped == [2]
    assert result.text.count("//! same();\n") == 2


def test_stdout_is_emitted_as_comment_before_snippet(
    config: DocgenConfig, tmp_path: Path
) -> None:
    runner = RecordingRunner(results={"t1": ExecutionResult(success=True, stdout="42\n")})
    cache = SnippetCache.load(tmp_path / "readme.md")

    result = render_document(config, "```rust\nprintln!(\"42\");\n```\n", runner, cache)

    assert result.text.startswith("//! // 42\n//! ```\n")


def test_failure_is_reported_and_processing_continues(
    config: DocgenConfig, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    runner = RecordingRunner(
        results={"t1": ExecutionResult(success=False, stdout="noise\n", returncode=101)}
    )
    cache = SnippetCache.load(tmp_path / "readme.md")
    document = "```rust\npanic!();\n```\n```rust\nok();\n```\n"

    with caplog.at_level(logging.ERROR):
        result = render_document(
            config, document, runner, cache, emitter=LoggingEmitter()
        )

    assert [call[0] for call in runner.calls] == ["t1", "t2"]
    assert result.failures == [1]
    assert result.success is False
    assert "noise" not in result.text
    assert "//! ok();\n" in result.text
    assert any("t1" in record.message for record in caplog.records)


def test_malformed_document_aborts_without_saving(config: DocgenConfig, tmp_path: Path) -> None:
    document_path = tmp_path / "readme.md"
    document_path.write_text("```rust\nfoo();\n```\n```rust\nunterminated();\n", encoding="utf-8")
    runner = RecordingRunner()

    with pytest.raises(MalformedSnippetError):
        process_document(config, document_path, runner)

    assert not cache_path(document_path).exists()


def test_process_document_persists_cache(config: DocgenConfig, tmp_path: Path) -> None:
    document_path = tmp_path / "readme.md"
    document_path.write_text("```rust\nfoo();\n```\n", encoding="utf-8")

    process_document(config, document_path, RecordingRunner())

    assert SnippetCache.load(document_path).entries == ["foo();\n"]


def test_item_comments_use_indent(tmp_path: Path) -> None:
    config = DocgenConfig(crate_name="demo", indent="4")
    cache = SnippetCache.load(tmp_path / "lib.md")

    result = render_document(config, "doc\n```rust\nx();\n```\n", RecordingRunner(), cache)

    assert result.text == "    /// doc\n    /// ```\n    /// x();\n    /// ```\n"


def test_snippet_mode_success_returns_formatted_text() -> None:
    config = DocgenConfig(crate_name="demo")
    runner = RecordingRunner(results={"demo": ExecutionResult(success=True, stdout="hi\n")})

    result = process_snippet(config, "let x = 1;\n", runner, target="demo")

    assert result.success is True
    assert result.text == "/// ```\n/// let x = 1;\n/// ```\n"
    assert result.stdout == "hi\n"
    assert runner.calls[0][0] == "demo"


def test_snippet_mode_failure_emits_no_text() -> None:
    config = DocgenConfig(crate_name="demo", no_run=True)
    runner = RecordingRunner(results={"broken": ExecutionResult(success=False, returncode=1)})

    result = process_snippet(config, "nope(\n", runner, target="broken")

    assert result.success is False
    assert result.text is None
    assert runner.calls[0][2] is True


def test_body_with_cache_delimiter_runs_but_is_not_cached(
    config: DocgenConfig, tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    runner = RecordingRunner()
    cache = SnippetCache.load(tmp_path / "readme.md")
    document = "```rust\na\n---\nb\n```\n"

    with caplog.at_level(logging.WARNING):
        result = render_document(config, document, runner, cache, emitter=LoggingEmitter())

    assert [call[0] for call in runner.calls] == ["t1"]
    assert result.executed == [1]
    assert cache.entries == []
    assert cache.dirty is False
    warnings = [record.message for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "t1 (line 1)" in warnings[0]
    assert "cache delimiter" in warnings[0]

    again = render_document(config, document, runner, cache)
    assert len(runner.calls) == 2
    assert again.skipped == []


def test_crlf_document_is_processed(config: DocgenConfig, tmp_path: Path) -> None:
    runner = RecordingRunner()
    cache = SnippetCache.load(tmp_path / "readme.md")

    result = render_document(config, "intro\r\n```rust\r\nfoo();\r\n```\r\n", runner, cache)

    assert runner.calls[0][1].code == "foo();\n"
    assert result.text == "//! intro\n//! ```\n//! foo();\n//! ```\n"
