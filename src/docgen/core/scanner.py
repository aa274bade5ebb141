"""Locate fenced Rust blocks in Markdown text.

The scanner only understands the fence syntax used by snippet documents::

    ```rust[?][n]
    <body>
    ```

`?` hosts the block in a fallible ``run()`` helper and `n` marks it as
compile-only. Everything outside the fences is returned untouched as
passthrough text. Scanning is stateless: :func:`scan_next` consumes one
segment from a string and hands back the unscanned remainder, and
:func:`scan` simply iterates it, so the same text can be rescanned at will.
Fence lines may end with either LF or CRLF.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from docgen.core.exceptions import MalformedSnippetError


START_GUARD = "```rust"
END_GUARD = "```\n"
CRLF_END_GUARD = "```\r\n"
NEWLINES = ("\n", "\r\n")
QUESTION_FLAG = "?"
NO_RUN_FLAG = "n"


@dataclass(frozen=True, slots=True)
class Directives:
    """Per-block flags written right after the opening fence."""

    question: bool = False
    no_run: bool = False

    def render(self) -> str:
        """Return the flags as they appear in the source fence."""
        return (QUESTION_FLAG if self.question else "") + (NO_RUN_FLAG if self.no_run else "")


@dataclass(frozen=True, slots=True)
class Passthrough:
    """Text outside any fenced block."""

    text: str


@dataclass(frozen=True, slots=True)
class CodeBlock:
    """Body of a fenced Rust block together with its directives."""

    body: str
    directives: Directives = field(default_factory=Directives)
    ordinal: int = 1
    line: int = 1

    @property
    def target(self) -> str:
        """Return the synthetic example name derived from the ordinal."""
        return f"t{self.ordinal}"

    def render_source(self, *, directives: bool = False) -> str:
        """Rebuild the fenced block, optionally with its directive flags."""
        flags = self.directives.render() if directives else ""
        return f"{START_GUARD}{flags}\n{self.body}{END_GUARD}"


Segment = Passthrough | CodeBlock


def _parse_directives(text: str, line: int) -> tuple[Directives, str]:
    """Consume the flags following a start guard up to the mandatory newline."""
    question = text.startswith(QUESTION_FLAG)
    if question:
        text = text[len(QUESTION_FLAG) :]
    no_run = text.startswith(NO_RUN_FLAG)
    if no_run:
        text = text[len(NO_RUN_FLAG) :]
    for newline in NEWLINES:
        if text.startswith(newline):
            return Directives(question=question, no_run=no_run), text[len(newline) :]
    trailer = text.split("\n", 1)[0]
    if not trailer:
        raise MalformedSnippetError(f"expecting a newline after {START_GUARD}", line=line)
    raise MalformedSnippetError(
        f"unsupported fence directive {trailer!r} after {START_GUARD}", line=line
    )


def _find_end_guard(text: str) -> tuple[int, int] | None:
    """Return the offset and length of the first closing fence in ``text``."""
    candidates = [
        (offset, len(guard))
        for guard in (END_GUARD, CRLF_END_GUARD)
        if (offset := text.find(guard)) >= 0
    ]
    return min(candidates) if candidates else None


def scan_next(text: str, *, ordinal: int = 1, line: int = 1) -> tuple[Segment, str] | None:
    """Return the next segment of ``text`` and the text left to scan.

    ``ordinal`` numbers the code block if one is found and ``line`` is the
    line number ``text`` starts at, used for error reporting. ``None`` means
    nothing is left to scan.
    """
    if not text:
        return None

    start = text.find(START_GUARD)
    if start < 0:
        return Passthrough(text), ""
    if start > 0:
        return Passthrough(text[:start]), text[start:]

    directives, remainder = _parse_directives(text[len(START_GUARD) :], line)
    found = _find_end_guard(remainder)
    if found is None:
        raise MalformedSnippetError(f"expecting end of code block {END_GUARD!r}", line=line)
    end, guard_length = found
    block = CodeBlock(
        body=remainder[:end],
        directives=directives,
        ordinal=ordinal,
        line=line,
    )
    return block, remainder[end + guard_length :]


def scan(text: str) -> Iterator[Segment]:
    """Yield passthrough text and code blocks of ``text`` in document order."""
    if not text:
        yield Passthrough(text)
        return

    ordinal = 1
    line = 1
    rest = text
    while (step := scan_next(rest, ordinal=ordinal, line=line)) is not None:
        segment, remainder = step
        consumed = rest[: len(rest) - len(remainder)]
        line += consumed.count("\n")
        if isinstance(segment, CodeBlock):
            ordinal += 1
        yield segment
        rest = remainder


def code_blocks(text: str) -> list[CodeBlock]:
    """Return every code block of ``text``."""
    return [segment for segment in scan(text) if isinstance(segment, CodeBlock)]


__all__ = [
    "END_GUARD",
    "START_GUARD",
    "CodeBlock",
    "Directives",
    "Passthrough",
    "Segment",
    "code_blocks",
    "scan",
    "scan_next",
]
