"""Custom exception hierarchy for the snippet pipeline."""

from __future__ import annotations


class DocgenError(RuntimeError):
    """Base exception for fatal snippet processing failures."""


class MalformedSnippetError(DocgenError):
    """Raised when a fenced block cannot be delimited or its directives parsed."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class SnippetCacheError(DocgenError):
    """Raised when the snippet cache exists but cannot be read or written."""


class WorkspaceError(DocgenError):
    """Raised when example artefacts cannot be created or removed."""


class BuildToolError(DocgenError):
    """Raised when the external build tool cannot be launched."""


class ProjectNotFoundError(DocgenError):
    """Raised when no enclosing Cargo project can be located."""


class ConfigurationError(DocgenError):
    """Raised when command-line settings cannot form a valid configuration."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the first line of every message along an exception's cause chain."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the innermost message of an exception chain, closest to the root cause."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None
