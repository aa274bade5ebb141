"""Primary public API for cargo-docgen."""

from __future__ import annotations

from docgen.core.cache import SnippetCache
from docgen.core.config import DocgenConfig
from docgen.core.exceptions import (
    BuildToolError,
    ConfigurationError,
    DocgenError,
    MalformedSnippetError,
    ProjectNotFoundError,
    SnippetCacheError,
    WorkspaceError,
)
from docgen.core.execution import BuildRunner, ExecutionResult
from docgen.core.formatter import indent
from docgen.core.orchestrator import (
    DocumentResult,
    SnippetResult,
    process_document,
    process_snippet,
    render_document,
)
from docgen.core.program import Program, transform
from docgen.core.scanner import CodeBlock, Directives, Passthrough, scan
from docgen.version import get_version


__version__ = get_version()

__all__ = [
    "BuildRunner",
    "BuildToolError",
    "CodeBlock",
    "ConfigurationError",
    "Directives",
    "DocgenConfig",
    "DocgenError",
    "DocumentResult",
    "ExecutionResult",
    "MalformedSnippetError",
    "Passthrough",
    "Program",
    "ProjectNotFoundError",
    "SnippetCache",
    "SnippetCacheError",
    "SnippetResult",
    "WorkspaceError",
    "__version__",
    "get_version",
    "indent",
    "process_document",
    "process_snippet",
    "render_document",
    "scan",
    "transform",
]
