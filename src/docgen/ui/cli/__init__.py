"""Public CLI exports for cargo-docgen."""

from __future__ import annotations

from .app import app, main
from .commands import generate
from .state import debug_enabled, emit_error, emit_warning, get_cli_state


__all__ = [
    "app",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "generate",
    "get_cli_state",
    "main",
]
