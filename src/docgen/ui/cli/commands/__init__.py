"""CLI command implementations exposed via `docgen.ui.cli`."""

from __future__ import annotations

from .generate import generate


__all__ = ["generate"]
