"""Configuration model shared by the scanner, transformer and orchestrator.

DocgenConfig

`crate_name` (`str`)
: Name of the crate under test. Hyphens are replaced by underscores so the
  value can be used verbatim in an `extern crate` declaration.

`module` (`bool`)
: Emit module-level doc comments (`//!`) instead of item-level ones (`///`).

`module_doc` (`bool`)
: Treat the input as a Markdown document containing fenced Rust blocks.
  Implies `module`.

`question` (`bool`)
: Wrap snippets in a fallible `run()` helper so that `?` can be used. Blocks
  opened with `` ```rust? `` enable it for themselves only.

`no_run` (`bool`)
: Compile snippets without executing them. Blocks opened with `` ```rustn ``
  enable it for themselves only.

`indent` (`str`)
: Indentation prepended to item-level comments. Accepts a literal whitespace
  string, a number of spaces (`"4"`) or a number of tabs (`"1t"`).

`project_root` (`Path | None`)
: Directory holding `Cargo.toml`; the build tool runs from there.

`examples_dir` (`Path | None`)
: Directory receiving temporary example sources. Defaults to
  `<project_root>/examples`.
"""

from __future__ import annotations

from pathlib import Path
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from docgen.core.scanner import Directives


_INDENT_PATTERN = re.compile(r"^(?P<count>\d+)(?P<tabs>t?)$")


def parse_indent(value: str) -> str:
    """Expand an indent specification such as ``4`` or ``1t`` into whitespace."""
    candidate = value.strip()
    if not candidate:
        return value if value.isspace() else ""
    match = _INDENT_PATTERN.match(candidate)
    if match is None:
        raise ValueError(
            f"Invalid indent '{value}', expected a number of spaces ('4') or tabs ('1t')."
        )
    char = "\t" if match.group("tabs") else " "
    return char * int(match.group("count"))


class DocgenConfig(BaseModel):
    """Immutable settings for one invocation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    crate_name: str
    module: bool = False
    module_doc: bool = False
    question: bool = False
    no_run: bool = False
    indent: str = ""
    project_root: Path | None = None
    examples_dir: Path | None = None

    @field_validator("crate_name")
    @classmethod
    def _normalise_crate_name(cls, value: str) -> str:
        name = value.strip().replace("-", "_")
        if not name:
            raise ValueError("crate_name must not be empty")
        return name

    @field_validator("indent", mode="before")
    @classmethod
    def _expand_indent(cls, value: object) -> object:
        if isinstance(value, int):
            return " " * value
        if isinstance(value, str):
            return parse_indent(value)
        return value

    @model_validator(mode="before")
    @classmethod
    def _apply_implications(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("module_doc"):
            data["module"] = True
        if data.get("examples_dir") is None and data.get("project_root") is not None:
            data["examples_dir"] = Path(data["project_root"]) / "examples"
        return data

    @property
    def comment(self) -> str:
        """Return the doc comment marker used as line prefix."""
        if self.module:
            return "//!"
        return f"{self.indent}///"

    def with_directives(self, directives: Directives) -> DocgenConfig:
        """Return a copy carrying the per-block overrides of ``directives``.

        Directives can only switch a flag on; the instance itself is left
        untouched so the defaults apply again to the next block.
        """
        return self.model_copy(
            update={
                "question": self.question or directives.question,
                "no_run": self.no_run or directives.no_run,
            }
        )


__all__ = ["DocgenConfig", "parse_indent"]
