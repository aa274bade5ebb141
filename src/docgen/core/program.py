"""Turn a documentation snippet into a standalone Cargo example.

Doc tests assume an ``extern crate`` reference to the crate under test and
wrap the snippet in ``main``. When the ``?`` operator is wanted, the snippet
is hosted in a ``run()`` function returning a boxed error and ``main`` merely
unwraps it. The scaffolding is kept apart from the snippet so it can be
written back as hidden lines in the documentation.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from docgen.core.config import DocgenConfig
from docgen.core.formatter import append_indented, iter_lines


_log = logging.getLogger(__name__)

ALLOWED_LINTS: tuple[str, ...] = (
    "unused_variables",
    "unused_assignments",
    "unused_mut",
    "unused_attributes",
    "dead_code",
    "unreachable_code",
)
EXTERN_CRATE = "extern crate"
CRATE_ATTRIBUTE_PREFIX = "#!["
RUN_SIGNATURE = "fn run() -> std::result::Result<(), Box<dyn std::error::Error>> {\n"
RUN_EPILOGUE = "Ok(())\n}\n\nfn main() {\n    run().unwrap();\n}\n"
NO_RUN_ATTRIBUTE = "rust,no_run"
HIDDEN_MARKER = "#"


@dataclass(frozen=True, slots=True)
class Program:
    """Compilable example derived from a snippet."""

    source: str
    code: str
    before: str = ""
    after: str = ""
    no_run: bool = False

    @property
    def uses_question(self) -> bool:
        return bool(self.before or self.after)

    def format(self, comment: str) -> str:
        """Render the snippet as a fenced doc comment behind ``comment``.

        The scaffolding is emitted as ``#`` lines so rustdoc hides it while
        still compiling the example exactly as it was run.
        """
        attribute = NO_RUN_ATTRIBUTE if self.no_run else ""
        hidden = f"{comment} {HIDDEN_MARKER}"
        parts: list[str] = [f"{comment} ```{attribute}\n"]
        append_indented(parts, self.before, hidden)
        append_indented(parts, self.code, comment)
        append_indented(parts, self.after, hidden)
        parts.append(f"{comment} ```\n")
        return "".join(parts)


def _split_crate_attributes(snippet: str) -> tuple[str, str]:
    """Separate ``#![...]`` lines, which must open the crate, from the code."""
    attributes: list[str] = []
    code: list[str] = []
    for line in iter_lines(snippet):
        target = attributes if line.startswith(CRATE_ATTRIBUTE_PREFIX) else code
        target.append(f"{line}\n")
    return "".join(attributes), "".join(code)


def transform(config: DocgenConfig, snippet: str) -> Program:
    """Wrap ``snippet`` into a program compilable as a Cargo example."""
    attributes, code = _split_crate_attributes(snippet)

    header: list[str] = [attributes]
    header.extend(f"#![allow({lint})]\n" for lint in ALLOWED_LINTS)
    if EXTERN_CRATE not in code:
        header.append(f"{EXTERN_CRATE} {config.crate_name};\n")

    before = ""
    after = ""
    if config.question:
        before = RUN_SIGNATURE
        after = RUN_EPILOGUE
        body = f"{before}{code}{after}"
    else:
        body = f"fn main() {{\n{code}}}\n"

    source = "".join(header) + body
    _log.debug("Synthesized program:\n%s", source)
    return Program(source=source, code=code, before=before, after=after, no_run=config.no_run)


__all__ = ["ALLOWED_LINTS", "Program", "transform"]
