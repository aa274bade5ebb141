"""Line-prefixing helpers used to turn text back into doc comments."""

from __future__ import annotations

from collections.abc import Iterator


def iter_lines(text: str) -> Iterator[str]:
    """Yield the lines of ``text`` without their terminators.

    A final newline does not open an extra empty line, while an unterminated
    trailing line is still reported.
    """
    if not text:
        return
    pieces = text.split("\n")
    if pieces[-1] == "":
        pieces.pop()
    for piece in pieces:
        yield piece.removesuffix("\r")


def append_indented(parts: list[str], text: str, prefix: str) -> None:
    """Append every line of ``text`` to ``parts`` behind ``prefix``."""
    parts.extend(f"{prefix} {line}\n" for line in iter_lines(text))


def indent(text: str, prefix: str) -> str:
    """Return ``text`` with each line rewritten as ``prefix + " " + line``."""
    parts: list[str] = []
    append_indented(parts, text, prefix)
    return "".join(parts)


__all__ = ["append_indented", "indent", "iter_lines"]
