"""Locate the Cargo project enclosing the working directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


try:  # Python >=3.11
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.10
    import tomli as tomllib

from docgen.core.exceptions import ProjectNotFoundError


MANIFEST_NAME = "Cargo.toml"


@dataclass(frozen=True, slots=True)
class CargoProject:
    """Root directory and crate name of a Cargo package."""

    root: Path
    crate_name: str

    @property
    def manifest(self) -> Path:
        return self.root / MANIFEST_NAME

    @property
    def examples_dir(self) -> Path:
        return self.root / "examples"


def read_crate_name(manifest: Path) -> str:
    """Return the crate name declared in ``[package]``, usable as an identifier."""
    try:
        content = tomllib.loads(manifest.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ProjectNotFoundError(f"Unable to read '{manifest}': {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ProjectNotFoundError(f"Invalid Cargo manifest '{manifest}': {exc}") from exc

    package = content.get("package")
    name = package.get("name") if isinstance(package, dict) else None
    if not isinstance(name, str) or not name.strip():
        raise ProjectNotFoundError(f"No [package] name declared in '{manifest}'.")
    return name.strip().replace("-", "_")


def locate_project(start: Path | None = None) -> CargoProject:
    """Walk up from ``start`` until a directory holding ``Cargo.toml`` is found."""
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    for candidate in (current, *current.parents):
        manifest = candidate / MANIFEST_NAME
        if manifest.is_file():
            return CargoProject(root=candidate, crate_name=read_crate_name(manifest))
    raise ProjectNotFoundError(f"'{current}' is not inside a Cargo project.")


__all__ = ["MANIFEST_NAME", "CargoProject", "locate_project", "read_crate_name"]
