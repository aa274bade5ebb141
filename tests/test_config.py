from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError
import pytest

from docgen.core.config import DocgenConfig, parse_indent
from docgen.core.scanner import Directives


@pytest.mark.parametrize(
    ("value", "expected"),
    [("0", ""), ("4", "    "), ("1t", "\t"), ("2t", "\t\t"), ("", ""), ("  ", "  ")],
)
def test_parse_indent(value: str, expected: str) -> None:
    assert parse_indent(value) == expected


def test_parse_indent_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="Invalid indent"):
        parse_indent("four")


def test_invalid_indent_surfaces_as_validation_error() -> None:
    with pytest.raises(ValidationError):
        DocgenConfig(crate_name="demo", indent="x")


def test_crate_name_hyphens_become_underscores() -> None:
    assert DocgenConfig(crate_name="easy-shortcuts").crate_name == "easy_shortcuts"


def test_item_comment_uses_indent() -> None:
    config = DocgenConfig(crate_name="demo", indent="4")
    assert config.comment == "    ///"


def test_module_comment_ignores_indent() -> None:
    config = DocgenConfig(crate_name="demo", indent="4", module=True)
    assert config.comment == "//!"


def test_module_doc_implies_module() -> None:
    config = DocgenConfig(crate_name="demo", module_doc=True)
    assert config.module is True
    assert config.comment == "//!"


def test_examples_dir_defaults_under_project_root(tmp_path: Path) -> None:
    config = DocgenConfig(crate_name="demo", project_root=tmp_path)
    assert config.examples_dir == tmp_path / "examples"


def test_config_is_frozen() -> None:
    config = DocgenConfig(crate_name="demo")
    with pytest.raises(ValidationError):
        config.question = True  # type: ignore[misc]


def test_directives_override_for_one_copy_only() -> None:
    config = DocgenConfig(crate_name="demo")

    effective = config.with_directives(Directives(question=True, no_run=True))

    assert effective.question is True
    assert effective.no_run is True
    assert config.question is False
    assert config.no_run is False


def test_directives_keep_configured_defaults() -> None:
    config = DocgenConfig(crate_name="demo", no_run=True)
    effective = config.with_directives(Directives())
    assert effective.no_run is True
    assert effective.question is False
