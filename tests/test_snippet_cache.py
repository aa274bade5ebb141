from __future__ import annotations

from pathlib import Path

import pytest

from docgen.core import cache as snippet_cache
from docgen.core.cache import DELIMITER, SnippetCache, cache_path
from docgen.core.exceptions import SnippetCacheError


def test_cache_path_appends_suffix(tmp_path: Path) -> None:
    assert cache_path(tmp_path / "readme.md") == tmp_path / "readme.md.cache"


def test_missing_cache_is_empty(tmp_path: Path) -> None:
    cache = SnippetCache.load(tmp_path / "readme.md")
    assert cache.entries == []
    assert len(cache) == 0


def test_round_trip_preserves_order_and_whitespace(tmp_path: Path) -> None:
    document = tmp_path / "readme.md"
    bodies = ["foo();\n", "  let x = 1;\n\n  bar(x);\n", "", "tail without newline"]

    snippet_cache.save(document, bodies)

    assert snippet_cache.load(document).entries == bodies


def test_persisted_format_has_trailing_delimiter(tmp_path: Path) -> None:
    document = tmp_path / "readme.md"
    snippet_cache.save(document, ["a\n", "b\n"])

    payload = cache_path(document).read_text(encoding="utf-8")

    assert payload == f"a\n{DELIMITER}b\n{DELIMITER}"
    assert payload.split(DELIMITER) == ["a\n", "b\n", ""]


def test_save_overwrites_previous_content(tmp_path: Path) -> None:
    document = tmp_path / "readme.md"
    snippet_cache.save(document, ["old\n", "older\n"])
    snippet_cache.save(document, ["new\n"])

    assert snippet_cache.load(document).entries == ["new\n"]
    assert not (tmp_path / "readme.md.cache.tmp").exists()


def test_record_is_in_memory_until_saved(tmp_path: Path) -> None:
    document = tmp_path / "readme.md"
    cache = SnippetCache.load(document)

    assert snippet_cache.record(cache, "foo();\n") is True
    assert snippet_cache.contains(cache, "foo();\n")
    assert cache.dirty is True
    assert not cache_path(document).exists()

    cache.save()
    assert cache.dirty is False
    assert "foo();\n" in SnippetCache.load(document)


def test_record_ignores_duplicates(tmp_path: Path) -> None:
    cache = SnippetCache.load(tmp_path / "readme.md")
    cache.record("a\n")
    cache.record("a\n")
    assert list(cache) == ["a\n"]


def test_contains_is_exact_match(tmp_path: Path) -> None:
    cache = SnippetCache(path=tmp_path / "x.cache", entries=["foo();\n"])
    assert not cache.contains("foo();")
    assert not cache.contains(" foo();\n")


def test_record_declines_body_containing_delimiter(tmp_path: Path) -> None:
    cache = SnippetCache.load(tmp_path / "readme.md")
    assert cache.record(f"a\n{DELIMITER}b\n") is False
    assert cache.entries == []


def test_unreadable_cache_is_an_error(tmp_path: Path) -> None:
    document = tmp_path / "readme.md"
    cache_path(document).write_bytes(b"\xff\xfe\xfa not utf-8")

    with pytest.raises(SnippetCacheError, match="Unable to read snippet cache"):
        SnippetCache.load(document)


def test_unwritable_cache_is_an_error(tmp_path: Path) -> None:
    cache = SnippetCache(path=tmp_path / "missing" / "readme.md.cache", entries=["a\n"])
    with pytest.raises(SnippetCacheError, match="Cannot write snippet cache"):
        cache.save()
