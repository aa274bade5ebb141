"""Flat-file cache remembering which snippets of a document already ran.

The cache lives next to the document (``README.md`` -> ``README.md.cache``)
and stores each snippet body followed by :data:`DELIMITER`. The delimiter is
reserved: a body containing it cannot be stored without breaking the
round trip, so :meth:`SnippetCache.record` declines such bodies.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path

from docgen.core.exceptions import SnippetCacheError


CACHE_SUFFIX = ".cache"
DELIMITER = "---\n"
_log = logging.getLogger(__name__)


def cache_path(document: Path | str) -> Path:
    """Return the cache file associated with ``document``."""
    path = Path(document)
    return path.with_name(f"{path.name}{CACHE_SUFFIX}")


def decode(payload: str) -> list[str]:
    """Split a persisted payload into snippet bodies."""
    entries = payload.split(DELIMITER)
    # the trailing delimiter always leaves an empty element behind
    entries.pop()
    return entries


def encode(entries: Sequence[str]) -> str:
    """Serialise snippet bodies, each followed by the delimiter."""
    return "".join(f"{entry}{DELIMITER}" for entry in entries)


@dataclass(slots=True)
class SnippetCache:
    """Ordered set of snippet bodies previously executed for one document."""

    path: Path
    entries: list[str] = field(default_factory=list)
    dirty: bool = False

    @classmethod
    def load(cls, document: Path | str) -> SnippetCache:
        """Read the cache of ``document``; a missing file yields an empty cache."""
        path = cache_path(document)
        try:
            payload = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return cls(path=path)
        except (OSError, UnicodeDecodeError) as exc:
            raise SnippetCacheError(f"Unable to read snippet cache '{path}': {exc}") from exc
        entries = decode(payload)
        _log.debug("Loaded %d cached snippet(s) from %s", len(entries), path)
        return cls(path=path, entries=entries)

    def __contains__(self, body: object) -> bool:
        return body in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def contains(self, body: str) -> bool:
        """Return whether ``body`` was recorded, by exact comparison."""
        return body in self.entries

    def record(self, body: str) -> bool:
        """Remember ``body`` in memory; return ``False`` when it cannot be stored."""
        if DELIMITER in body:
            return False
        if body not in self.entries:
            self.entries.append(body)
            self.dirty = True
        return True

    def save(self) -> None:
        """Rewrite the cache file with every recorded body."""
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            tmp_path.write_text(encode(self.entries), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise SnippetCacheError(f"Cannot write snippet cache '{self.path}': {exc}") from exc
        self.dirty = False
        _log.debug("Saved %d snippet(s) to %s", len(self.entries), self.path)


def load(document: Path | str) -> SnippetCache:
    """Return the cache persisted for ``document``."""
    return SnippetCache.load(document)


def contains(cache: SnippetCache, body: str) -> bool:
    """Return whether ``body`` is already cached."""
    return cache.contains(body)


def record(cache: SnippetCache, body: str) -> bool:
    """Append ``body`` to the in-memory cache."""
    return cache.record(body)


def save(document: Path | str, cache: SnippetCache | Sequence[str]) -> None:
    """Persist ``cache`` for ``document``, overwriting any previous content."""
    entries = list(cache.entries if isinstance(cache, SnippetCache) else cache)
    SnippetCache(path=cache_path(document), entries=entries).save()


__all__ = [
    "CACHE_SUFFIX",
    "DELIMITER",
    "SnippetCache",
    "cache_path",
    "contains",
    "decode",
    "encode",
    "load",
    "record",
    "save",
]
