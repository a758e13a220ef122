"""A lazily filled cache in front of a read provider."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

from .errors import UriToFsPathError
from .local import LocalFs, is_typst, uri_to_path
from .source import Source

logger = logging.getLogger(__name__)


class CacheEntry:
    """The bytes and source of one URI, each read at most once until invalidated."""

    def __init__(self) -> None:
        self._source: Source | None = None
        self._bytes: bytes | None = None

    def read_bytes(self, uri: str, fs: Any, package_manager: Any) -> bytes:
        if self._bytes is None:
            self._bytes = fs.read_bytes(uri, package_manager)
        return self._bytes

    def read_source(self, uri: str, fs: Any, package_manager: Any) -> Source:
        if self._source is None:
            self._source = fs.read_source(uri, package_manager)
        return self._source

    def invalidate(self) -> None:
        self._source = None
        self._bytes = None


class Cache:
    """Caches reads of the provider `inner` by URI.

    Writing through `inner` directly leaves stale entries behind unless they
    are invalidated.
    """

    def __init__(self, fs: Any = None) -> None:
        self.inner = fs if fs is not None else LocalFs()
        self._entries: dict[str, CacheEntry] = {}

    def _entry(self, uri: str) -> CacheEntry:
        return self._entries.setdefault(uri, CacheEntry())

    def read_bytes(self, uri: str, package_manager: Any) -> bytes:
        return self._entry(uri).read_bytes(uri, self.inner, package_manager)

    def read_source(self, uri: str, package_manager: Any) -> Source:
        source = self._entry(uri).read_source(uri, self.inner, package_manager)
        return dataclasses.replace(source)

    def known_uris(self) -> set[str]:
        """Cached URIs that name local Typst sources."""
        known = set()
        for uri in list(self._entries):
            try:
                path = uri_to_path(uri)
            except UriToFsPathError:
                continue
            if is_typst(path):
                known.add(uri)
        return known

    def cache_new(self, uri: str) -> None:
        self._entry(uri)

    def invalidate(self, uri: str) -> None:
        self._entry(uri).invalidate()

    def delete(self, uri: str) -> None:
        self._entries.pop(uri, None)

    def clear(self) -> None:
        self._entries.clear()

    def register_files(self, root: str) -> None:
        """Add an entry for every source the inner provider finds under `root`."""
        for source in self.inner.search_sources(root):
            logger.debug("registering file %s", source)
            self.cache_new(source)

    def __repr__(self) -> str:
        return f"Cache(entry_keys={sorted(self._entries)!r}, fs={self.inner!r})"