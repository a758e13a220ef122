"""The workspace filesystem made of documents the editor has opened."""

from __future__ import annotations

import dataclasses
from typing import Iterable

from .errors import NotProvidedError
from .package_manager import PackageManager
from .source import PositionEncoding, Source, TextChange, range_to_offsets


class LspFs:
    """Sources provided and edited by the editor, keyed by URI."""

    def __init__(self) -> None:
        self._files: dict[str, Source] = {}

    def _source(self, uri: str) -> Source:
        try:
            return self._files[uri]
        except KeyError:
            raise NotProvidedError("URI not found") from None

    def read_bytes(self, uri: str, package_manager: PackageManager | None) -> bytes:
        return self._source(uri).text.encode("utf-8")

    def read_source(self, uri: str, package_manager: PackageManager | None) -> Source:
        return dataclasses.replace(self._source(uri))

    def known_uris(self) -> set[str]:
        return set(self._files)

    def open(self, uri: str, text: str, package_manager: PackageManager) -> None:
        full_id = package_manager.full_id(uri)
        self._files[uri] = Source(full_id.to_file_id(), text)

    def close(self, uri: str) -> None:
        self._files.pop(uri, None)

    def edit(
        self,
        uri: str,
        changes: Iterable[TextChange],
        position_encoding: PositionEncoding,
    ) -> None:
        """Apply `changes` in order; a URI that is not open is ignored."""
        source = self._files.get(uri)
        if source is None:
            return
        for change in changes:
            if change.range is None:
                source.replace(change.text)
            else:
                start, end = range_to_offsets(source.text, change.range, position_encoding)
                source.edit(start, end, change.text)

    def clear(self) -> None:
        self._files.clear()

    def __repr__(self) -> str:
        return f"LspFs(files={sorted(self._files)!r})"