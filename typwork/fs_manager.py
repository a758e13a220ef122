"""A single filesystem for a workspace, built from editor documents and the local disk."""

from __future__ import annotations

from typing import Iterable

from .cache import Cache
from .errors import FsError
from .local import LocalFs
from .lsp_fs import LspFs
from .package_manager import PackageManager
from .source import PositionEncoding, Source, TextChange


class FsManager:
    """Reads documents opened in the editor first, then cached files from the local disk."""

    def __init__(self, lsp: LspFs | None = None, local: Cache | None = None) -> None:
        self._lsp = lsp if lsp is not None else LspFs()
        self._local = local if local is not None else Cache(LocalFs())

    def read_bytes(self, uri: str, package_manager: PackageManager) -> bytes:
        try:
            return self._lsp.read_bytes(uri, package_manager)
        except FsError:
            pass
        return self._local.read_bytes(uri, package_manager)

    def read_source(self, uri: str, package_manager: PackageManager) -> Source:
        try:
            return self._lsp.read_source(uri, package_manager)
        except FsError:
            pass
        return self._local.read_source(uri, package_manager)

    def write_raw(self, uri: str, data: bytes) -> None:
        """Write to the local disk without updating the cache."""
        self._local.inner.write_raw(uri, data)

    def known_uris(self) -> set[str]:
        return self._local.known_uris() | self._lsp.known_uris()

    def register_files(self, root: str) -> None:
        self._local.register_files(root)

    def open_lsp(self, uri: str, text: str, package_manager: PackageManager) -> None:
        self._lsp.open(uri, text, package_manager)

    def close_lsp(self, uri: str) -> None:
        self._lsp.close(uri)

    def edit_lsp(
        self,
        uri: str,
        changes: Iterable[TextChange],
        position_encoding: PositionEncoding,
    ) -> None:
        self._lsp.edit(uri, changes, position_encoding)

    def new_local(self, uri: str) -> None:
        self._local.cache_new(uri)

    def invalidate_local(self, uri: str) -> None:
        self._local.invalidate(uri)

    def delete_local(self, uri: str) -> None:
        self._local.delete(uri)

    def clear(self) -> None:
        self._lsp.clear()
        self._local.clear()

    def __repr__(self) -> str:
        return f"FsManager(lsp={self._lsp!r}, local={self._local!r})"