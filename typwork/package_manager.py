"""Assigns canonical packages and file IDs to URIs."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator
from urllib.parse import urlsplit, urlunsplit

from .errors import ExternalPackageError, FsError, NotProvidedError
from .package import FullFileId, Package, PackageId, PackageSpec, make_relative_rooted

logger = logging.getLogger(__name__)


class PackageManager:
    """Maps URIs to the same IDs and packages for the same set of current packages.

    `external` is an optional provider of external packages offering
    `package(spec)` and `full_id(uri)`.
    """

    def __init__(self, root_uris: Iterable[str], external: Any = None) -> None:
        self._current: dict[str, Package] = {uri: Package(uri) for uri in root_uris}
        self._external = external
        logger.info("initialized package manager with %r", self._current)

    def package(self, package_id: PackageId) -> Package:
        if package_id.root is not None:
            found = self._current.get(package_id.root)
            if found is None:
                logger.debug("taking %s as the root of a single-file package", package_id.root)
                found = Package(package_id.root)
            return found
        return self._external_package(package_id.spec)

    def _external_package(self, spec: PackageSpec | None) -> Package:
        if self._external is None:
            raise ExternalPackageError(f"no provider for external package {spec}")
        return self._external.package(spec)

    def full_id(self, uri: str) -> FullFileId:
        found = self._external.full_id(uri) if self._external is not None else None
        if found is None:
            found = self._current_full_id(uri)
        if found is None:
            found = self._current_single_file_full_id(uri)
        if found is None:
            raise NotProvidedError("could not find provider for URI")
        return found

    def _current_full_id(self, uri: str) -> FullFileId | None:
        candidates = []
        for root, package in self._current.items():
            try:
                vpath = package.uri_to_vpath(uri)
            except FsError:
                continue
            logger.debug("considering %s with %s for %s", root, vpath, uri)
            candidates.append((root, vpath))
        if not candidates:
            return None
        root, vpath = max(candidates, key=lambda candidate: len(candidate[1].parts))
        return FullFileId(PackageId.new_current(root), vpath)

    def _current_single_file_full_id(self, uri: str) -> FullFileId | None:
        parts = urlsplit(uri)
        if not parts.path.startswith("/"):
            return None
        parent = parts.path[: parts.path.rstrip("/").rfind("/")] or "/"
        root = urlunsplit((parts.scheme, parts.netloc, parent, "", ""))
        try:
            vpath = make_relative_rooted(root, uri)
        except FsError:
            return None
        return FullFileId(PackageId.new_current(root), vpath)

    def handle_change_event(self, added: Iterable[str], removed: Iterable[str]) -> None:
        """Drop the `removed` workspace folders, then add the `added` ones."""
        for uri in removed:
            self._current.pop(uri, None)
        for uri in added:
            self._current[uri] = Package(uri)
        logger.info("updated current packages to %r", self._current)

    def current(self) -> Iterator[Package]:
        return iter(list(self._current.values()))