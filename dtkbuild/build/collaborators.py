"""Collaborators consumed by build requests.

Build requests never reach for global singletons; the package repository
and build-status manager are passed in explicitly by the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Union, runtime_checkable

from dtkbuild.errors import PackageNotFoundError

logger = logging.getLogger("dtkbuild.build.collaborators")


@runtime_checkable
class PackageRepository(Protocol):
    """Lookup of installed package locations."""

    def locate(self, name: str, version: str) -> Path:
        """Return the filesystem location of a package installation.

        Raises:
            PackageNotFoundError: If the package is not installed.
        """
        ...


@runtime_checkable
class BuildStatusManager(Protocol):
    """Owner of the build result cache."""

    def cache_root(self) -> Path:
        """Return the root directory holding cached build results."""
        ...


class LocalPackageRepository:
    """Package repository laid out as ``<root>/<name>/<version>``."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root).absolute()

    def locate(self, name: str, version: str) -> Path:
        if not name or not version or any(
            part in {".", ".."} or "/" in part or "\\" in part for part in (name, version)
        ):
            raise PackageNotFoundError(name, version)
        location = self.root / name / version
        if not location.is_dir():
            logger.debug("Package %s@%s not found under %s", name, version, self.root)
            raise PackageNotFoundError(name, version)
        return location


class LocalBuildStatusManager:
    """Build-status manager with a fixed local cache directory."""

    def __init__(self, cache_root: Union[str, Path]) -> None:
        self._cache_root = Path(cache_root).absolute()

    def cache_root(self) -> Path:
        return self._cache_root


__all__ = [
    "PackageRepository",
    "BuildStatusManager",
    "LocalPackageRepository",
    "LocalBuildStatusManager",
]
