"""Namespace prefix resolution.

Maps the top-level namespace of every module referenced by a build's
layers to the location of the package that provides it.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Set, Tuple

from dtkbuild.errors import PrefixResolutionError

if TYPE_CHECKING:
    from dtkbuild.build.collaborators import PackageRepository
    from dtkbuild.build.request import BuildRequest

logger = logging.getLogger("dtkbuild.build.prefixes")

_PREFIX_SEPARATOR = re.compile(r"[./]")


def module_prefix(module_name: str) -> str:
    """Return the namespace prefix of a module (``dojo.parser`` -> ``dojo``)."""
    return _PREFIX_SEPARATOR.split(module_name, 1)[0]


def package_locations(
    request: "BuildRequest", repository: "PackageRepository"
) -> Dict[str, Path]:
    """Build the package name -> location lookup for one resolution call."""
    return {
        package.name: Path(repository.locate(package.name, package.version))
        for package in request.packages
    }


def resolve_prefixes(
    request: "BuildRequest", repository: "PackageRepository"
) -> List[Tuple[str, str]]:
    """Resolve module prefixes to package locations.

    Walks layers in order, then modules in order. The first module seen
    with a given prefix decides its location; later references to the same
    prefix, even from another package, are ignored.

    Args:
        request: Build request.
        repository: Package repository used to locate declared packages.

    Returns:
        Ordered ``(prefix, absolute path)`` pairs, one per prefix.

    Raises:
        PrefixResolutionError: If a module's package is not declared in the
            request or is not installed.
    """
    lookup = package_locations(request, repository)
    resolved: List[Tuple[str, str]] = []
    seen: Set[str] = set()

    for layer in request.layers:
        for module in layer.modules:
            prefix = module_prefix(module.name)
            if prefix in seen:
                continue
            location = lookup.get(module.package)
            if location is None:
                raise PrefixResolutionError(
                    f"Module {module.name!r} in layer {layer.name!r} references "
                    f"undeclared package {module.package!r}"
                )
            path = str((location / prefix).absolute())
            logger.debug("Prefix %s -> %s", prefix, path)
            resolved.append((prefix, path))
            seen.add(prefix)

    return resolved


__all__ = ["module_prefix", "package_locations", "resolve_prefixes"]
