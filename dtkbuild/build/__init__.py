"""Build-request engine: digests, profiles, prefixes and result paths."""

from .collaborators import (
    BuildStatusManager,
    LocalBuildStatusManager,
    LocalPackageRepository,
    PackageRepository,
)
from .digest import canonical_json, compute_digest, path_safe_b64
from .paths import BuildResultLocation
from .prefixes import module_prefix, resolve_prefixes
from .profile import PROFILE_FORMAT, render_profile
from .request import BuildRequest, LayerModule, LayerSpec, PackageSpec

__all__ = [
    "BuildStatusManager",
    "LocalBuildStatusManager",
    "LocalPackageRepository",
    "PackageRepository",
    "canonical_json",
    "compute_digest",
    "path_safe_b64",
    "BuildResultLocation",
    "module_prefix",
    "resolve_prefixes",
    "PROFILE_FORMAT",
    "render_profile",
    "BuildRequest",
    "LayerModule",
    "LayerSpec",
    "PackageSpec",
]
