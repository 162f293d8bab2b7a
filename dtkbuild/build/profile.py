"""Build profile rendering for the downstream bundler."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List

from dtkbuild.build.prefixes import resolve_prefixes
from dtkbuild.errors import ProfileRenderError

if TYPE_CHECKING:
    from dtkbuild.build.collaborators import PackageRepository
    from dtkbuild.build.request import BuildRequest

logger = logging.getLogger("dtkbuild.build.profile")

PROFILE_FORMAT = "dependencies = {profile};"


def profile_layers(request: "BuildRequest") -> List[Dict[str, Any]]:
    return [
        {"dependencies": layer.module_names, "name": layer.name}
        for layer in request.layers
    ]


def build_profile(request: "BuildRequest", repository: "PackageRepository") -> Dict[str, Any]:
    """Assemble the profile object. Key order is part of the bundler contract."""
    return {
        "layers": profile_layers(request),
        "layerOptimize": request.optimise,
        "prefixes": [list(pair) for pair in resolve_prefixes(request, repository)],
        "cssOptimize": request.css_optimise,
    }


def render_profile(request: "BuildRequest", repository: "PackageRepository") -> str:
    """Render the build profile text for a request.

    Args:
        request: Build request.
        repository: Package repository used to resolve module prefixes.

    Returns:
        Profile text of the form ``dependencies = {...};``.

    Raises:
        ProfileRenderError: If the profile cannot be serialized.
        PrefixResolutionError: If a module prefix cannot be resolved.
    """
    profile = build_profile(request, repository)
    try:
        text = json.dumps(profile, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        logger.error("Unable to render build profile for %s: %s", request.build_reference, e)
        raise ProfileRenderError(f"Unable to render build profile: {e}") from e
    return PROFILE_FORMAT.format(profile=text)


__all__ = ["PROFILE_FORMAT", "profile_layers", "build_profile", "render_profile"]
