"""Build digest generation.

Variable build parameters are canonicalized to compact, key-sorted JSON,
hashed, Base64 encoded, and made safe for use as a directory name. The
result identifies the same build across requests and is used as the
cache key for build results.

List order (packages, layers, modules within a layer) is significant:
requests listing the same items in a different order get different
references.
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from typing import TYPE_CHECKING, Any

from dtkbuild.errors import BuildDigestError

if TYPE_CHECKING:
    from dtkbuild.build.request import BuildRequest

logger = logging.getLogger("dtkbuild.build.digest")

DEFAULT_ALGORITHM = "sha1"

# Base64 characters that are unsafe in a path segment
PATH_SAFE_TRANSLATION = str.maketrans({"+": "~", "/": "_", "=": "_"})


def canonical_json(value: Any) -> str:
    """Serialize a value to canonical JSON (sorted keys, compact separators)."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def path_safe_b64(raw: bytes) -> str:
    """Base64 encode bytes and remap characters unsafe in paths."""
    return base64.b64encode(raw).decode("ascii").translate(PATH_SAFE_TRANSLATION)


def compute_digest(request: "BuildRequest", algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Compute the build reference for a request.

    Args:
        request: Build request to hash.
        algorithm: hashlib algorithm name.

    Returns:
        Path-safe digest string.

    Raises:
        BuildDigestError: If canonicalization or hashing fails.
    """
    try:
        layers_json = canonical_json(request.layers_payload())
        packages_json = canonical_json(request.packages_payload())

        md = hashlib.new(algorithm)
        for part in (
            layers_json,
            packages_json,
            request.cdn,
            request.themes,
            request.optimise,
            request.css_optimise,
            request.platforms,
        ):
            md.update(part.encode("utf-8"))
        digest = path_safe_b64(md.digest())
    except (TypeError, ValueError) as e:
        raise BuildDigestError(f"Unable to compute build digest: {e}") from e

    logger.debug("Computed build reference %s (%s)", digest, algorithm)
    return digest


__all__ = ["canonical_json", "path_safe_b64", "compute_digest", "DEFAULT_ALGORITHM"]
