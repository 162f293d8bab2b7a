"""Build request model.

A build request holds the full details of a toolkit build. All requests are
identified by a build reference, a digest of the variable parameters that
is computed once when the request is created and used to cache the build
result.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, PrivateAttr, ValidationError

from dtkbuild.build.collaborators import BuildStatusManager, PackageRepository
from dtkbuild.build.digest import canonical_json, compute_digest
from dtkbuild.build.paths import BuildResultLocation
from dtkbuild.build.prefixes import resolve_prefixes
from dtkbuild.build.profile import render_profile
from dtkbuild.config.schema import BuildConfig
from dtkbuild.errors import InvalidBuildRequestError

logger = logging.getLogger("dtkbuild.build.request")

DOJO_PACKAGE = "dojo"


class PackageSpec(BaseModel):
    """Package referenced by a build, at a specific version."""

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)

    model_config = {"frozen": True}


class LayerModule(BaseModel):
    """Module included in a layer, with the package that owns it."""

    name: str = Field(min_length=1)
    package: str = Field(min_length=1)

    model_config = {"frozen": True}


class LayerSpec(BaseModel):
    """Named group of modules bundled into one output file."""

    name: str = Field(min_length=1)
    modules: Tuple[LayerModule, ...] = ()

    model_config = {"frozen": True}

    @property
    def module_names(self) -> List[str]:
        return [module.name for module in self.modules]


class BuildRequest(BaseModel):
    """Immutable build request.

    Attributes:
        packages: Packages the layer modules reference.
        cdn: Content delivery network.
        optimise: Layer optimisation level.
        css_optimise: CSS optimisation level (``cssOptimise`` on the wire).
        platforms: Target platforms.
        themes: Themes to include.
        layers: Build layers.
    """

    packages: Tuple[PackageSpec, ...]
    cdn: str = "none"
    optimise: str
    css_optimise: str = Field(alias="cssOptimise")
    platforms: str = ""
    themes: str = ""
    layers: Tuple[LayerSpec, ...]

    model_config = {"frozen": True, "populate_by_name": True}

    _build_reference: str = PrivateAttr()
    _config: BuildConfig = PrivateAttr()

    def model_post_init(self, context: Any) -> None:
        config = None
        if isinstance(context, dict):
            config = context.get("build_config")
        self._config = config or BuildConfig()
        # Raises BuildDigestError; no request exists without a reference.
        self._build_reference = compute_digest(self, self._config.digest_algorithm)

    def model_copy(
        self, *, update: Optional[Mapping[str, Any]] = None, deep: bool = False
    ) -> "BuildRequest":
        """Copy the request, recomputing the build reference on update.

        Updated parameters go through validation again so the copy never
        carries the reference of the request it was copied from.

        Raises:
            InvalidBuildRequestError: If the updated parameters are malformed.
            BuildDigestError: If the build reference cannot be computed.
        """
        if not update:
            return super().model_copy(deep=deep)

        data = self.model_dump(mode="json")
        for key, value in update.items():
            data["css_optimise" if key == "cssOptimise" else key] = value
        return type(self).from_dict(data, self._config)

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], config: Optional[BuildConfig] = None
    ) -> "BuildRequest":
        """Create a build request from user-supplied parameters.

        Args:
            data: Request parameters (``packages``, ``cdn``, ``optimise``,
                ``cssOptimise``, ``platforms``, ``themes``, ``layers``).
            config: Build configuration.

        Returns:
            BuildRequest instance.

        Raises:
            InvalidBuildRequestError: If the parameters are malformed.
            BuildDigestError: If the build reference cannot be computed.
        """
        try:
            return cls.model_validate(data, context={"build_config": config})
        except ValidationError as e:
            logger.debug("Rejected build request: %s", e)
            raise InvalidBuildRequestError(
                f"Invalid build request: {e.error_count()} error(s)", e.errors()
            ) from e

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def build_reference(self) -> str:
        """Path-safe digest identifying this set of build parameters."""
        return self._build_reference

    @property
    def config(self) -> BuildConfig:
        return self._config

    def packages_payload(self) -> List[Dict[str, str]]:
        return [package.model_dump() for package in self.packages]

    def layers_payload(self) -> List[Dict[str, Any]]:
        return [layer.model_dump(mode="json") for layer in self.layers]

    # ------------------------------------------------------------------
    # Build profile
    # ------------------------------------------------------------------

    def module_prefixes(self, repository: PackageRepository) -> List[Tuple[str, str]]:
        """Return ``(prefix, path)`` pairs for every module namespace."""
        return resolve_prefixes(self, repository)

    def profile_text(self, repository: PackageRepository) -> str:
        """Render the build profile handed to the bundler."""
        return render_profile(self, repository)

    # ------------------------------------------------------------------
    # Result locations
    # ------------------------------------------------------------------

    def result_location(self, status: BuildStatusManager) -> BuildResultLocation:
        return BuildResultLocation(
            cache_root=Path(status.cache_root()),
            build_reference=self.build_reference,
            archive_filename=self._config.archive_filename,
            layer_artifact_subpath=self._config.layer_artifact_subpath,
        )

    def result_dir(self, status: BuildStatusManager) -> Path:
        """Directory holding this build's artifacts, archive and profile."""
        return self.result_location(status).result_dir

    def result_archive_path(self, status: BuildStatusManager) -> Path:
        return self.result_location(status).archive_path

    def layer_output_paths(self, status: BuildStatusManager) -> List[Path]:
        return self.result_location(status).layer_output_paths(self.layer_names)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def layer_names(self) -> List[str]:
        return [layer.name for layer in self.layers]

    @property
    def dojo_package(self) -> Optional[PackageSpec]:
        for package in self.packages:
            if package.name == DOJO_PACKAGE:
                return package
        return None

    @property
    def dojo_version(self) -> Optional[str]:
        package = self.dojo_package
        return package.version if package else None

    def dojo_location(self, repository: PackageRepository) -> Optional[Path]:
        """Return the install location of the requested toolkit version."""
        package = self.dojo_package
        if package is None:
            return None
        return Path(repository.locate(package.name, package.version))

    def serialise(self) -> str:
        """Return a human-readable description of the request."""
        return (
            f"dtkbuild.BuildRequest: packages={canonical_json(self.packages_payload())} "
            f"cdn={self.cdn}, optimise={self.optimise}, cssOptimise={self.css_optimise}, "
            f"platforms={self.platforms}, themes={self.themes}, "
            f"layers={canonical_json(self.layers_payload())}"
        )


__all__ = ["PackageSpec", "LayerModule", "LayerSpec", "BuildRequest"]
