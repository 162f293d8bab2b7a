"""Configuration schema definitions using Pydantic for validation.

Strongly-typed configuration for the page analyzer and the build-request
engine. Using Pydantic ensures configuration errors are caught early with
clear error messages.
"""

import hashlib
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from dtkbuild.types import ModuleFormat

if TYPE_CHECKING:
    from dtkbuild.build.collaborators import LocalBuildStatusManager, LocalPackageRepository

DEFAULT_LOADER_PATTERN = r"(^|/)dojo(\.xd)?\.js(\.uncompressed\.js)?$"


class AnalyzerConfig(BaseModel):
    """Configuration for page analysis.

    Attributes:
        default_module_format: Module format assumed until a page signals
            otherwise during pre-loader scanning.
        loader_pattern: Regex matched against a script's src path to
            detect the module loader.
        request_timeout: Timeout for fetching external scripts (seconds).
        max_script_size: Maximum script size to parse (bytes, 0 = unlimited).
    """

    default_module_format: ModuleFormat = ModuleFormat.NON_AMD
    loader_pattern: str = DEFAULT_LOADER_PATTERN
    request_timeout: float = Field(default=15.0, gt=0.0, le=600.0)
    max_script_size: int = Field(default=0, ge=0)

    model_config = {"extra": "allow"}

    @field_validator("loader_pattern")
    @classmethod
    def validate_loader_pattern(cls, v: str) -> str:
        """Validate that the loader pattern compiles."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid loader_pattern {v!r}: {e}") from e
        return v


class BuildConfig(BaseModel):
    """Configuration for build requests.

    Attributes:
        digest_algorithm: hashlib algorithm used for build references.
        archive_filename: File name of the packaged build result.
        layer_artifact_subpath: Location of built layers inside a result dir.
    """

    digest_algorithm: str = "sha1"
    archive_filename: str = "dojo.zip"
    layer_artifact_subpath: str = "dojo/dojo"

    model_config = {"extra": "allow"}

    @field_validator("digest_algorithm")
    @classmethod
    def validate_algorithm(cls, v: str) -> str:
        """Validate that the digest algorithm is available."""
        name = v.lower()
        if name not in hashlib.algorithms_available:
            raise ValueError(
                f"Unknown digest algorithm '{v}'. "
                f"Available: {sorted(hashlib.algorithms_guaranteed)}"
            )
        if name.startswith("shake_"):
            raise ValueError(
                f"Digest algorithm '{v}' has a variable output length; "
                "use a fixed-length algorithm such as sha1 or sha256"
            )
        return name

    @field_validator("archive_filename")
    @classmethod
    def validate_archive_filename(cls, v: str) -> str:
        """Archive name must be a single path segment."""
        if not v or "/" in v or "\\" in v or v in {".", ".."}:
            raise ValueError(f"Invalid archive_filename: {v!r}")
        return v


class ServiceConfig(BaseModel):
    """Top-level configuration.

    Attributes:
        analyzer: Page analyzer configuration.
        build: Build request configuration.
        package_root: Root directory of installed packages.
        cache_root: Root directory of cached build results.
    """

    analyzer: AnalyzerConfig = Field(default_factory=AnalyzerConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    package_root: Optional[Path] = None
    cache_root: Optional[Path] = None

    @classmethod
    def default(cls) -> "ServiceConfig":
        """Return configuration with all defaults."""
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServiceConfig":
        """Create configuration from dictionary.

        Args:
            data: Configuration dictionary.

        Returns:
            ServiceConfig instance.

        Raises:
            ValidationError: If configuration is invalid.
        """
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Configuration as dictionary.
        """
        return self.model_dump()

    def package_repository(self) -> "LocalPackageRepository":
        """Return the on-disk package repository rooted at ``package_root``.

        Raises:
            ValueError: If no package root is configured.
        """
        from dtkbuild.build.collaborators import LocalPackageRepository

        if self.package_root is None:
            raise ValueError("package_root is not configured")
        return LocalPackageRepository(self.package_root)

    def build_status(self) -> "LocalBuildStatusManager":
        """Return the build status manager rooted at ``cache_root``.

        Raises:
            ValueError: If no cache root is configured.
        """
        from dtkbuild.build.collaborators import LocalBuildStatusManager

        if self.cache_root is None:
            raise ValueError("cache_root is not configured")
        return LocalBuildStatusManager(self.cache_root)
