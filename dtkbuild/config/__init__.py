"""Configuration schema and validation for dtkbuild."""

from .schema import (
    AnalyzerConfig,
    BuildConfig,
    ServiceConfig,
)

__all__ = [
    "AnalyzerConfig",
    "BuildConfig",
    "ServiceConfig",
]
