"""Exception hierarchy for dtkbuild.

Errors fall into three groups:

1. Recoverable errors - a single script cannot be read or parsed. The page
   analyzer skips the script and continues.
2. Client errors - the submitted build request is malformed. These map to
   a 4xx status for whatever surface sits in front of the core.
3. Internal errors - hashing, serialization or package lookup failed while
   processing an otherwise valid request. These map to a 5xx status.
"""


class DtkBuildError(Exception):
    """Base class for all dtkbuild errors."""

    pass


# =============================================================================
# Page analysis
# =============================================================================

class RecoverableError(DtkBuildError):
    """Base class for recoverable analysis errors.

    Raised for conditions scoped to one script. The analyzer skips the
    affected script and keeps going.
    """

    pass


class ScriptUnavailableError(RecoverableError):
    """Script source text cannot be retrieved (unreachable src, I/O error)."""

    pass


class ScriptParseError(RecoverableError):
    """Script source text is not parsable JavaScript."""

    pass


class PageSourceError(DtkBuildError):
    """The page itself cannot be enumerated (empty or malformed document)."""

    pass


class AnalysisError(DtkBuildError):
    """Fatal page analysis failure.

    Raised by ``PageAnalyzer.get_modules()`` when the analysis pass ended in
    the ERROR phase. No partial results are ever returned alongside it.
    """

    def __init__(self, message: str = "Fatal error while analysing page") -> None:
        super().__init__(message)


# =============================================================================
# Build requests
# =============================================================================

class ClientError(DtkBuildError):
    """Request-shape errors caused by the caller."""

    status_code: int = 400


class InvalidBuildRequestError(ClientError):
    """Build request parameters failed validation.

    Attributes:
        errors: Structured validation errors, one dict per problem.
    """

    def __init__(self, message: str, errors=None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class InternalError(DtkBuildError):
    """Server-side failures while processing a valid request."""

    status_code: int = 500


class BuildDigestError(InternalError):
    """Build parameters could not be canonicalized or hashed."""

    pass


class ProfileRenderError(InternalError):
    """Build profile could not be serialized."""

    pass


class PrefixResolutionError(InternalError):
    """A module prefix could not be mapped to a package location."""

    pass


class PackageNotFoundError(PrefixResolutionError):
    """The package repository has no installation for a name/version."""

    def __init__(self, name: str, version: str) -> None:
        super().__init__(f"Package {name}@{version} is not installed")
        self.name = name
        self.version = version


__all__ = [
    "DtkBuildError",
    "RecoverableError",
    "ScriptUnavailableError",
    "ScriptParseError",
    "PageSourceError",
    "AnalysisError",
    "ClientError",
    "InvalidBuildRequestError",
    "InternalError",
    "BuildDigestError",
    "ProfileRenderError",
    "PrefixResolutionError",
    "PackageNotFoundError",
]
