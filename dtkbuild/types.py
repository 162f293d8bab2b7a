"""Shared enumerations for page analysis."""

from enum import Enum


class ParsePhase(str, Enum):
    """Analysis phase of a page pass.

    PRE_LOADER -> POST_LOADER is the only regular transition. ERROR is
    terminal and reachable from either state.
    """

    PRE_LOADER = "pre_loader"
    POST_LOADER = "post_loader"
    ERROR = "error"


class ModuleFormat(str, Enum):
    """Module format used by the page's scripts."""

    NON_AMD = "non_amd"
    AMD = "amd"


__all__ = ["ParsePhase", "ModuleFormat"]
