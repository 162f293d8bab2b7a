"""Page capability interface consumed by the page analyzer.

A page "flavor" (static HTML, remote page, test fixture) implements
:class:`PageSource`. The analyzer composes one source with an identifier
resolver instead of subclassing per flavor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Protocol, runtime_checkable

from dtkbuild.types import ModuleFormat


@dataclass(frozen=True)
class ScriptContext:
    """Reference to one script element of a page.

    Attributes:
        index: Position of the script in document order.
        src: External source reference, None for inline scripts.
        inline_text: Inline script body, if any.
        attributes: Element attributes.
        module_path: Module path the script lives under, used to resolve
            relative identifiers ("" for page-level scripts).
    """

    index: int
    src: Optional[str] = None
    inline_text: Optional[str] = None
    attributes: Mapping[str, str] = field(default_factory=dict, hash=False)
    module_path: str = ""

    @property
    def is_inline(self) -> bool:
        return self.src is None


@runtime_checkable
class PageSource(Protocol):
    """Capabilities a page must provide for module analysis."""

    def scripts(self) -> Iterable[ScriptContext]:
        """Return all script elements in document order.

        Raises:
            PageSourceError: If the page cannot be enumerated.
        """
        ...

    def is_loader(self, script: ScriptContext) -> bool:
        """Does this script contain the module loader?"""
        ...

    def script_text(self, script: ScriptContext) -> Optional[str]:
        """Return the script's source text.

        Returns None, or raises ScriptUnavailableError, when the text
        cannot be retrieved.
        """
        ...

    def module_format(self, script: ScriptContext) -> Optional[ModuleFormat]:
        """Return a module format declared by a pre-loader script, if any."""
        ...


__all__ = ["ScriptContext", "PageSource"]
