"""Page module-dependency analysis."""

from .page_source import PageSource, ScriptContext
from .registry import ModuleRegistry
from .resolver import IdentifierResolver
from .script_parser import (
    AmdScriptParser,
    NonAmdScriptParser,
    ScriptDependencyParser,
    parser_for,
)
from .page import PageAnalyzer
from .html_page import HtmlPageSource

__all__ = [
    "PageSource",
    "ScriptContext",
    "ModuleRegistry",
    "IdentifierResolver",
    "ScriptDependencyParser",
    "AmdScriptParser",
    "NonAmdScriptParser",
    "parser_for",
    "PageAnalyzer",
    "HtmlPageSource",
]
