"""Script dependency parsers for page scripts.

Uses tree-sitter to parse JavaScript source and extract the module
identifiers a script depends on. Two variants exist, one per module format:

- AMD: string literals in the dependency array passed to ``define`` or
  ``require``, e.g. ``require(["app/main", "dojo/parser"], function ...)``
- Non-AMD: legacy ``dojo.require("dijit.form.Button")`` statements

The variant is chosen by :func:`parser_for` from the module format alone.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

import tree_sitter_javascript as ts_javascript
from tree_sitter import Language, Parser

from dtkbuild.errors import ScriptParseError
from dtkbuild.types import ModuleFormat

logger = logging.getLogger("dtkbuild.analysis.script_parser")

JS_LANGUAGE = Language(ts_javascript.language())


class ScriptDependencyParser(ABC):
    """Base class for script dependency parsers.

    Subclasses inspect each ``call_expression`` node of the syntax tree and
    return the raw identifiers it declares.
    """

    FORMAT: ModuleFormat

    def __init__(self) -> None:
        self._parser = Parser(JS_LANGUAGE)

    def parse(self, source: str) -> List[str]:
        """Return raw dependency identifiers declared in a script.

        Malformed or unrelated script content yields an empty list.

        Args:
            source: JavaScript source text.

        Returns:
            List of identifiers in source order.
        """
        try:
            return self.parse_strict(source)
        except ScriptParseError as e:
            logger.debug("%s: ignoring unparsable script: %s", type(self).__name__, e)
            return []

    def parse_strict(self, source: str) -> List[str]:
        """Like :meth:`parse` but raise ScriptParseError on malformed input.

        Raises:
            ScriptParseError: If the text cannot be encoded or contains
                syntax errors.
        """
        try:
            data = source.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ScriptParseError(f"Cannot encode script text: {e}") from e

        tree = self._parser.parse(data)
        root = tree.root_node
        if root.has_error:
            raise ScriptParseError("Script contains syntax errors")

        identifiers: List[str] = []
        # Pre-order walk with an explicit stack; minified bundles nest deeply.
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "call_expression":
                identifiers.extend(self._dependencies_of(node))
            stack.extend(reversed(node.children))
        return identifiers

    @abstractmethod
    def _dependencies_of(self, call: Any) -> List[str]:
        """Return identifiers declared by one call expression node."""
        raise NotImplementedError


class AmdScriptParser(ScriptDependencyParser):
    """Parser for AMD ``define``/``require`` dependency arrays."""

    FORMAT = ModuleFormat.AMD
    CALLEES = ("define", "require")

    def _dependencies_of(self, call: Any) -> List[str]:
        func = call.child_by_field_name("function")
        if func is None or func.type != "identifier":
            return []
        if _node_text(func) not in self.CALLEES:
            return []

        args = call.child_by_field_name("arguments")
        if args is None:
            return []
        for arg in args.named_children:
            if arg.type == "array":
                return [
                    value
                    for value in (_string_value(el) for el in arg.named_children)
                    if value
                ]
        return []


class NonAmdScriptParser(ScriptDependencyParser):
    """Parser for legacy ``dojo.require("x.y.z")`` statements."""

    FORMAT = ModuleFormat.NON_AMD
    NAMESPACE = "dojo"
    METHOD = "require"

    def _dependencies_of(self, call: Any) -> List[str]:
        func = call.child_by_field_name("function")
        if func is None or func.type != "member_expression":
            return []
        obj = func.child_by_field_name("object")
        prop = func.child_by_field_name("property")
        if obj is None or prop is None:
            return []
        if _node_text(obj) != self.NAMESPACE or _node_text(prop) != self.METHOD:
            return []

        args = call.child_by_field_name("arguments")
        if args is None:
            return []
        positional = [a for a in args.named_children if a.type != "comment"]
        if not positional:
            return []
        value = _string_value(positional[0])
        return [value] if value else []


_PARSER_TYPES: Dict[ModuleFormat, Type[ScriptDependencyParser]] = {
    ModuleFormat.AMD: AmdScriptParser,
    ModuleFormat.NON_AMD: NonAmdScriptParser,
}


def parser_for(module_format: ModuleFormat) -> ScriptDependencyParser:
    """Create the dependency parser for a module format.

    Args:
        module_format: Module format in use on the page.

    Returns:
        New parser instance. Parsers are not thread-safe; callers keep
        their own instance.
    """
    return _PARSER_TYPES[ModuleFormat(module_format)]()


def _node_text(node: Any) -> str:
    text = node.text
    return text.decode("utf-8", errors="replace") if text is not None else ""


def _string_value(node: Any) -> Optional[str]:
    """Return a string literal's value without quotes, or None."""
    if node.type != "string":
        return None
    text = _node_text(node)
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1]
    return None


__all__ = [
    "ScriptDependencyParser",
    "AmdScriptParser",
    "NonAmdScriptParser",
    "parser_for",
]
