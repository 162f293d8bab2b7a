"""Module identifier resolution."""

import posixpath

from dtkbuild.analysis.page_source import ScriptContext

RELATIVE_MARKERS = ("./", "../")


class IdentifierResolver:
    """Turns raw identifiers into absolute module identifiers.

    Relative identifiers (``./x``, ``../x``) are resolved against the module
    path of the script that referenced them. Everything else is already
    absolute.
    """

    def is_relative(self, raw_id: str) -> bool:
        return raw_id in (".", "..") or raw_id.startswith(RELATIVE_MARKERS)

    def resolve_absolute(self, raw_id: str, script: ScriptContext) -> str:
        """Return the absolute module identifier for ``raw_id``.

        Args:
            raw_id: Identifier as written in the script.
            script: Script the identifier was found in.

        Returns:
            Absolute module identifier, or "" when a relative identifier
            climbs above the module root.
        """
        if not self.is_relative(raw_id):
            return raw_id
        joined = posixpath.join(script.module_path, raw_id)
        resolved = posixpath.normpath(joined)
        # "." or paths climbing above the module root name no module
        if resolved == "." or resolved == ".." or resolved.startswith("../"):
            return ""
        return resolved

    def derive_package(self, absolute_id: str) -> str:
        """Return the package (top-level namespace) owning a module.

        Slash-separated identifiers use their first path segment; legacy
        dotted identifiers (``dijit.form.Button``) their first dotted segment.
        """
        separator = "/" if "/" in absolute_id else "."
        return absolute_id.split(separator, 1)[0]


__all__ = ["IdentifierResolver", "RELATIVE_MARKERS"]
