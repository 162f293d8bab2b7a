"""Page module-dependency analysis.

Each analyzer is initialised with a page source. During construction it
walks the page's script elements in document order. Scripts before the
module loader only set up configuration, so they are checked for the
loader (and for a module-format signal) but never scanned for
dependencies. Once the loader has been detected, every subsequent script
has its source retrieved and scanned for module dependencies.

All discovered modules are kept in a registry, arranged by package.
"""

import logging
from typing import Dict, List, Optional

from dtkbuild.analysis.page_source import PageSource, ScriptContext
from dtkbuild.analysis.registry import ModuleRegistry
from dtkbuild.analysis.resolver import IdentifierResolver
from dtkbuild.analysis.script_parser import ScriptDependencyParser, parser_for
from dtkbuild.config.schema import AnalyzerConfig
from dtkbuild.errors import AnalysisError, PageSourceError, ScriptUnavailableError
from dtkbuild.types import ModuleFormat, ParsePhase

logger = logging.getLogger("dtkbuild.analysis.page")


class PageAnalyzer:
    """Discovers the modules a page depends on once its loader is present.

    The whole analysis pass runs inside ``__init__``; afterwards the
    instance is read-only.
    """

    def __init__(
        self,
        source: PageSource,
        resolver: Optional[IdentifierResolver] = None,
        config: Optional[AnalyzerConfig] = None,
    ) -> None:
        """Analyse a page.

        Args:
            source: Page capability used to enumerate and read scripts.
            resolver: Identifier resolver (defaults to IdentifierResolver()).
            config: Analyzer configuration.
        """
        self.source = source
        self.resolver = resolver or IdentifierResolver()
        self.config = config or AnalyzerConfig()

        self._phase = ParsePhase.PRE_LOADER
        self._module_format = ModuleFormat(self.config.default_module_format)
        self._registry = ModuleRegistry()
        self._parsers: Dict[ModuleFormat, ScriptDependencyParser] = {}

        self._parse()

    @property
    def phase(self) -> ParsePhase:
        return self._phase

    @property
    def module_format(self) -> ModuleFormat:
        return self._module_format

    def has_found_loader(self) -> bool:
        return self._phase == ParsePhase.POST_LOADER

    def get_modules(self) -> Dict[str, List[str]]:
        """Return discovered module identifiers, organised by package.

        Returns:
            Fresh ``{package: [absolute module ids]}`` mapping.

        Raises:
            AnalysisError: If the analysis pass hit a fatal error.
        """
        if self._phase == ParsePhase.ERROR:
            raise AnalysisError()
        return self._registry.as_dict()

    def _parse(self) -> None:
        try:
            for script in self.source.scripts():
                if self._phase == ParsePhase.PRE_LOADER:
                    self._parse_pre_loader_script(script)
                else:
                    self._parse_post_loader_script(script)
        except PageSourceError as e:
            logger.error("Page analysis failed: %s", e)
            self._phase = ParsePhase.ERROR
            return

        if self._phase == ParsePhase.PRE_LOADER:
            logger.debug("No module loader found on page")

    def _parse_pre_loader_script(self, script: ScriptContext) -> None:
        declared = self.source.module_format(script)
        if declared is not None and declared != self._module_format:
            logger.info(
                "Script #%d switches module format %s -> %s",
                script.index,
                self._module_format.value,
                ModuleFormat(declared).value,
            )
            self._module_format = ModuleFormat(declared)

        if self.source.is_loader(script):
            logger.info("Module loader found in script #%d (%s)", script.index, script.src)
            self._phase = ParsePhase.POST_LOADER

    def _parse_post_loader_script(self, script: ScriptContext) -> None:
        try:
            contents = self.source.script_text(script)
        except ScriptUnavailableError as e:
            logger.debug("Skipping script #%d: %s", script.index, e)
            return
        if contents is None:
            logger.debug("Skipping script #%d: no source available", script.index)
            return

        max_size = self.config.max_script_size
        if max_size and len(contents) > max_size:
            logger.debug(
                "Skipping script #%d: %d chars exceeds max_script_size",
                script.index,
                len(contents),
            )
            return

        for raw_id in self._script_parser().parse(contents):
            module_id = self.resolver.resolve_absolute(raw_id, script)
            if not module_id:
                continue
            package = self.resolver.derive_package(module_id)
            self._registry.register(package, module_id)

    def _script_parser(self) -> ScriptDependencyParser:
        parser = self._parsers.get(self._module_format)
        if parser is None:
            parser = parser_for(self._module_format)
            self._parsers[self._module_format] = parser
        return parser


__all__ = ["PageAnalyzer"]
