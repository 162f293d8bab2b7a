"""HTML page flavor for page analysis.

Parses an HTML document with lxml and exposes its ``<script>`` elements
through the :class:`~dtkbuild.analysis.page_source.PageSource` capability.
External scripts are fetched over HTTP for remote pages, or read from disk
for pages stored in a local directory.
"""

import logging
import posixpath
import re
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import urljoin, urlsplit

import requests
from lxml import etree
from lxml import html as lxml_html

from dtkbuild.analysis.page_source import ScriptContext
from dtkbuild.config.schema import AnalyzerConfig
from dtkbuild.errors import PageSourceError, ScriptUnavailableError
from dtkbuild.types import ModuleFormat

logger = logging.getLogger("dtkbuild.analysis.html_page")

CONFIG_ATTRIBUTES = ("data-dojo-config", "djconfig")
_INLINE_CONFIG_RE = re.compile(r"\b(?:dojoConfig|djConfig)\s*=")
_ASYNC_RE = re.compile(r"""\basync['"]?\s*:\s*['"]?(?:true|1)\b""")


class HtmlPageSource:
    """Page source backed by an HTML document.

    Module paths of external scripts are computed relative to the directory
    holding the loader's directory, so with the loader at
    ``js/dojo/dojo.js`` a script at ``js/app/run.js`` lives under ``app``.
    """

    def __init__(
        self,
        html: Optional[Union[str, bytes]] = None,
        page_url: Optional[str] = None,
        base_dir: Optional[Path] = None,
        session: Optional[requests.Session] = None,
        config: Optional[AnalyzerConfig] = None,
    ) -> None:
        """Initialize page source.

        Args:
            html: Document text. Fetched from ``page_url`` when omitted.
            page_url: URL of a remote page; external scripts resolve against it.
            base_dir: Directory of a local page; external scripts are read
                from beneath it.
            session: HTTP session for remote fetches.
            config: Analyzer configuration.
        """
        if html is None and page_url is None:
            raise ValueError("Either html or page_url is required")
        self._html = html
        self.page_url = page_url
        self.base_dir = Path(base_dir).resolve() if base_dir is not None else None
        self.session = session or requests.Session()
        self.config = config or AnalyzerConfig()
        self._loader_re = re.compile(self.config.loader_pattern)
        self._scripts: Optional[List[ScriptContext]] = None

    @classmethod
    def from_file(cls, path: Path, config: Optional[AnalyzerConfig] = None) -> "HtmlPageSource":
        """Create a source for an HTML file on disk.

        Raises:
            PageSourceError: If the file cannot be read.
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise PageSourceError(f"Cannot read page {path}: {e}") from e
        return cls(html=data, base_dir=path.parent, config=config)

    # ------------------------------------------------------------------
    # PageSource capability
    # ------------------------------------------------------------------

    def scripts(self) -> List[ScriptContext]:
        if self._scripts is None:
            self._scripts = self._enumerate_scripts()
        return list(self._scripts)

    def is_loader(self, script: ScriptContext) -> bool:
        if script.src is None:
            return False
        return bool(self._loader_re.search(_src_path(script.src)))

    def module_format(self, script: ScriptContext) -> Optional[ModuleFormat]:
        for name in CONFIG_ATTRIBUTES:
            value = script.attributes.get(name)
            if value is not None:
                return ModuleFormat.AMD if _ASYNC_RE.search(value) else None

        text = script.inline_text
        if text and _INLINE_CONFIG_RE.search(text) and _ASYNC_RE.search(text):
            return ModuleFormat.AMD
        return None

    def script_text(self, script: ScriptContext) -> Optional[str]:
        if script.src is None:
            return script.inline_text

        src = script.src
        if self.page_url is not None or urlsplit(src).netloc:
            return self._fetch_remote(src)
        if self.base_dir is not None:
            return self._read_local(src)
        raise ScriptUnavailableError(f"No base location to resolve script {src!r}")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load_document(self) -> etree._Element:
        html = self._html
        if html is None:
            logger.info("Fetching page %s", self.page_url)
            try:
                response = self.session.get(self.page_url, timeout=self.config.request_timeout)
                response.raise_for_status()
            except requests.RequestException as e:
                raise PageSourceError(f"Cannot fetch page {self.page_url}: {e}") from e
            html = response.content

        try:
            return lxml_html.document_fromstring(html)
        except (etree.ParserError, ValueError) as e:
            raise PageSourceError(f"Cannot parse page: {e}") from e

    def _enumerate_scripts(self) -> List[ScriptContext]:
        document = self._load_document()
        elements = list(document.iter("script"))
        paths = [_src_path(el.get("src")) if el.get("src") else None for el in elements]

        modules_root: Optional[str] = None
        for path in paths:
            if path and self._loader_re.search(path):
                modules_root = posixpath.dirname(posixpath.dirname(path))
                break

        scripts = []
        for index, (element, path) in enumerate(zip(elements, paths)):
            attributes = {str(k).lower(): str(v) for k, v in element.attrib.items()}
            scripts.append(
                ScriptContext(
                    index=index,
                    src=element.get("src"),
                    inline_text=element.text,
                    attributes=attributes,
                    module_path=_module_path(path, modules_root),
                )
            )
        logger.debug("Found %d script elements", len(scripts))
        return scripts

    def _fetch_remote(self, src: str) -> str:
        if self.page_url is not None:
            url = urljoin(self.page_url, src)
        elif src.startswith("//"):
            url = "https:" + src
        else:
            url = src

        try:
            response = self.session.get(url, timeout=self.config.request_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ScriptUnavailableError(f"Cannot fetch script {url}: {e}") from e
        return response.text

    def _read_local(self, src: str) -> str:
        if self.base_dir is None:
            raise ScriptUnavailableError(f"No page directory to read script {src!r} from")
        target = (self.base_dir / _src_path(src).lstrip("/")).resolve()
        try:
            target.relative_to(self.base_dir)
        except ValueError as e:
            raise ScriptUnavailableError(f"Script {src!r} escapes page directory") from e

        try:
            return target.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            try:
                return target.read_text(encoding="latin-1")
            except OSError as e:
                raise ScriptUnavailableError(f"Cannot read script {target}: {e}") from e
        except OSError as e:
            raise ScriptUnavailableError(f"Cannot read script {target}: {e}") from e


def _src_path(src: str) -> str:
    """Return the path component of a script src (no query or fragment)."""
    return urlsplit(src).path


def _module_path(path: Optional[str], modules_root: Optional[str]) -> str:
    if not path or modules_root is None:
        return ""
    directory = posixpath.dirname(path)
    root = modules_root.rstrip("/")
    if not root:
        return directory.lstrip("/")
    if directory == root:
        return ""
    if directory.startswith(root + "/"):
        return directory[len(root) + 1 :]
    return ""


__all__ = ["HtmlPageSource"]
