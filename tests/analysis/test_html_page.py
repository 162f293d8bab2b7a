"""HTML page flavor tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from dtkbuild.analysis.html_page import HtmlPageSource
from dtkbuild.analysis.page import PageAnalyzer
from dtkbuild.errors import AnalysisError, PageSourceError, ScriptUnavailableError
from dtkbuild.types import ModuleFormat, ParsePhase

AMD_PAGE = """<!DOCTYPE html>
<html>
<head>
  <script>var dojoConfig = { async: true, parseOnLoad: false };</script>
  <script>require(["early/config"]);</script>
  <script src="js/dojo/dojo.js"></script>
  <script src="js/app/run.js"></script>
  <script src="js/app/missing.js"></script>
  <script>require(["app/main", "dojo/domReady!"], function (main) { main(); });</script>
</head>
<body></body>
</html>
"""

LEGACY_PAGE = """<html><head>
<script type="text/javascript" src="js/dojo/dojo.js"></script>
<script type="text/javascript">
  dojo.require("dijit.form.Button");
  dojo.require("dojox.grid.DataGrid");
</script>
</head><body></body></html>
"""


def _write_site(root: Path, page: str) -> Path:
    (root / "js" / "dojo").mkdir(parents=True)
    (root / "js" / "app").mkdir(parents=True)
    (root / "js" / "dojo" / "dojo.js").write_text("/* loader */", encoding="utf-8")
    (root / "js" / "app" / "run.js").write_text(
        'define(["./util", "dojo/on"], function (util, on) { return {}; });',
        encoding="utf-8",
    )
    page_path = root / "index.html"
    page_path.write_text(page, encoding="utf-8")
    return page_path


def _response(text: str = "", status: int = 200) -> MagicMock:
    response = MagicMock()
    response.text = text
    response.content = text.encode("utf-8")
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return response


def test_local_amd_page(tmp_path: Path) -> None:
    """Local pages read external scripts from disk and resolve relative ids."""
    source = HtmlPageSource.from_file(_write_site(tmp_path, AMD_PAGE))
    analyzer = PageAnalyzer(source, config=source.config)

    assert analyzer.module_format == ModuleFormat.AMD
    assert analyzer.get_modules() == {
        "app": ["app/util", "app/main"],
        "dojo": ["dojo/on", "dojo/domReady!"],
    }


def test_local_legacy_page(tmp_path: Path) -> None:
    """Pages without async config use legacy dojo.require parsing."""
    source = HtmlPageSource.from_file(_write_site(tmp_path, LEGACY_PAGE))
    analyzer = PageAnalyzer(source)

    assert analyzer.module_format == ModuleFormat.NON_AMD
    assert analyzer.get_modules() == {
        "dijit": ["dijit.form.Button"],
        "dojox": ["dojox.grid.DataGrid"],
    }


def test_script_contexts_carry_module_paths() -> None:
    """Module paths are relative to the directory holding the loader's directory."""
    source = HtmlPageSource(html=AMD_PAGE)
    scripts = source.scripts()

    assert [s.index for s in scripts] == list(range(6))
    assert scripts[2].src == "js/dojo/dojo.js"
    assert source.is_loader(scripts[2]) is True
    assert source.is_loader(scripts[3]) is False
    assert scripts[3].module_path == "app"
    assert scripts[5].module_path == ""
    assert scripts[5].is_inline


def test_module_format_from_data_dojo_config() -> None:
    """data-dojo-config on the loader script switches to AMD."""
    html = (
        '<html><head><script src="dojo/dojo.js" data-dojo-config="async: 1"></script>'
        '<script>require(["app/main"]);</script></head></html>'
    )
    analyzer = PageAnalyzer(HtmlPageSource(html=html))

    assert analyzer.module_format == ModuleFormat.AMD
    assert analyzer.get_modules() == {"app": ["app/main"]}


def test_loader_matches_uncompressed_and_query_string() -> None:
    """Loader detection ignores query strings and accepts build variants."""
    html = (
        '<html><head>'
        '<script src="//cdn.example.com/dojo/1.9/dojo/dojo.js.uncompressed.js?v=2"></script>'
        '</head></html>'
    )
    source = HtmlPageSource(html=html)
    assert source.is_loader(source.scripts()[0]) is True


def test_missing_local_script_is_unavailable(tmp_path: Path) -> None:
    """Missing files raise ScriptUnavailableError for the analyzer to skip."""
    source = HtmlPageSource.from_file(_write_site(tmp_path, AMD_PAGE))
    missing = source.scripts()[4]
    with pytest.raises(ScriptUnavailableError):
        source.script_text(missing)


def test_local_script_cannot_escape_page_directory(tmp_path: Path) -> None:
    """Script srcs pointing outside the page directory are refused."""
    site = tmp_path / "site"
    site.mkdir()
    (tmp_path / "secret.js").write_text("dojo.require('x.y');", encoding="utf-8")
    html = '<html><head><script src="../secret.js"></script></head></html>'
    source = HtmlPageSource(html=html, base_dir=site)
    with pytest.raises(ScriptUnavailableError):
        source.script_text(source.scripts()[0])


def test_remote_page_fetches_scripts_with_session() -> None:
    """Remote pages resolve script srcs against the page URL."""
    responses = {
        "http://example.com/demo/index.html": _response(AMD_PAGE),
        "http://example.com/demo/js/app/run.js": _response('define(["./util"], function () {});'),
        "http://example.com/demo/js/app/missing.js": _response(status=404),
    }

    def fake_get(url, timeout=None):
        if url not in responses:
            raise requests.ConnectionError(url)
        return responses[url]

    session = MagicMock()
    session.get.side_effect = fake_get
    source = HtmlPageSource(page_url="http://example.com/demo/index.html", session=session)
    analyzer = PageAnalyzer(source)

    assert analyzer.get_modules() == {
        "app": ["app/util", "app/main"],
        "dojo": ["dojo/domReady!"],
    }
    requested = [call.args[0] for call in session.get.call_args_list]
    assert "http://example.com/demo/js/dojo/dojo.js" not in requested


def test_unreachable_remote_page_is_fatal() -> None:
    """A page that cannot be fetched puts the analyzer in the ERROR phase."""
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("refused")
    analyzer = PageAnalyzer(HtmlPageSource(page_url="http://example.invalid/", session=session))

    assert analyzer.phase == ParsePhase.ERROR
    with pytest.raises(AnalysisError):
        analyzer.get_modules()


def test_empty_document_raises_page_source_error() -> None:
    """Empty documents cannot be enumerated."""
    with pytest.raises(PageSourceError):
        HtmlPageSource(html="").scripts()


def test_source_requires_html_or_url() -> None:
    """Either inline html or a page URL must be supplied."""
    with pytest.raises(ValueError):
        HtmlPageSource()


def test_from_file_missing_page(tmp_path: Path) -> None:
    """Unreadable page files raise PageSourceError."""
    with pytest.raises(PageSourceError):
        HtmlPageSource.from_file(tmp_path / "nope.html")


def test_local_read_without_page_directory() -> None:
    """Pages parsed from a string have no directory to read scripts from."""
    source = HtmlPageSource(html="<html><head><script src='a.js'></script></head></html>")
    with pytest.raises(ScriptUnavailableError):
        source._read_local("a.js")
