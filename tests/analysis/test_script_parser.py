"""Script dependency parser tests."""

from __future__ import annotations

from dtkbuild.analysis.script_parser import (
    AmdScriptParser,
    NonAmdScriptParser,
    parser_for,
)
from dtkbuild.types import ModuleFormat


def test_amd_parser_reads_require_dependency_array() -> None:
    """require([...]) dependency arrays should be returned in order."""
    source = 'require(["app/main", "app/widgets/Grid"], function (main, Grid) { main.start(); });'
    assert AmdScriptParser().parse(source) == ["app/main", "app/widgets/Grid"]


def test_amd_parser_reads_named_define() -> None:
    """define("id", [...], factory) should use the array argument."""
    source = """
define("app/run", ['dojo/_base/lang', "./util"], function (lang, util) {
    return {};
});
"""
    assert AmdScriptParser().parse(source) == ["dojo/_base/lang", "./util"]


def test_amd_parser_skips_non_literal_entries() -> None:
    """Variables inside a dependency array are not identifiers."""
    source = 'var dep = "x"; require([dep, "dojo/dom"], function () {});'
    assert AmdScriptParser().parse(source) == ["dojo/dom"]


def test_amd_parser_ignores_legacy_calls() -> None:
    """dojo.require is not an AMD dependency declaration."""
    assert AmdScriptParser().parse('dojo.require("dijit.form.Button");') == []


def test_non_amd_parser_reads_dojo_require() -> None:
    """Legacy dojo.require statements should be returned in order."""
    source = """
dojo.require("dijit.form.Button");
dojo.require('dojox.grid.DataGrid');
dojo.addOnLoad(function () { dojo.require("dojo.parser"); });
"""
    assert NonAmdScriptParser().parse(source) == [
        "dijit.form.Button",
        "dojox.grid.DataGrid",
        "dojo.parser",
    ]


def test_non_amd_parser_ignores_amd_calls() -> None:
    """Plain require([...]) calls are not legacy declarations."""
    assert NonAmdScriptParser().parse('require(["app/main"]);') == []


def test_malformed_script_yields_empty_list() -> None:
    """Syntax errors should produce an empty list rather than raise."""
    source = 'require(["app/main"], function ( {'
    assert AmdScriptParser().parse(source) == []
    assert NonAmdScriptParser().parse("dojo.require(('x';") == []


def test_unrelated_script_yields_empty_list() -> None:
    """Scripts without module declarations produce nothing."""
    assert AmdScriptParser().parse("var x = 1 + 2; console.log(x);") == []
    assert AmdScriptParser().parse("") == []


def test_parser_selection_follows_module_format() -> None:
    """parser_for should pick the variant from the module format alone."""
    assert isinstance(parser_for(ModuleFormat.AMD), AmdScriptParser)
    assert isinstance(parser_for(ModuleFormat.NON_AMD), NonAmdScriptParser)
    assert parser_for(ModuleFormat.AMD) is not parser_for(ModuleFormat.AMD)
