"""Shared fixtures for build request tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest

from dtkbuild.build.collaborators import LocalPackageRepository


@pytest.fixture
def request_data() -> Dict[str, Any]:
    return {
        "packages": [{"name": "dojo", "version": "1.9"}],
        "cdn": "none",
        "optimise": "closure",
        "cssOptimise": "comments",
        "platforms": "",
        "themes": "",
        "layers": [
            {"name": "dojo.js", "modules": [{"name": "dojo.parser", "package": "dojo"}]}
        ],
    }


@pytest.fixture
def repository(tmp_path: Path) -> LocalPackageRepository:
    root = tmp_path / "packages"
    for name, version in (("dojo", "1.9"), ("dojo", "1.10"), ("app", "2.0"), ("extras", "0.3")):
        (root / name / version).mkdir(parents=True)
    return LocalPackageRepository(root)
