"""Service configuration loading.

``load_config`` accepts nothing (defaults), an already-parsed mapping, a
path to a ``.toml``/``.json`` file, or inline TOML/JSON text.
"""

from __future__ import annotations

import json
import logging
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from dtkbuild.config.schema import ServiceConfig

logger = logging.getLogger("dtkbuild.runtime.config_loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]

SUFFIX_FORMATS = {".toml": "toml", ".tml": "toml", ".json": "json"}

# A leading TOML table header, e.g. "[analyzer]" or "[[layers]]"
_TOML_TABLE_RE = re.compile(r"\[\[?[A-Za-z0-9_.\-\"' ]+\]\]?[ \t]*(?:\r?\n|$)")


def _guess_format(text: str) -> str:
    head = text.lstrip()
    if head.startswith("{"):
        return "json"
    if head.startswith("[") and _TOML_TABLE_RE.match(head) is None:
        return "json"
    return "toml"


def _existing_file(source: Union[str, Path]) -> Optional[Path]:
    # Multi-line strings are always inline documents
    if isinstance(source, str) and "\n" in source:
        return None
    path = Path(source)
    try:
        return path if path.is_file() else None
    except OSError:
        # Name too long for the filesystem
        return None


def _read_source(source: Union[str, Path]) -> Tuple[str, str]:
    """Return ``(text, format)`` for a file path or inline document."""
    path = _existing_file(source)
    if path is None:
        text = str(source)
        fmt = _guess_format(text)
        logger.info("Loading configuration from inline %s text", fmt)
        return text, fmt

    text = path.read_text(encoding="utf-8")
    fmt = SUFFIX_FORMATS.get(path.suffix.lower()) or _guess_format(text)
    logger.info("Loading configuration from %s (%s)", path, fmt)
    return text, fmt


def _parse_document(text: str, fmt: str) -> Dict[str, Any]:
    data = json.loads(text) if fmt == "json" else tomllib.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration document must be a table, got {type(data).__name__}")
    return data


def load_config(source: ConfigSource) -> ServiceConfig:
    """Build a ServiceConfig from ``source``.

    Args:
        source: ``None`` for defaults, a mapping, a file path, or inline
            TOML/JSON text.

    Raises:
        ValueError: If the document's top level is not a mapping.
        TypeError: If ``source`` is of an unsupported type.
    """
    if source is None:
        logger.debug("No configuration source; using defaults")
        return ServiceConfig.default()
    if isinstance(source, dict):
        return ServiceConfig.from_dict(source)
    if not isinstance(source, (str, Path)):
        raise TypeError(f"Unsupported config source type: {type(source)!r}")

    text, fmt = _read_source(source)
    return ServiceConfig.from_dict(_parse_document(text, fmt))


__all__ = ["ConfigSource", "load_config"]
