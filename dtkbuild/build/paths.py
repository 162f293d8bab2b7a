"""Build result location conventions. Pure path derivations, no I/O."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List


@dataclass(frozen=True)
class BuildResultLocation:
    """Where the artifacts of one build live inside the result cache.

    Layout::

        <cache_root>/<build_reference>/<archive_filename>
        <cache_root>/<build_reference>/<layer_artifact_subpath>/<layer name>
    """

    cache_root: Path
    build_reference: str
    archive_filename: str = "dojo.zip"
    layer_artifact_subpath: str = "dojo/dojo"

    @property
    def result_dir(self) -> Path:
        return Path(self.cache_root) / self.build_reference

    @property
    def archive_path(self) -> Path:
        return self.result_dir / self.archive_filename

    @property
    def layer_artifact_dir(self) -> Path:
        return self.result_dir / self.layer_artifact_subpath

    def layer_output_path(self, layer_name: str) -> Path:
        return self.layer_artifact_dir / layer_name

    def layer_output_paths(self, layer_names: Iterable[str]) -> List[Path]:
        return [self.layer_output_path(name) for name in layer_names]


__all__ = ["BuildResultLocation"]
