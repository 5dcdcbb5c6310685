from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from adapters.filesystem.json_utils import load_json
from domain.models import SceneGraphDocument
from domain.ports.repositories import SceneGraphRepository


class FileSystemSceneGraphRepository(SceneGraphRepository):
    def load_by_path(self, path: Path) -> SceneGraphDocument:
        return SceneGraphDocument.model_validate(load_json(path))

    def load_all_with_paths(self, directory: Path) -> List[tuple[Path, SceneGraphDocument]]:
        return [(path, self.load_by_path(path)) for path in sorted(self._iter_paths(directory))]

    def _iter_paths(self, directory: Path) -> Iterable[Path]:
        yield from directory.glob("*.json")
