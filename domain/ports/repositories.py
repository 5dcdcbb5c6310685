from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import SceneGraphDocument


class SceneGraphRepository(Protocol):
    def load_by_path(self, path: Path) -> SceneGraphDocument: ...

    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, SceneGraphDocument]]: ...
