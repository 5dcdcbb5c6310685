from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Dict, Optional


class StaticLabelNames:
    """Label-name table shaped like ``[{"label": 3, "name": "chair"}, ...]``."""

    def __init__(self, entries: Iterable[Mapping[str, Any]] = ()) -> None:
        self._names: Dict[int, str] = {}
        self.resolved: Dict[str, str] = {}
        for entry in entries:
            if "label" not in entry or "name" not in entry:
                continue
            # first entry wins, like a linear scan over the table
            self._names.setdefault(int(entry["label"]), str(entry["name"]))

    def name_for(self, semantic_label: int) -> Optional[str]:
        return self._names.get(semantic_label)

    def record(self, unique_id: str, display_name: str) -> None:
        self.resolved[unique_id] = display_name
