from __future__ import annotations

from typing import Optional, Protocol


class LabelNameLookup(Protocol):
    def name_for(self, semantic_label: int) -> Optional[str]: ...

    def record(self, unique_id: str, display_name: str) -> None: ...
