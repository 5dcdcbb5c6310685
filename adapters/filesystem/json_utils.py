from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import orjson

from domain.models import PrimitiveBatch


def load_json(path: Path) -> dict[str, Any]:
    data = orjson.loads(path.read_bytes())
    if not isinstance(data, dict):
        msg = f"Expected a JSON object in {path}, got {type(data).__name__}"
        raise ValueError(msg)
    return data


def dump_json_bytes(payload: Any) -> bytes:
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2)


def dump_batches(batches: Iterable[PrimitiveBatch]) -> bytes:
    return dump_json_bytes([batch.to_dict() for batch in batches])
