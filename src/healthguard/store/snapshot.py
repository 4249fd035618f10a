"""Village snapshot files.

A snapshot is a JSON array of village records with camelCase keys. Optional
fields may be absent (older snapshots have no ``comments`` or
``lastAnalysis``) and load with their defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import orjson
from pydantic import TypeAdapter, ValidationError

from healthguard.errors import SnapshotError
from healthguard.models import Village


_VILLAGE_LIST = TypeAdapter(list[Village])


def dump_villages(villages: Iterable[Village]) -> bytes:
    """Serialize villages to snapshot bytes."""
    records = [village.model_dump(mode="json", by_alias=True) for village in villages]
    return orjson.dumps(records, option=orjson.OPT_INDENT_2)


def parse_villages(data: bytes | str) -> list[Village]:
    """Parse snapshot bytes into villages."""
    try:
        records = orjson.loads(data)
    except orjson.JSONDecodeError as exc:
        raise SnapshotError(f"Snapshot is not valid JSON: {exc}") from exc
    if not isinstance(records, list):
        raise SnapshotError("Snapshot must be a JSON array of villages")
    try:
        return _VILLAGE_LIST.validate_python(records)
    except ValidationError as exc:
        raise SnapshotError(f"Snapshot has invalid village records: {exc}") from exc


def load_villages(path: Path) -> Optional[list[Village]]:
    """Load a snapshot, or return None when the file does not exist."""
    if not path.exists():
        return None
    return parse_villages(path.read_bytes())


def save_villages(path: Path, villages: Iterable[Village]) -> None:
    """Write a snapshot atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_bytes(dump_villages(villages))
    tmp_path.replace(path)
