"""Persistence port, storage backends and the JSON codec for expense slots."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol

from .exceptions import PersistenceError
from .logging_setup import get_logger
from .models import ExpenseItem

logger = get_logger("storage")


class KeyValueStorage(Protocol):
    """A durable set of named byte slots."""

    def load(self, key: str) -> Optional[bytes]:
        ...

    def save(self, key: str, data: bytes) -> None:
        ...


class JSONStorage:
    """File-based slots, one ``<key>.json`` file each, with crash-safe writes."""

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        self._base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self._base_path / f"{key}.json"

    def load(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

    def save(self, key: str, data: bytes) -> None:
        path = self._path(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("wb") as handle:
                handle.write(data)
                handle.flush()
            # Use replace for atomic move on POSIX; ensures crash-safe persistence.
            temp_path.replace(path)
        except OSError as exc:
            raise PersistenceError(f"Unable to write to {path}") from exc

    @property
    def base_path(self) -> Path:
        return self._base_path


class MemoryStorage:
    """In-process slots, for tests and embedding."""

    def __init__(self, slots: Optional[Dict[str, bytes]] = None) -> None:
        self.slots: Dict[str, bytes] = dict(slots or {})

    def load(self, key: str) -> Optional[bytes]:
        return self.slots.get(key)

    def save(self, key: str, data: bytes) -> None:
        self.slots[key] = bytes(data)


def encode_items(items: Iterable[ExpenseItem]) -> bytes:
    """Serialise records as a UTF-8 JSON array in the persisted layout."""
    # Non-finite amounts raise ValueError instead of being written as Infinity.
    return json.dumps([item.to_dict() for item in items], indent=2, allow_nan=False).encode("utf-8")


def decode_items(data: Optional[bytes]) -> List[ExpenseItem]:
    """Parse a slot's bytes; anything that does not decode cleanly yields ``[]``."""
    if data is None:
        return []
    try:
        payload = json.loads(data.decode("utf-8"), parse_float=Decimal)
        if not isinstance(payload, list):
            raise TypeError(f"expected a JSON array, got {type(payload).__name__}")
        items = [ExpenseItem.from_dict(entry) for entry in payload]
        if len({item.id for item in items}) != len(items):
            raise ValueError("duplicate expense ids")
        return items
    except (UnicodeDecodeError, ValueError, TypeError, KeyError, RecursionError) as exc:
        logger.warning("Discarding undecodable expense data: %s", exc)
        return []
