"""Client-side persistence of saved tickers.

Storage follows browser ``localStorage`` semantics: string keys, string values,
one document per key. Each signed-in email gets its own key from
``tiles_key``. Anything unreadable is treated as "nothing saved".
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Union

from stockresearch.core.config import settings
from stockresearch.core.logging import get_logger


logger = get_logger("client.storage")

TILES_NAMESPACE = "stockresearch:tiles"


def tiles_key(email: str) -> str:
    """Storage key holding the saved ticker list for an email."""
    return f"{TILES_NAMESPACE}:{email}"


class TileStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryTileStorage:
    """Storage that lives as long as the object."""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class JsonFileTileStorage:
    """All keys in one JSON object on disk. Writes are whole-file replaces."""

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path or settings.client_storage_path).expanduser()

    def _read(self) -> Dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable storage file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(items, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if items.pop(key, None) is not None:
            self._write(items)


def load_tickers(storage: TileStorage, email: str) -> List[str]:
    """Saved tickers for an email. Missing or corrupt data reads as []."""
    raw = storage.get_item(tiles_key(email))
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except ValueError:
        return []
    if not isinstance(parsed, list):
        return []
    return [symbol for symbol in parsed if isinstance(symbol, str) and symbol]


def save_tickers(storage: TileStorage, email: str, symbols: Iterable[str]) -> None:
    storage.set_item(tiles_key(email), json.dumps(list(symbols)))
