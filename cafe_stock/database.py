# cafe_stock/database.py
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from .exceptions import PersistenceError

# Key-value persistence slots. Values are opaque strings, like localStorage.

logger = logging.getLogger(__name__)

class KeyValueSlot:
    """set() may raise anything; ProductStore reports every failure as PersistenceError."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

class MemorySlot(KeyValueSlot):
    """Process-local slot. Survives a ProductStore being rebuilt, not the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

class JsonFileSlot(KeyValueSlot):
    """
    Slot backed by one JSON object on disk: {key: serialized value}.

    A missing or unreadable file reads as "no value"; write failures raise
    PersistenceError so the caller can undo its change.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self, rewriting: bool = False) -> Dict[str, str]:
        # rewriting: the result is about to replace the file, so anything
        # dropped here is lost for good
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            if rewriting:
                logger.warning("Storage file %s is unreadable (%s); rewriting it and discarding its other keys",
                               self.path, e)
            else:
                logger.warning("Ignoring unreadable storage file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            if rewriting:
                logger.warning("Storage file %s is not a JSON object; rewriting it and discarding its contents",
                               self.path)
            else:
                logger.warning("Ignoring storage file %s: expected a JSON object", self.path)
            return {}
        kept = {k: v for k, v in data.items() if isinstance(v, str)}
        if rewriting and len(kept) != len(data):
            logger.warning("Discarding non-string keys %s from storage file %s",
                           sorted(set(data) - set(kept)), self.path)
        return kept

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all(rewriting=True)
        data[key] = value
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp.replace(self.path)
        except OSError as e:
            logger.error("Failed to write storage file %s: %s", self.path, e)
            raise PersistenceError(str(e)) from e
        finally:
            if tmp.exists():
                tmp.unlink()
