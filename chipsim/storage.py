"""
Persistence collaborators for the table state.

Stores map a logical key to a JSON-compatible dictionary. The engine saves
its full aggregate (never the undo history) under the "poker" key after
every transition; loading tolerates partial or older payloads.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Optional, Any
import copy
import json
import logging
import os

from chipsim.core.errors import StorageError
from chipsim.core.game import PokerEngine
from chipsim.core.rules import STORAGE_KEY


logger = logging.getLogger(__name__)


class BaseStore(ABC):
    """Key-value store for saved table state."""

    @abstractmethod
    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Load a saved payload.

        Returns:
            The saved dictionary, or None if nothing is stored under key

        Raises:
            StorageError: If the stored data cannot be read
        """

    @abstractmethod
    def save(self, key: str, data: Dict[str, Any]) -> None:
        """
        Save a payload under key, replacing any previous value.

        Raises:
            StorageError: If the data cannot be written
        """


class MemoryStore(BaseStore):
    """In-process store, mainly for tests and the default service."""

    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = {}

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        data = self._data.get(key)
        return copy.deepcopy(data) if data is not None else None

    def save(self, key: str, data: Dict[str, Any]) -> None:
        self._data[key] = copy.deepcopy(data)


class JsonFileStore(BaseStore):
    """One ``<key>.json`` file per key inside a directory."""

    def __init__(self, directory: str):
        self.directory = os.path.expanduser(directory)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected content in {path}")
        return data

    def save(self, key: str, data: Dict[str, Any]) -> None:
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Cannot write {path}: {e}") from e


def save_engine(store: BaseStore, engine: PokerEngine) -> None:
    """Save the engine's table and series stats."""
    store.save(STORAGE_KEY, engine.to_dict())


def load_engine(store: BaseStore, autosave: bool = True) -> PokerEngine:
    """
    Restore an engine from a store.

    Unreadable or missing data gives an engine in the setup phase.

    Args:
        store: Store to read from
        autosave: Attach the store so the engine saves after each transition

    Returns:
        A PokerEngine with an empty undo history
    """
    try:
        data = store.load(STORAGE_KEY)
    except StorageError as e:
        logger.warning(f"Could not load saved table, starting fresh: {e}")
        data = None

    engine = PokerEngine.from_dict(data, store=store if autosave else None)
    if data:
        logger.info(
            f"Loaded table: {len(engine.state.players)} players, "
            f"phase={engine.state.phase.value}"
        )
    return engine
