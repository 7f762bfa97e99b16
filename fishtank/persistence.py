"""
Save/load of the authoritative state through an opaque key-value store.

The whole state lives in one slot (SAVE_KEY) as a JSON document. Loading
merges stored fields over defaults; a slot that is present but unreadable is
treated as "no save". Writes go through BackgroundSaver so a slow or failing
store never delays or corrupts the next tick.
"""

import json
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import jsonschema

from .catalog import SpeciesCatalog
from .constants import SAVE_KEY, SAVE_FLUSH_TIMEOUT
from .errors import CorruptedSaveData, PersistenceWriteFailure, UnknownSpecies
from .state import AquariumState


SAVE_SCHEMA_PATH = Path(__file__).parent / "data" / "schemas" / "save.schema.json"


# ============================================================================
# Stores
# ============================================================================

class KeyValueStore:
    """Minimal store interface: get() returns None for a missing key"""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str):
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """In-process store (tests, headless runs without --save-dir)"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str):
        with self._lock:
            self._data[key] = value


class FileStore(KeyValueStore):
    """One JSON file per key inside a directory, replaced atomically"""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def set(self, key: str, value: str):
        path = self.path_for(key)
        tmp_path = path.with_suffix('.json.tmp')
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                f.write(value)
            os.replace(tmp_path, path)
        except OSError as e:
            raise PersistenceWriteFailure(f"Could not write {path}: {e}") from e


# ============================================================================
# Encoding
# ============================================================================

@dataclass
class SaveData:
    """Decoded save slot"""
    state: AquariumState
    quests: Dict[str, dict] = field(default_factory=dict)


def encode_save(state: AquariumState, quest_progress: Optional[Dict[str, dict]] = None) -> str:
    """Serialize state (and quest progress) to the save document"""
    payload = state.to_dict()
    payload['quests'] = quest_progress or {}
    return json.dumps(payload, sort_keys=True)


_save_schema: Optional[dict] = None


def _load_save_schema() -> dict:
    global _save_schema
    if _save_schema is None:
        with open(SAVE_SCHEMA_PATH, 'r', encoding='utf-8') as f:
            _save_schema = json.load(f)
    return _save_schema


def decode_save(text: str, catalog: Optional[SpeciesCatalog] = None) -> SaveData:
    """
    Parse a save document.

    Args:
        text: Save document
        catalog: When given, every creature must reference a registered species

    Raises:
        CorruptedSaveData: not JSON, wrong shape, values out of range, or an
            unregistered species
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptedSaveData(f"Save is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise CorruptedSaveData(f"Save root must be an object, got {type(data).__name__}")

    try:
        jsonschema.validate(instance=data, schema=_load_save_schema())
    except jsonschema.ValidationError as e:
        raise CorruptedSaveData(f"Save failed validation: {e.message}") from e

    quests = data.pop('quests', {})
    try:
        state = AquariumState.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise CorruptedSaveData(f"Save has malformed fields: {e}") from e

    if catalog is not None:
        try:
            catalog.check_state(state)
        except UnknownSpecies as e:
            raise CorruptedSaveData(f"Save references {e}") from e

    return SaveData(state=state, quests=quests)


def load_save(
    store: KeyValueStore,
    key: str = SAVE_KEY,
    catalog: Optional[SpeciesCatalog] = None
) -> Optional[SaveData]:
    """
    Read and decode the save slot.

    Returns:
        SaveData, or None when the slot is empty or corrupted (corruption is
        reported and otherwise ignored)
    """
    try:
        text = store.get(key)
    except OSError as e:
        print(f"[WARN] Could not read save slot {key}: {e}")
        return None
    except UnicodeDecodeError as e:
        print(f"[WARN] Save file corrupted, starting fresh: not UTF-8 text ({e})")
        return None

    if text is None:
        return None

    try:
        return decode_save(text, catalog)
    except CorruptedSaveData as e:
        print(f"[WARN] Save file corrupted, starting fresh: {e}")
        return None


# ============================================================================
# Background writer
# ============================================================================

class BackgroundSaver:
    """
    Fire-and-forget writer on a single daemon thread.

    Holds at most one pending document; a newer submit() replaces an older
    one that has not been written yet. Failures are counted and reported,
    never raised to the submitter.
    """

    def __init__(self, store: KeyValueStore, key: str = SAVE_KEY):
        self.store = store
        self.key = key
        self.writes = 0
        self.failures = 0
        self.last_error: Optional[Exception] = None

        self._cond = threading.Condition()
        self._pending: Optional[str] = None
        self._busy = False
        self._closed = False
        self._thread = threading.Thread(target=self._run, name="fishtank-saver", daemon=True)
        self._thread.start()

    def submit(self, document: str):
        with self._cond:
            if self._closed:
                return
            self._pending = document
            self._cond.notify_all()

    def flush(self, timeout: float = SAVE_FLUSH_TIMEOUT) -> bool:
        """Block until nothing is pending or in flight; False on timeout"""
        with self._cond:
            return self._cond.wait_for(lambda: self._pending is None and not self._busy, timeout)

    def close(self, timeout: float = SAVE_FLUSH_TIMEOUT):
        """Write whatever is pending, then stop the worker"""
        self.flush(timeout)
        with self._cond:
            self._closed = True
            self._cond.notify_all()
        self._thread.join(timeout)

    def _run(self):
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._pending is not None or self._closed)
                if self._pending is None:
                    return
                document = self._pending
                self._pending = None
                self._busy = True

            try:
                self.store.set(self.key, document)
                self.writes += 1
            except Exception as e:
                self.failures += 1
                self.last_error = e
                print(f"[WARN] Save write failed (state kept in memory): {e}")
            finally:
                with self._cond:
                    self._busy = False
                    self._cond.notify_all()
