from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Iterable, Mapping, Protocol

from launchgate.common.types import GateDecision, GateState, WebSession


log = logging.getLogger(__name__)

STATE_FILE_NAME = "launch_state.v1.json"

KEY_SAVED_DESTINATION = "gate.saved_destination_url"
KEY_USE_WEB_SESSION = "gate.use_web_session"
KEY_RESOLVED = "gate.resolved"


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...

    def update(self, values: Mapping[str, Any], removed: Iterable[str] = ()) -> None: ...

    def clear(self) -> None: ...


class JsonFileStore:
    """Key-value store persisted as one JSON document in the state directory.

    Every write rewrites the whole document through a temp file so a crash
    mid-write leaves the previous document intact.
    """

    def __init__(self, state_dir: Path, file_name: str = STATE_FILE_NAME):
        self.path = state_dir / file_name
        self._lock = threading.Lock()
        self._data = self._read()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            # utf-8-sig accepts a BOM left behind by hand edits.
            with self.path.open("r", encoding="utf-8-sig") as fh:
                raw = json.load(fh)
        except (OSError, ValueError) as exc:
            log.warning("Persisted state at %s is unreadable, starting empty: %s", self.path, exc)
            return {}
        if not isinstance(raw, dict):
            log.warning("Persisted state at %s is not an object, starting empty.", self.path)
            return {}
        return raw

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(self._data, fh, indent=2, sort_keys=True)
        tmp.replace(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value
            self._write()

    def delete(self, key: str) -> None:
        with self._lock:
            if key in self._data:
                del self._data[key]
                self._write()

    def update(self, values: Mapping[str, Any], removed: Iterable[str] = ()) -> None:
        """Apply several writes and removals as one atomic rewrite."""
        with self._lock:
            for key in removed:
                self._data.pop(key, None)
            self._data.update(values)
            self._write()

    def clear(self) -> None:
        with self._lock:
            self._data = {}
            if self.path.exists():
                self.path.unlink()


class GateStateStore:
    def __init__(self, storage: KeyValueStore):
        self.storage = storage

    def load(self) -> GateState:
        destination = self.storage.get(KEY_SAVED_DESTINATION)
        return GateState(
            resolved=bool(self.storage.get(KEY_RESOLVED, False)),
            use_web_session=bool(self.storage.get(KEY_USE_WEB_SESSION, False)),
            saved_destination_url=str(destination) if destination else None,
        )

    def saved_destination(self) -> str | None:
        return self.load().saved_destination_url

    def save(self, decision: GateDecision) -> None:
        if isinstance(decision, WebSession):
            self.storage.update(
                {
                    KEY_SAVED_DESTINATION: decision.destination_url,
                    KEY_USE_WEB_SESSION: True,
                    KEY_RESOLVED: True,
                }
            )
        else:
            self.storage.update(
                {KEY_USE_WEB_SESSION: False, KEY_RESOLVED: True},
                removed=(KEY_SAVED_DESTINATION,),
            )
        log.info("Gate decision persisted: %s", decision)

    def update_destination(self, url: str) -> None:
        if self.storage.get(KEY_SAVED_DESTINATION) == url:
            return
        self.storage.set(KEY_SAVED_DESTINATION, url)
        log.debug("Saved destination updated to %s", url)

    def clear(self) -> None:
        self.storage.clear()
        log.info("All persisted launch state cleared.")
