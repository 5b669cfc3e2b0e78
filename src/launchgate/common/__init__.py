from launchgate.common.config import AppPaths, GateConfig
from launchgate.common.profile_store import ProfileStore
from launchgate.common.state import GateStateStore, JsonFileStore, KeyValueStore

__all__ = [
    "AppPaths",
    "GateConfig",
    "GateStateStore",
    "JsonFileStore",
    "KeyValueStore",
    "ProfileStore",
]
