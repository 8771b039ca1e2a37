from watchpick.infrastructure.persistence.factory import build_key_value_store
from watchpick.infrastructure.persistence.file_key_value_store import FileKeyValueStore
from watchpick.infrastructure.persistence.in_memory_key_value_store import InMemoryKeyValueStore

__all__ = ["FileKeyValueStore", "InMemoryKeyValueStore", "build_key_value_store"]
