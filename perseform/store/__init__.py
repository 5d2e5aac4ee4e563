"""Value store backends for perseform.

Provides the ValueStore protocol and two implementations: an in-process
dict store and a JSON-file store.
"""

from perseform.store.base import Namespace, ValueStore
from perseform.store.json_file import JsonFileValueStore
from perseform.store.memory import InMemoryValueStore

__all__ = [
    "InMemoryValueStore",
    "JsonFileValueStore",
    "Namespace",
    "ValueStore",
]
