"""
Order store and requirements provider implementations.
"""

from .file_store import JsonFileOrderStore, YamlRequirementsProvider
from .memory import InMemoryOptionsProvider, InMemoryOrderStore, InMemoryRequirementsProvider

__all__ = [
    "InMemoryOrderStore",
    "InMemoryRequirementsProvider",
    "InMemoryOptionsProvider",
    "JsonFileOrderStore",
    "YamlRequirementsProvider",
]
