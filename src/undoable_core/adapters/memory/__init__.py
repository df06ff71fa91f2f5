from .cache_scope import InMemoryCacheScope
from .data_object import InMemoryDataObject, InMemoryDataType

__all__ = [
    "InMemoryCacheScope",
    "InMemoryDataObject",
    "InMemoryDataType",
]
