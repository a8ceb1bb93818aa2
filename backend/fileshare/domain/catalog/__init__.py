"""
Metadata Catalog Domain

One record per stored object: owner, display name, content type, size and
blob reference.
"""

from .entities import StoredObject
from .repositories import ObjectCatalog
from .value_objects import ObjectId

__all__ = [
    "ObjectCatalog",
    "ObjectId",
    "StoredObject",
]
