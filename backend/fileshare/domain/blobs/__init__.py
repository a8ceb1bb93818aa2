"""
Blob Storage Domain

Contract for the opaque blob backend consumed by the access control engine.
"""

from .storage_repository import BlobStore

__all__ = ["BlobStore"]
