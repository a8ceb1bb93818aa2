"""
Application layer

Use-case orchestration on top of the domain: the access control engine, the
expiry reaper, the result type they return, and service wiring helpers.
"""

from .access_control_service import (
    AccessControlEngine,
    AccessibleObjects,
    LinkInfo,
    ObjectDownload,
    ObjectShares,
)
from .operation_result import OperationResult
from .reaper_service import ExpiryReaper, ReapReport
from .upload_policy import UploadPolicy

__all__ = [
    "AccessControlEngine",
    "AccessibleObjects",
    "ExpiryReaper",
    "LinkInfo",
    "ObjectDownload",
    "ObjectShares",
    "OperationResult",
    "ReapReport",
    "UploadPolicy",
]
