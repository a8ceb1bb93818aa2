"""
Sharing Domain

Grant ledger: user-to-user grants and tokenized share links with optional
expiry, filtered at read time.
"""

from .entities import Grant, ShareLink
from .repositories import ShareRepository
from .services import GrantLedger
from .value_objects import ShareToken

__all__ = [
    "Grant",
    "GrantLedger",
    "ShareLink",
    "ShareRepository",
    "ShareToken",
]
